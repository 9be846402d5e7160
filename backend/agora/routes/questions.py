# backend/agora/routes/questions.py
"""
Q&A question routes

Endpoints:
    POST   /ask            → Ask a question
    GET    /               → Paged list, optional tag filter (public)
    GET    /{question_id}  → Question with its answers (public)
    PUT    /{question_id}  → Edit own question
    DELETE /{question_id}  → Delete own question and its answers
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_question_service
from ..core.constants import DEFAULT_QUESTIONS_PAGE_SIZE
from ..models.user import User
from ..schemas.auth import MessageResponse
from ..schemas.question import (
    AnswerOut,
    QuestionCreate,
    QuestionDetailResponse,
    QuestionListResponse,
    QuestionOut,
    QuestionUpdate,
)
from ..services.question_service import QuestionService

router = APIRouter(tags=["questions"])


@router.post("/ask", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
async def ask_question(
    payload: QuestionCreate,
    current_user: User = Depends(get_current_user),
    question_service: QuestionService = Depends(get_question_service),
) -> QuestionOut:
    question = await asyncio.to_thread(
        question_service.ask_question,
        current_user.id,
        payload.title,
        payload.content,
        payload.tags,
    )
    return QuestionOut.from_model(question)


@router.get("", response_model=QuestionListResponse)
async def list_questions(
    page: int = Query(1),
    limit: int = Query(DEFAULT_QUESTIONS_PAGE_SIZE),
    tag: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    question_service: QuestionService = Depends(get_question_service),
) -> QuestionListResponse:
    return await asyncio.to_thread(question_service.list_questions, page, limit, tag, sort_by)


@router.get("/{question_id}", response_model=QuestionDetailResponse)
async def get_question(
    question_id: str,
    question_service: QuestionService = Depends(get_question_service),
) -> QuestionDetailResponse:
    question, answers = await asyncio.to_thread(question_service.get_question, question_id)
    return QuestionDetailResponse(
        question=QuestionOut.from_model(question),
        answers=[AnswerOut.from_model(answer) for answer in answers],
    )


@router.put("/{question_id}", response_model=QuestionOut)
async def update_question(
    question_id: str,
    payload: QuestionUpdate,
    current_user: User = Depends(get_current_user),
    question_service: QuestionService = Depends(get_question_service),
) -> QuestionOut:
    question = await asyncio.to_thread(
        question_service.update_question,
        current_user.id,
        question_id,
        payload.title,
        payload.content,
        payload.tags,
    )
    return QuestionOut.from_model(question)


@router.delete("/{question_id}", response_model=MessageResponse)
async def delete_question(
    question_id: str,
    current_user: User = Depends(get_current_user),
    question_service: QuestionService = Depends(get_question_service),
) -> MessageResponse:
    await asyncio.to_thread(question_service.delete_question, current_user.id, question_id)
    return MessageResponse(message="Question and associated answers deleted successfully.")
