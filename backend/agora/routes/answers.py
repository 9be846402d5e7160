# backend/agora/routes/answers.py
"""
Q&A answer routes

Endpoints:
    POST   /questions/{question_id}/answers → Answer a question
    GET    /questions/{question_id}/answers → Answers, best first then by votes (public)
    PUT    /answers/{answer_id}             → Edit own answer
    DELETE /answers/{answer_id}             → Delete own answer
    POST   /answers/{answer_id}/vote        → Upvote or downvote
    POST   /answers/{answer_id}/mark-best   → Question author picks the best answer
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_answer_service
from ..models.user import User
from ..schemas.auth import MessageResponse
from ..schemas.question import AnswerCreate, AnswerOut, AnswerUpdate, VoteRequest
from ..services.answer_service import AnswerService

router = APIRouter(tags=["answers"])


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerOut,
    status_code=status.HTTP_201_CREATED,
)
async def post_answer(
    question_id: str,
    payload: AnswerCreate,
    current_user: User = Depends(get_current_user),
    answer_service: AnswerService = Depends(get_answer_service),
) -> AnswerOut:
    answer = await asyncio.to_thread(
        answer_service.post_answer, current_user.id, question_id, payload.content
    )
    return AnswerOut.from_model(answer)


@router.get("/questions/{question_id}/answers", response_model=List[AnswerOut])
async def list_answers(
    question_id: str,
    answer_service: AnswerService = Depends(get_answer_service),
) -> List[AnswerOut]:
    answers = await asyncio.to_thread(answer_service.list_answers, question_id)
    return [AnswerOut.from_model(answer) for answer in answers]


@router.put("/answers/{answer_id}", response_model=AnswerOut)
async def update_answer(
    answer_id: str,
    payload: AnswerUpdate,
    current_user: User = Depends(get_current_user),
    answer_service: AnswerService = Depends(get_answer_service),
) -> AnswerOut:
    answer = await asyncio.to_thread(
        answer_service.update_answer, current_user.id, answer_id, payload.content
    )
    return AnswerOut.from_model(answer)


@router.delete("/answers/{answer_id}", response_model=MessageResponse)
async def delete_answer(
    answer_id: str,
    current_user: User = Depends(get_current_user),
    answer_service: AnswerService = Depends(get_answer_service),
) -> MessageResponse:
    await asyncio.to_thread(answer_service.delete_answer, current_user.id, answer_id)
    return MessageResponse(message="Answer deleted successfully.")


@router.post("/answers/{answer_id}/vote", response_model=AnswerOut)
async def vote_answer(
    answer_id: str,
    payload: VoteRequest,
    current_user: User = Depends(get_current_user),
    answer_service: AnswerService = Depends(get_answer_service),
) -> AnswerOut:
    answer = await asyncio.to_thread(answer_service.vote, answer_id, payload.vote_type)
    return AnswerOut.from_model(answer)


@router.post("/answers/{answer_id}/mark-best", response_model=AnswerOut)
async def mark_best_answer(
    answer_id: str,
    current_user: User = Depends(get_current_user),
    answer_service: AnswerService = Depends(get_answer_service),
) -> AnswerOut:
    answer = await asyncio.to_thread(answer_service.mark_best, current_user.id, answer_id)
    return AnswerOut.from_model(answer)
