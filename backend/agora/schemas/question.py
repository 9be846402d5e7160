# backend/agora/schemas/question.py
"""Q&A forum schemas."""

from datetime import datetime
from typing import Any, List, Optional

from ..models.question import Answer, Question
from ._strict_base import StrictModel, StrictRequestModel
from .user import UserProfile


class QuestionCreate(StrictRequestModel):
    title: str
    content: str
    tags: Optional[List[Any]] = None


class QuestionUpdate(StrictRequestModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[Any]] = None


class QuestionOut(StrictModel):
    id: str
    title: str
    content: str
    tags: List[str]
    author_id: UserProfile
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, question: Question) -> "QuestionOut":
        return cls(
            id=question.id,
            title=question.title,
            content=question.content,
            tags=question.tags,
            author_id=UserProfile.model_validate(question.author),
            created_at=question.created_at,
            updated_at=question.updated_at,
        )


class QuestionListResponse(StrictModel):
    questions: List[QuestionOut]
    total_pages: int
    current_page: int
    total_questions: int


class AnswerCreate(StrictRequestModel):
    content: str


class AnswerUpdate(StrictRequestModel):
    content: str


class VoteRequest(StrictRequestModel):
    vote_type: str


class AnswerOut(StrictModel):
    id: str
    content: str
    author_id: UserProfile
    question_id: str
    votes: int
    is_best_answer: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, answer: Answer) -> "AnswerOut":
        return cls(
            id=answer.id,
            content=answer.content,
            author_id=UserProfile.model_validate(answer.author),
            question_id=answer.question_id,
            votes=answer.votes,
            is_best_answer=answer.is_best_answer,
            created_at=answer.created_at,
            updated_at=answer.updated_at,
        )


class QuestionDetailResponse(StrictModel):
    question: QuestionOut
    answers: List[AnswerOut]
