# backend/agora/services/question_service.py
"""
Question Service for the Q&A forum.

Questions are public to read; only the author may edit or delete one.
Deleting a question removes its answers with it.
"""

import logging
import math
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUESTIONS_PAGE_SIZE, MAX_QUESTIONS_PAGE_SIZE, MAX_TITLE_LENGTH
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..core.ulid_helper import canonical_ulid
from ..models.question import Answer, Question
from ..repositories.question_repository import AnswerRepository, QuestionRepository
from ..schemas.question import QuestionListResponse, QuestionOut
from .base import BaseService

logger = logging.getLogger(__name__)

ALLOWED_SORT_KEYS = ("date", "popularity")


def normalize_tags(tags: Optional[List[Any]]) -> List[str]:
    """Trim and lowercase tags, dropping non-strings, blanks and repeats."""
    result: List[str] = []
    for tag in tags or []:
        if not isinstance(tag, str):
            logger.warning(f"Non-string tag ignored: {tag!r}")
            continue
        cleaned = tag.strip().lower()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


def require_question_id(question_id: str) -> str:
    canonical = canonical_ulid(question_id)
    if canonical is None:
        raise ValidationException("Invalid question ID format.", code="INVALID_QUESTION_ID")
    return canonical


def _require_text(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationException(message, code="INVALID_INPUT")
    return value.strip()


def _check_title_length(title: str) -> None:
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationException(
            f"Title must be at most {MAX_TITLE_LENGTH} characters.", code="INVALID_INPUT"
        )


class QuestionService(BaseService):
    def __init__(
        self,
        db: Session,
        question_repository: QuestionRepository | None = None,
        answer_repository: AnswerRepository | None = None,
    ) -> None:
        super().__init__(db)
        self.question_repository = question_repository or QuestionRepository(db)
        self.answer_repository = answer_repository or AnswerRepository(db)

    def _get_question_or_404(self, question_id: str) -> Question:
        question = self.question_repository.get_by_id(require_question_id(question_id))
        if question is None:
            raise NotFoundException("Question not found.", code="QUESTION_NOT_FOUND")
        return question

    @BaseService.measure_operation("ask_question")
    def ask_question(
        self, author_id: str, title: str, content: str, tags: Optional[List[Any]] = None
    ) -> Question:
        title = _require_text(title, "Title is required and must be a non-empty string.")
        _check_title_length(title)
        content = _require_text(content, "Content is required and must be a non-empty string.")

        with self.transaction():
            question = Question(title=title, content=content, author_id=author_id)
            question.set_tags(normalize_tags(tags))
            self.db.add(question)
            self.db.flush()
            question_id = question.id

        self.logger.info(f"User {author_id} asked question {question_id}")
        return self._get_question_or_404(question_id)

    @BaseService.measure_operation("list_questions")
    def list_questions(
        self,
        page: int = 1,
        limit: int = DEFAULT_QUESTIONS_PAGE_SIZE,
        tag: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> QuestionListResponse:
        """
        Newest-first page of questions, optionally filtered by one tag.

        Out-of-range paging values are clamped rather than rejected. Sorting by
        popularity is accepted but falls back to date order.
        """
        page = page if page >= 1 else 1
        if limit < 1:
            limit = DEFAULT_QUESTIONS_PAGE_SIZE
        limit = min(limit, MAX_QUESTIONS_PAGE_SIZE)
        tag_filter = tag.strip().lower() if tag and tag.strip() else None
        if sort_by and sort_by.lower() == "popularity":
            self.logger.debug("Popularity sort requested; using date order")

        questions, total = self.question_repository.list_page(
            offset=(page - 1) * limit, limit=limit, tag=tag_filter
        )
        return QuestionListResponse(
            questions=[QuestionOut.from_model(q) for q in questions],
            total_pages=math.ceil(total / limit),
            current_page=page,
            total_questions=total,
        )

    @BaseService.measure_operation("get_question")
    def get_question(self, question_id: str) -> Tuple[Question, List[Answer]]:
        question = self._get_question_or_404(question_id)
        answers = self.answer_repository.list_for_question(question.id)
        return question, answers

    @BaseService.measure_operation("update_question")
    def update_question(
        self,
        user_id: str,
        question_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[List[Any]] = None,
    ) -> Question:
        question_id = require_question_id(question_id)
        if title is not None:
            title = _require_text(title, "Title must be a non-empty string.")
            _check_title_length(title)
        if content is not None:
            content = _require_text(content, "Content must be a non-empty string.")

        question = self._get_question_or_404(question_id)
        if question.author_id != user_id:
            raise ForbiddenException(
                "User not authorized to update this question.", code="NOT_AUTHOR"
            )

        with self.transaction():
            if title is not None:
                question.title = title
            if content is not None:
                question.content = content
            if tags is not None:
                question.set_tags(normalize_tags(tags))
            self.db.flush()

        self.logger.info(f"User {user_id} updated question {question_id}")
        return question

    @BaseService.measure_operation("delete_question")
    def delete_question(self, user_id: str, question_id: str) -> None:
        question = self._get_question_or_404(question_id)
        if question.author_id != user_id:
            raise ForbiddenException(
                "User not authorized to delete this question.", code="NOT_AUTHOR"
            )
        with self.transaction():
            self.db.delete(question)
        self.logger.info(f"User {user_id} deleted question {question_id} and its answers")
