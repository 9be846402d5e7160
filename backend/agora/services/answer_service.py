# backend/agora/services/answer_service.py
"""
Answer Service for the Q&A forum.

Votes are a plain tally updated in the database; at most one answer per
question carries the best-answer flag, and only the question's author may set it.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..core.ulid_helper import canonical_ulid
from ..models.question import Answer
from ..repositories.question_repository import AnswerRepository, QuestionRepository
from .base import BaseService
from .question_service import require_question_id

logger = logging.getLogger(__name__)

VOTE_AMOUNTS = {"upvote": 1, "downvote": -1}


def _require_answer_id(answer_id: str) -> str:
    canonical = canonical_ulid(answer_id)
    if canonical is None:
        raise ValidationException("Invalid answer ID format.", code="INVALID_ANSWER_ID")
    return canonical


class AnswerService(BaseService):
    def __init__(
        self,
        db: Session,
        answer_repository: AnswerRepository | None = None,
        question_repository: QuestionRepository | None = None,
    ) -> None:
        super().__init__(db)
        self.answer_repository = answer_repository or AnswerRepository(db)
        self.question_repository = question_repository or QuestionRepository(db)

    def _get_answer_or_404(self, answer_id: str, message: str = "Answer not found.") -> Answer:
        answer = self.answer_repository.get_by_id(_require_answer_id(answer_id))
        if answer is None:
            raise NotFoundException(message, code="ANSWER_NOT_FOUND")
        return answer

    def _reload(self, answer_id: str) -> Answer:
        # Bulk updates bypass the identity map
        self.db.expire_all()
        return self._get_answer_or_404(answer_id)

    @BaseService.measure_operation("post_answer")
    def post_answer(self, author_id: str, question_id: str, content: str) -> Answer:
        if not isinstance(content, str) or not content.strip():
            raise ValidationException(
                "Answer content is required and must be a non-empty string.",
                code="INVALID_INPUT",
            )
        question_id = require_question_id(question_id)
        if self.question_repository.get_by_id(question_id, load_relationships=False) is None:
            raise NotFoundException(
                "Question not found to post an answer to.", code="QUESTION_NOT_FOUND"
            )

        with self.transaction():
            answer = self.answer_repository.create(
                content=content.strip(), author_id=author_id, question_id=question_id
            )
            answer_id = answer.id

        self.logger.info(f"User {author_id} answered question {question_id}")
        return self._get_answer_or_404(answer_id)

    @BaseService.measure_operation("list_answers")
    def list_answers(self, question_id: str) -> List[Answer]:
        return self.answer_repository.list_for_question(require_question_id(question_id))

    @BaseService.measure_operation("update_answer")
    def update_answer(self, user_id: str, answer_id: str, content: str) -> Answer:
        answer_id = _require_answer_id(answer_id)
        if not isinstance(content, str) or not content.strip():
            raise ValidationException(
                "Answer content is required and must be a non-empty string for update.",
                code="INVALID_INPUT",
            )
        answer = self._get_answer_or_404(answer_id)
        if answer.author_id != user_id:
            raise ForbiddenException("User not authorized to update this answer.", code="NOT_AUTHOR")

        with self.transaction():
            answer.content = content.strip()
            self.db.flush()
        return answer

    @BaseService.measure_operation("delete_answer")
    def delete_answer(self, user_id: str, answer_id: str) -> None:
        answer = self._get_answer_or_404(answer_id)
        if answer.author_id != user_id:
            raise ForbiddenException("User not authorized to delete this answer.", code="NOT_AUTHOR")
        with self.transaction():
            self.db.delete(answer)
        self.logger.info(f"User {user_id} deleted answer {answer_id}")

    @BaseService.measure_operation("vote_answer")
    def vote(self, answer_id: str, vote_type: str) -> Answer:
        """Apply an upvote (+1) or downvote (-1). Repeat votes are not deduplicated."""
        answer_id = _require_answer_id(answer_id)
        amount = VOTE_AMOUNTS.get(vote_type.lower()) if isinstance(vote_type, str) else None
        if amount is None:
            raise ValidationException(
                "Invalid vote type. Must be 'upvote' or 'downvote'.", code="INVALID_VOTE_TYPE"
            )
        with self.transaction():
            updated = self.answer_repository.increment_votes(answer_id, amount)
        if not updated:
            raise NotFoundException("Answer not found for voting.", code="ANSWER_NOT_FOUND")
        return self._reload(answer_id)

    @BaseService.measure_operation("mark_best_answer")
    def mark_best(self, user_id: str, answer_id: str) -> Answer:
        answer = self._get_answer_or_404(answer_id)
        question = self.question_repository.get_by_id(answer.question_id, load_relationships=False)
        if question is None:
            raise NotFoundException("Associated question not found.", code="QUESTION_NOT_FOUND")
        if question.author_id != user_id:
            raise ForbiddenException(
                "Only the author of the question can mark an answer as best.",
                code="NOT_QUESTION_AUTHOR",
            )

        with self.transaction():
            self.answer_repository.clear_best_answer(question.id, keep_answer_id=answer.id)
            answer.is_best_answer = True
            self.db.flush()

        self.logger.info(f"Answer {answer_id} marked best for question {question.id}")
        return self._reload(answer_id)
