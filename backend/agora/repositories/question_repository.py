# backend/agora/repositories/question_repository.py
"""
Question and Answer repositories for the Q&A forum.

Answer listings are ordered best answer first, then by votes, then newest.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.exceptions import RepositoryException
from ..models.question import Answer, Question, QuestionTag
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class QuestionRepository(BaseRepository[Question]):
    def __init__(self, db: Session):
        super().__init__(db, Question)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Question.author), selectinload(Question.tag_rows))

    def list_page(
        self, offset: int, limit: int, tag: Optional[str] = None
    ) -> Tuple[List[Question], int]:
        """Newest-first page plus the total count for the same filter."""
        try:
            query = self.db.query(Question)
            if tag:
                query = query.join(QuestionTag).filter(QuestionTag.tag == tag)
            total = query.count()
            questions = (
                self._apply_eager_loading(query)
                .order_by(Question.created_at.desc(), Question.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return questions, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing questions: {str(e)}")
            raise RepositoryException(f"Failed to list questions: {str(e)}")


class AnswerRepository(BaseRepository[Answer]):
    def __init__(self, db: Session):
        super().__init__(db, Answer)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Answer.author))

    def list_for_question(self, question_id: str) -> List[Answer]:
        try:
            return (
                self._apply_eager_loading(self.db.query(Answer))
                .filter(Answer.question_id == question_id)
                .order_by(
                    Answer.is_best_answer.desc(),
                    Answer.votes.desc(),
                    Answer.created_at.desc(),
                )
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing answers for {question_id}: {str(e)}")
            raise RepositoryException(f"Failed to list answers: {str(e)}")

    def increment_votes(self, answer_id: str, amount: int) -> bool:
        """Atomic in-database increment. Does NOT commit."""
        try:
            updated = (
                self.db.query(Answer)
                .filter(Answer.id == answer_id)
                .update({Answer.votes: Answer.votes + amount}, synchronize_session=False)
            )
            return bool(updated)
        except SQLAlchemyError as e:
            self.logger.error(f"Error voting on answer {answer_id}: {str(e)}")
            raise RepositoryException(f"Failed to vote on answer: {str(e)}")

    def clear_best_answer(self, question_id: str, keep_answer_id: str) -> None:
        try:
            (
                self.db.query(Answer)
                .filter(Answer.question_id == question_id, Answer.id != keep_answer_id)
                .update({Answer.is_best_answer: False}, synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error clearing best answer for {question_id}: {str(e)}")
            raise RepositoryException(f"Failed to clear best answer: {str(e)}")
