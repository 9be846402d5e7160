# backend/agora/models/question.py
"""
Q&A forum models.

Questions carry lowercased tags; answers carry a vote tally and at most
one answer per question is flagged as best.
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.constants import MAX_TITLE_LENGTH
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    title = Column(String(MAX_TITLE_LENGTH), nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    author = relationship("User", foreign_keys=[author_id])
    tag_rows = relationship(
        "QuestionTag",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionTag.position",
    )
    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan")

    @property
    def tags(self) -> List[str]:
        return [row.tag for row in self.tag_rows]

    def set_tags(self, tags: List[str]) -> None:
        # Rows for tags that survive are reused so their primary keys never collide
        existing = {row.tag: row for row in self.tag_rows}
        rows = []
        for position, tag in enumerate(tags):
            row = existing.get(tag) or QuestionTag(tag=tag)
            row.position = position
            rows.append(row)
        self.tag_rows = rows


class QuestionTag(Base):
    __tablename__ = "question_tags"

    question_id = Column(
        String(26), ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    tag = Column(String(64), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)

    question = relationship("Question", back_populates="tag_rows")


class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (Index("ix_answers_question_votes", "question_id", "votes"),)

    id = Column(String(26), primary_key=True, default=generate_ulid)
    content = Column(Text, nullable=False)
    author_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(26), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    votes = Column(Integer, nullable=False, default=0)
    is_best_answer = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    author = relationship("User", foreign_keys=[author_id])
    question = relationship("Question", back_populates="answers")
