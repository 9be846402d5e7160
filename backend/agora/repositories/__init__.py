"""Repository layer: all SQLAlchemy data access lives here."""

from .base_repository import BaseRepository
from .contact_repository import ContactRepository
from .message_repository import MessageRepository
from .question_repository import AnswerRepository, QuestionRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "MessageRepository",
    "ContactRepository",
    "QuestionRepository",
    "AnswerRepository",
]
