"""SQLAlchemy models for the Agora platform."""

from .contact import Contact
from .message import GlobalMessage, PrivateMessage
from .question import Answer, Question, QuestionTag
from .user import User

__all__ = [
    "User",
    "GlobalMessage",
    "PrivateMessage",
    "Contact",
    "Question",
    "QuestionTag",
    "Answer",
]
