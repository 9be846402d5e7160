# backend/agora/models/user.py
"""
User model for the Agora platform.

Identity, credentials and the public profile fields shown next to
messages, questions and answers. Identity never changes after creation;
only the profile fields (picture, bio) are editable.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from ..core.constants import MAX_BIO_LENGTH
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    Registered user.

    Attributes:
        id: ULID primary key
        username: Unique public handle
        email: Unique, lowercased login email
        hashed_password: Bcrypt hash
        profile_picture: URL or path, empty when unset
        bio: Short free-text bio
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    profile_picture = Column(String(500), nullable=False, default="")
    bio = Column(String(MAX_BIO_LENGTH), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.id})>"
