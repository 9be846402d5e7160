# backend/agora/schemas/user.py
"""User profile schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..core.constants import MAX_BIO_LENGTH
from ._strict_base import StrictModel, StrictRequestModel


class UserProfile(StrictModel):
    """Public profile attached to populated messages, questions and answers."""

    id: str
    username: str
    profile_picture: str = ""


class UserDetail(UserProfile):
    """Profile page view; never includes email or credentials."""

    bio: str = ""
    created_at: Optional[datetime] = None


class ProfileUpdateRequest(StrictRequestModel):
    bio: Optional[str] = Field(default=None, max_length=MAX_BIO_LENGTH)
    profile_picture: Optional[str] = None


class ProfileUpdateResponse(StrictModel):
    message: str = "Profile updated successfully."
    user: UserDetail
