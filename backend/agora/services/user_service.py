# backend/agora/services/user_service.py
"""Public profiles, profile edits and username search."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..core.ulid_helper import canonical_ulid
from ..models.user import User
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    def __init__(self, db: Session, user_repository: UserRepository | None = None) -> None:
        super().__init__(db)
        self.user_repository = user_repository or UserRepository(db)

    @BaseService.measure_operation("get_public_profile")
    def get_public_profile(self, user_id: str) -> User:
        key = canonical_ulid(user_id)
        if key is None:
            raise ValidationException("Invalid user ID format.", code="INVALID_USER_ID")
        user = self.user_repository.get_by_id(key)
        if user is None:
            raise NotFoundException("User not found.", code="USER_NOT_FOUND")
        return user

    @BaseService.measure_operation("update_profile")
    def update_profile(
        self, user_id: str, bio: Optional[str] = None, profile_picture: Optional[str] = None
    ) -> User:
        """
        Update the editable profile fields.

        Fields left as ``None`` are untouched; an empty string clears a field.
        """
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found for update.", code="USER_NOT_FOUND")

        with self.transaction():
            if bio is not None:
                user.bio = bio.strip()
            if profile_picture is not None:
                user.profile_picture = profile_picture.strip()
            self.db.flush()
        self.logger.info(f"Updated profile for user {user_id}")
        return user

    @BaseService.measure_operation("search_users")
    def search_users(self, query: Optional[str]) -> List[User]:
        if not query or not query.strip():
            raise ValidationException(
                "Search query must be a non-empty string.", code="INVALID_QUERY"
            )
        return self.user_repository.search_by_username(query.strip())
