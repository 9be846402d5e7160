# backend/agora/repositories/user_repository.py
"""
User Repository for the Agora platform.

Lookups used by authentication, the socket gatekeeper (user directory)
and profile search.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        """Initialize with User model."""
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_id(self, id: Any, load_relationships: bool = True) -> Optional[User]:
        """
        Get user by ID.

        Returns None for a missing id so callers can treat it as "not found".
        """
        if id is None:
            return None
        try:
            return self.db.query(User).filter(User.id == str(id)).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by ID {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        """Used by registration to reject duplicates on either unique field."""
        try:
            return (
                self.db.query(User)
                .filter(or_(User.email == email, User.username == username))
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking existing user: {str(e)}")
            raise RepositoryException(f"Failed to check existing user: {str(e)}")

    def search_by_username(self, query: str, limit: int = 50) -> List[User]:
        """Case-insensitive substring search on username."""
        pattern = f"%{query.lower()}%"
        try:
            return (
                self.db.query(User)
                .filter(func.lower(User.username).like(pattern))
                .order_by(User.username)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching users: {str(e)}")
            raise RepositoryException(f"Failed to search users: {str(e)}")
