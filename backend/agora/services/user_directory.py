# backend/agora/services/user_directory.py
"""
User directory used by the real-time layer.

Each lookup opens its own short-lived session inside a worker thread so the
event loop never blocks on the database.
"""

import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException, ServiceException
from ..core.ulid_helper import canonical_ulid
from ..repositories.user_repository import UserRepository
from ..schemas.user import UserProfile

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _get_profile_sync(self, user_id: str) -> Optional[UserProfile]:
        db = self._session_factory()
        try:
            user = UserRepository(db).get_by_id(user_id)
            return UserProfile.model_validate(user) if user is not None else None
        finally:
            db.close()

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Public profile for ``user_id``, or None when no such user exists."""
        key = canonical_ulid(user_id)
        if key is None:
            return None
        try:
            return await asyncio.to_thread(self._get_profile_sync, key)
        except (RepositoryException, SQLAlchemyError) as e:
            logger.error(f"[DIRECTORY] Profile lookup failed for {user_id}: {str(e)}")
            raise ServiceException("Failed to load user profile.")
