# backend/agora/services/messaging/gatekeeper.py
"""Connection admission: bearer token to user profile, once per connection."""

import logging
from typing import Callable, Optional

from ...auth import verify_token
from ...core.exceptions import UnauthenticatedException, UserNotFoundException
from ...schemas.user import UserProfile
from ..user_directory import UserDirectory

logger = logging.getLogger(__name__)


class ConnectionGatekeeper:
    def __init__(
        self,
        directory: UserDirectory,
        token_verifier: Callable[[str], str] = verify_token,
    ) -> None:
        self.directory = directory
        self._verify = token_verifier

    async def authenticate(self, token: Optional[str]) -> UserProfile:
        """
        Resolve a handshake token to the connecting user's profile.

        Raises:
            UnauthenticatedException: no token was presented
            InvalidTokenException: signature, format or expiry check failed
            UserNotFoundException: token names a user that does not exist
        """
        if token is None or not token.strip():
            raise UnauthenticatedException()

        user_id = self._verify(token.strip())

        profile = await self.directory.get_profile(user_id)
        if profile is None:
            logger.info(f"[GATEKEEPER] Token for unknown user {user_id} rejected")
            raise UserNotFoundException()
        return profile
