# backend/agora/api/dependencies/auth.py
"""
Authentication dependencies for the REST API.

Bearer tokens are verified with the same credential service the socket
gatekeeper uses; the user row is loaded off the event loop.
"""

import asyncio
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from ...auth import verify_token
from ...core.exceptions import InvalidTokenException, UnauthorizedException
from ...models.user import User
from ...services.auth_service import AuthService
from .services import get_auth_service

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the bearer token to the calling user.

    Raises:
        UnauthorizedException: missing or invalid token, or unknown user
    """
    if not token:
        raise UnauthorizedException("No token, authorization denied.", code="UNAUTHENTICATED")
    try:
        user_id = verify_token(token)
    except InvalidTokenException:
        raise UnauthorizedException("Token is not valid.", code="INVALID_TOKEN")

    user = await asyncio.to_thread(auth_service.get_user_by_id, user_id)
    if user is None:
        logger.warning(f"Valid token for missing user {user_id}")
        raise UnauthorizedException("User not found.", code="USER_NOT_FOUND")
    return user
