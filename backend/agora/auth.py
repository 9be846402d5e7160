# backend/agora/auth.py
"""
Credential service: password hashing and bearer token issue/verify.

Tokens are HS256 JWTs whose ``sub`` claim carries the user id. The same
verification is shared by the REST dependency and the socket gatekeeper.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .core.config import settings
from .core.exceptions import InvalidTokenException

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Valid bcrypt hash verified against when the email is unknown, so a failed
# login costs the same whether or not the account exists.
DUMMY_HASH_FOR_TIMING_ATTACK = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.V4ferVKnNaOuJi"


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns False for malformed hashes rather than raising.
    """
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except (ValueError, TypeError) as e:
        logger.error(f"Error verifying password: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    hashed = pwd_context.hash(password)
    return str(hashed)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; ``sub`` must be the user id
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode.update({"exp": expire})

    encoded_jwt = cast(
        str,
        jwt.encode(to_encode, _secret_value(settings.secret_key), algorithm=settings.algorithm),
    )
    logger.info(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify signature and expiry. Raises ``PyJWTError`` on failure."""
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
    )
    return cast(Dict[str, Any], payload_raw)


def verify_token(token: str) -> str:
    """
    Resolve a bearer token to the user id it was issued for.

    Raises:
        InvalidTokenException: bad signature, expired, or missing ``sub``
    """
    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.debug(f"JWT validation error: {str(e)}")
        raise InvalidTokenException()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        logger.warning("Token payload missing 'sub' field")
        raise InvalidTokenException()
    return user_id
