# backend/agora/services/auth_service.py
"""
Authentication Service for the Agora platform

Handles user registration and credential checks. Token issuance stays in
``agora.auth`` so the socket gatekeeper and REST layer share one verifier.
"""

import logging

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from ..auth import DUMMY_HASH_FOR_TIMING_ATTACK, get_password_hash, verify_password
from ..core.constants import MAX_USERNAME_LENGTH, MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH
from ..core.exceptions import RepositoryException, ServiceException, ValidationException
from ..models.user import User
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def _normalize_email(email: object) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationException("Valid email is required.", code="INVALID_EMAIL")
    try:
        validated = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValidationException("Valid email is required.", code="INVALID_EMAIL")
    return validated.normalized.lower()


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session, user_repository: UserRepository | None = None) -> None:
        super().__init__(db)
        self.user_repository = user_repository or UserRepository(db)

    @BaseService.measure_operation("register_user")
    def register_user(self, username: str, email: str, password: str) -> User:
        """
        Register a new user.

        Args:
            username: Public handle, trimmed, at least 3 characters
            email: Login email, stored lowercased
            password: Plain text password (will be hashed)

        Returns:
            Created user object

        Raises:
            ValidationException: If a field is malformed or the user already exists
        """
        if not isinstance(username, str) or len(username.strip()) < MIN_USERNAME_LENGTH:
            raise ValidationException(
                "Username must be a string with at least 3 characters.", code="INVALID_USERNAME"
            )
        trimmed_username = username.strip()
        if len(trimmed_username) > MAX_USERNAME_LENGTH:
            raise ValidationException(
                f"Username must be at most {MAX_USERNAME_LENGTH} characters.",
                code="INVALID_USERNAME",
            )
        normalized_email = _normalize_email(email)
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                "Password must be at least 6 characters long.", code="INVALID_PASSWORD"
            )

        if self.user_repository.find_by_email_or_username(normalized_email, trimmed_username):
            raise ValidationException(
                "User already exists with this email or username.", code="USER_EXISTS"
            )

        try:
            with self.transaction():
                user = self.user_repository.create(
                    username=trimmed_username,
                    email=normalized_email,
                    hashed_password=get_password_hash(password),
                )
        except RepositoryException as e:
            # Lost a race with a concurrent registration on a unique column
            self.logger.warning(f"Registration conflict for {normalized_email}: {str(e)}")
            raise ValidationException(
                "User already exists with this email or username.", code="USER_EXISTS"
            )

        self.logger.info(f"Successfully registered user: {user.username} ({user.id})")
        return user

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials and return the matching user.

        Raises:
            ValidationException: Malformed input or bad credentials
        """
        normalized_email = _normalize_email(email)
        if not isinstance(password, str) or not password:
            raise ValidationException("Password is required.", code="PASSWORD_REQUIRED")

        user = self.user_repository.get_by_email(normalized_email)
        if user is None:
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            self.logger.info(f"Login failed for unknown email {normalized_email}")
            raise ValidationException("Invalid credentials.", code="INVALID_CREDENTIALS")

        if not verify_password(password, user.hashed_password):
            self.logger.info(f"Login failed for user {user.id}: bad password")
            raise ValidationException("Invalid credentials.", code="INVALID_CREDENTIALS")

        return user

    def get_user_by_id(self, user_id: str) -> User | None:
        try:
            return self.user_repository.get_by_id(user_id)
        except RepositoryException as e:
            raise ServiceException(f"Failed to load user: {str(e)}")
