# backend/agora/core/exceptions.py
"""
Domain-specific exceptions for the Agora platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer
and on the real-time socket protocol.
"""

from typing import Any, Dict, Optional

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# Connection authentication


class UnauthenticatedException(UnauthorizedException):
    """No credential was presented."""

    def __init__(self, message: str = "Authentication error: Token not provided"):
        super().__init__(message=message, code="UNAUTHENTICATED")


class InvalidTokenException(UnauthorizedException):
    """Token failed signature, format or expiry checks."""

    def __init__(self, message: str = "Authentication error: Invalid token"):
        super().__init__(message=message, code="INVALID_TOKEN")


class UserNotFoundException(UnauthorizedException):
    """Token was valid but names a user that no longer exists."""

    def __init__(self, message: str = "Authentication error: User not found"):
        super().__init__(message=message, code="USER_NOT_FOUND")


# Messaging


class InvalidContentException(ValidationException):
    def __init__(self, message: str = "Message content must be a non-empty string."):
        super().__init__(message=message, code="INVALID_CONTENT")


class InvalidReceiverException(ValidationException):
    def __init__(self, message: str = "Valid receiver ID is required."):
        super().__init__(message=message, code="INVALID_RECEIVER")


class SelfMessageNotAllowedException(ValidationException):
    def __init__(self, message: str = "Cannot send message to yourself."):
        super().__init__(message=message, code="SELF_MESSAGE_NOT_ALLOWED")


class InvalidMessageIdException(ValidationException):
    def __init__(self, message: str = "Invalid message ID for marking as read."):
        super().__init__(message=message, code="INVALID_MESSAGE_ID")


class InvalidEventException(ValidationException):
    def __init__(self, message: str = "Unsupported event."):
        super().__init__(message=message, code="INVALID_EVENT")


class AuthorizationException(ForbiddenException):
    """Payload identity does not match the authenticated connection."""

    def __init__(
        self,
        message: str = (
            "Authorization error: Reader ID is invalid or does not match authenticated user."
        ),
    ):
        super().__init__(message=message, code="AUTHORIZATION_ERROR")


class NotReceiverException(ForbiddenException):
    def __init__(
        self, message: str = "Cannot mark this message as read: you are not the receiver."
    ):
        super().__init__(message=message, code="NOT_RECEIVER")


class MessageNotFoundException(NotFoundException):
    def __init__(self, message: str = "Message not found for marking as read."):
        super().__init__(message=message, code="NOT_FOUND")


class PersistenceException(ServiceException):
    """Store write or read failed; reported to the caller, never retried."""

    def __init__(self, message: str = "Failed to save message due to server error."):
        super().__init__(message=message, code="PERSISTENCE_ERROR")


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
