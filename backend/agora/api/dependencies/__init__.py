# backend/agora/api/dependencies/__init__.py
"""FastAPI dependency providers."""

from .auth import get_current_user
from .database import get_db
from .services import (
    get_answer_service,
    get_auth_service,
    get_connection_gatekeeper,
    get_contact_service,
    get_message_service,
    get_messaging_hub,
    get_question_service,
    get_user_service,
)

__all__ = [
    "get_answer_service",
    "get_auth_service",
    "get_connection_gatekeeper",
    "get_contact_service",
    "get_current_user",
    "get_db",
    "get_message_service",
    "get_messaging_hub",
    "get_question_service",
    "get_user_service",
]
