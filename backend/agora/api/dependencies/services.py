# backend/agora/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Request-scoped services get the request's session. The messaging hub and
gatekeeper are process-wide and live on ``app.state``.
"""

from fastapi import Depends
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from ...services.answer_service import AnswerService
from ...services.auth_service import AuthService
from ...services.contact_service import ContactService
from ...services.message_service import MessageService
from ...services.messaging import ConnectionGatekeeper, MessagingHub
from ...services.question_service import QuestionService
from ...services.user_service import UserService
from .database import get_db


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db)


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    return MessageService(db)


def get_question_service(db: Session = Depends(get_db)) -> QuestionService:
    return QuestionService(db)


def get_answer_service(db: Session = Depends(get_db)) -> AnswerService:
    return AnswerService(db)


def get_messaging_hub(connection: HTTPConnection) -> MessagingHub:
    """Works for both HTTP requests and WebSocket sessions."""
    hub: MessagingHub = connection.app.state.messaging_hub
    return hub


def get_connection_gatekeeper(connection: HTTPConnection) -> ConnectionGatekeeper:
    gatekeeper: ConnectionGatekeeper = connection.app.state.gatekeeper
    return gatekeeper
