# backend/agora/routes/auth.py
"""
Authentication routes

Endpoints:
    POST /register → Create an account and return a token
    POST /login    → Exchange email and password for a token
    POST /logout   → Acknowledge logout; the client discards its token
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from ..api.dependencies.services import get_auth_service
from ..auth import create_access_token
from ..schemas.auth import AuthResponse, LoginRequest, MessageResponse, RegisterRequest
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user = await asyncio.to_thread(
        auth_service.register_user, payload.username, payload.email, payload.password
    )
    token = create_access_token(data={"sub": user.id})
    return AuthResponse(token=token, user_id=user.id, username=user.username)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user = await asyncio.to_thread(auth_service.authenticate_user, payload.email, payload.password)
    token = create_access_token(data={"sub": user.id})
    logger.info(f"User {user.id} logged in")
    return AuthResponse(token=token, user_id=user.id, username=user.username)


@router.post("/logout", response_model=MessageResponse)
async def logout() -> MessageResponse:
    # Tokens are stateless; nothing to revoke server-side
    return MessageResponse(message="Logged out successfully. Please clear your token.")
