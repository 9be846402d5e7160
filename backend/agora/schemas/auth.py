# backend/agora/schemas/auth.py
"""
Credential issuance request/response schemas.

Field content rules (username length, email shape, password length) are
checked by AuthService so failures carry the same 400 payload as other
business validation.
"""

from ._strict_base import StrictModel, StrictRequestModel


class RegisterRequest(StrictRequestModel):
    username: str
    email: str
    password: str


class LoginRequest(StrictRequestModel):
    email: str
    password: str


class AuthResponse(StrictModel):
    token: str
    user_id: str
    username: str


class MessageResponse(StrictModel):
    """Plain ``{"message": ...}`` acknowledgement."""

    message: str
