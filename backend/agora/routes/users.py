# backend/agora/routes/users.py
"""
User profile routes

Endpoints:
    GET /profile/{user_id} → Public profile (no email)
    PUT /profile           → Update own bio and picture
    GET /search?query=     → Case-insensitive username search
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_user_service
from ..models.user import User
from ..schemas.user import ProfileUpdateRequest, ProfileUpdateResponse, UserDetail
from ..services.user_service import UserService

router = APIRouter(tags=["users"])


@router.get("/search", response_model=List[UserDetail])
async def search_users(
    query: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> List[UserDetail]:
    users = await asyncio.to_thread(user_service.search_users, query)
    return [UserDetail.model_validate(user) for user in users]


@router.get("/profile/{user_id}", response_model=UserDetail)
async def get_profile(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
) -> UserDetail:
    user = await asyncio.to_thread(user_service.get_public_profile, user_id)
    return UserDetail.model_validate(user)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> ProfileUpdateResponse:
    user = await asyncio.to_thread(
        user_service.update_profile,
        current_user.id,
        payload.bio,
        payload.profile_picture,
    )
    return ProfileUpdateResponse(user=UserDetail.model_validate(user))
