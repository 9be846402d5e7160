# backend/agora/routes/global_messages.py
"""
Global room history

Endpoints:
    GET /history?page=&limit= → Newest-first page of the global room
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_message_service
from ..core.config import settings
from ..models.user import User
from ..schemas.message import GlobalMessageOut
from ..services.message_service import MessageService

router = APIRouter(tags=["global-messages"])


@router.get("/history", response_model=List[GlobalMessageOut])
async def get_global_history(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.history_max_limit),
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
) -> List[GlobalMessageOut]:
    return await asyncio.to_thread(
        message_service.get_global_history,
        page,
        limit or settings.global_history_default_limit,
    )
