# backend/agora/routes/messages.py
"""
Private conversation history

Endpoints:
    GET /history/{peer_id}?page=&limit= → Newest-first page of the conversation

Fetching a page marks the messages in it that were addressed to the caller
as read and pushes ``messageRead`` to their senders if they are online. The
page itself is returned as it was fetched.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_message_service, get_messaging_hub
from ..core.config import settings
from ..models.user import User
from ..schemas.message import PrivateMessageOut
from ..services.message_service import MessageService
from ..services.messaging import MessagingHub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])


@router.get("/history/{peer_id}", response_model=List[PrivateMessageOut])
async def get_private_history(
    peer_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.history_max_limit),
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
    hub: MessagingHub = Depends(get_messaging_hub),
) -> List[PrivateMessageOut]:
    messages, receipts = await asyncio.to_thread(
        message_service.get_private_history,
        current_user.id,
        peer_id,
        page,
        limit or settings.private_history_default_limit,
    )
    if receipts:
        delivered = await hub.publish_read_receipts(receipts)
        logger.debug(
            f"[HISTORY] {current_user.id} read {len(receipts)} messages; "
            f"{delivered} senders notified live"
        )
    return messages
