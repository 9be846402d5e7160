# backend/agora/services/message_service.py
"""
Message history service.

Serves the REST history pages. Fetching a private conversation marks the
fetched messages addressed to the caller as read; the caller gets back the
page exactly as it was fetched, and the receipts so the route can notify
the senders over the socket layer.
"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from ..core.constants import GLOBAL_ROOM_ID
from ..core.exceptions import ValidationException
from ..core.ulid_helper import canonical_ulid
from ..repositories.message_repository import MessageRepository
from ..schemas.message import GlobalMessageOut, PrivateMessageOut, ReadReceiptTarget
from .base import BaseService

logger = logging.getLogger(__name__)


class MessageService(BaseService):
    def __init__(self, db: Session, message_repository: MessageRepository | None = None) -> None:
        super().__init__(db)
        self.message_repository = message_repository or MessageRepository(db)

    @BaseService.measure_operation("get_global_history")
    def get_global_history(self, page: int, limit: int) -> List[GlobalMessageOut]:
        """Newest-first page of the global room."""
        messages = self.message_repository.get_global_history(
            offset=(page - 1) * limit, limit=limit, room_id=GLOBAL_ROOM_ID
        )
        return [GlobalMessageOut.from_model(m) for m in messages]

    @BaseService.measure_operation("get_private_history")
    def get_private_history(
        self, user_id: str, peer_id: str, page: int, limit: int
    ) -> Tuple[List[PrivateMessageOut], List[ReadReceiptTarget]]:
        """
        Newest-first page of the conversation with ``peer_id``.

        Returns:
            (page as fetched, receipts for messages this call transitioned to read)
        """
        peer = canonical_ulid(peer_id)
        if peer is None:
            raise ValidationException("Invalid peer ID format.", code="INVALID_PEER_ID")

        messages = self.message_repository.get_private_history(
            user_id=user_id, peer_id=peer, offset=(page - 1) * limit, limit=limit
        )
        page_out = [PrivateMessageOut.from_model(m) for m in messages]

        unread = {m.id: m.sender_id for m in messages if m.receiver_id == user_id and not m.is_read}
        if not unread:
            return page_out, []

        with self.transaction():
            transitioned = self.message_repository.mark_messages_as_read(list(unread), user_id)

        receipts = [
            ReadReceiptTarget(message_id=message_id, reader_id=user_id, sender_id=unread[message_id])
            for message_id in transitioned
        ]
        return page_out, receipts
