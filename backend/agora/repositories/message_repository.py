# backend/agora/repositories/message_repository.py
"""
Message Repository for the chat system.

Implements all data access operations for global and private messages.
Reads used for delivery and history always join the sender/receiver
rows so callers can render populated profiles without another query.
"""

import logging
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.constants import GLOBAL_ROOM_ID
from ..core.exceptions import RepositoryException
from ..models.message import GlobalMessage, PrivateMessage
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[PrivateMessage]):
    """
    Repository for message data access.

    The generic base operates on PrivateMessage; global-room queries are
    explicit methods below.
    """

    def __init__(self, db: Session):
        """Initialize with PrivateMessage model."""
        super().__init__(db, PrivateMessage)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(PrivateMessage.sender), joinedload(PrivateMessage.receiver)
        )

    # ==========================================
    # Global room
    # ==========================================

    def create_global_message(
        self, sender_id: str, content: str, room_id: str = GLOBAL_ROOM_ID
    ) -> GlobalMessage:
        """Persist a global message. Does NOT commit."""
        try:
            message = GlobalMessage(sender_id=sender_id, content=content, room_id=room_id)
            self.db.add(message)
            self.db.flush()
            return message
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating global message: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create global message: {str(e)}")

    def get_global_message(self, message_id: str) -> Optional[GlobalMessage]:
        try:
            return (
                self.db.query(GlobalMessage)
                .options(joinedload(GlobalMessage.sender))
                .filter(GlobalMessage.id == message_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching global message {message_id}: {str(e)}")
            raise RepositoryException(f"Failed to fetch global message: {str(e)}")

    def get_global_history(
        self, offset: int, limit: int, room_id: str = GLOBAL_ROOM_ID
    ) -> List[GlobalMessage]:
        """Newest-first page of a room's messages."""
        try:
            return (
                self.db.query(GlobalMessage)
                .options(joinedload(GlobalMessage.sender))
                .filter(GlobalMessage.room_id == room_id)
                .order_by(GlobalMessage.timestamp.desc(), GlobalMessage.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching global history: {str(e)}")
            raise RepositoryException(f"Failed to fetch global history: {str(e)}")

    # ==========================================
    # Private messages
    # ==========================================

    def create_private_message(
        self, sender_id: str, receiver_id: str, content: str
    ) -> PrivateMessage:
        """Persist an unread private message. Does NOT commit."""
        return self.create(
            sender_id=sender_id, receiver_id=receiver_id, content=content, is_read=False
        )

    def get_private_history(
        self, user_id: str, peer_id: str, offset: int, limit: int
    ) -> List[PrivateMessage]:
        """Newest-first page of the conversation between two users, both directions."""
        try:
            return (
                self._apply_eager_loading(self.db.query(PrivateMessage))
                .filter(
                    or_(
                        and_(
                            PrivateMessage.sender_id == user_id,
                            PrivateMessage.receiver_id == peer_id,
                        ),
                        and_(
                            PrivateMessage.sender_id == peer_id,
                            PrivateMessage.receiver_id == user_id,
                        ),
                    )
                )
                .order_by(PrivateMessage.timestamp.desc(), PrivateMessage.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching private history: {str(e)}")
            raise RepositoryException(f"Failed to fetch chat history: {str(e)}")

    def mark_read_if_unread(self, message_id: str, receiver_id: str) -> bool:
        """
        Flip ``is_read`` for one message addressed to ``receiver_id``.

        The ``is_read == False`` guard makes the transition happen at most once;
        returns True only for the caller that performed it. Does NOT commit.
        """
        try:
            updated = (
                self.db.query(PrivateMessage)
                .filter(
                    PrivateMessage.id == message_id,
                    PrivateMessage.receiver_id == receiver_id,
                    PrivateMessage.is_read == False,  # noqa: E712
                )
                .update({PrivateMessage.is_read: True}, synchronize_session=False)
            )
            return bool(updated == 1)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking message {message_id} as read: {str(e)}")
            raise RepositoryException(f"Failed to mark message as read: {str(e)}")

    def mark_messages_as_read(self, message_ids: List[str], receiver_id: str) -> List[str]:
        """
        Mark several messages read for their receiver.

        Returns the ids that actually transitioned. Does NOT commit.
        """
        transitioned = [
            message_id
            for message_id in message_ids
            if self.mark_read_if_unread(message_id, receiver_id)
        ]
        if transitioned:
            self.logger.info(f"Marked {len(transitioned)} messages as read for user {receiver_id}")
        return transitioned
