# backend/agora/services/messaging/store.py
"""
Message store for the real-time path.

Every call runs one synchronous unit of work in a worker thread with its own
session: open, do the work, commit, close. Storage failures surface as
PersistenceException; nothing is retried.
"""

import asyncio
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.constants import GLOBAL_ROOM_ID
from ...core.exceptions import (
    DomainException,
    InvalidReceiverException,
    PersistenceException,
    RepositoryException,
)
from ...core.metrics import MESSAGES_PERSISTED_TOTAL
from ...repositories.message_repository import MessageRepository
from ...repositories.user_repository import UserRepository
from ...schemas.message import GlobalMessageOut, PrivateMessageOut

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MessageStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _unit_of_work(self, work: Callable[[Session], T], failure_message: str) -> T:
        db = self._session_factory()
        try:
            result = work(db)
            db.commit()
            return result
        except DomainException:
            db.rollback()
            raise
        except (RepositoryException, SQLAlchemyError) as e:
            logger.error(f"[STORE] {failure_message} ({str(e)})")
            db.rollback()
            raise PersistenceException(failure_message)
        finally:
            db.close()

    async def _run(self, work: Callable[[Session], T], failure_message: str) -> T:
        return await asyncio.to_thread(self._unit_of_work, work, failure_message)

    async def save_global(self, sender_id: str, content: str) -> GlobalMessageOut:
        """Persist a global message and return it with the sender populated."""

        def work(db: Session) -> GlobalMessageOut:
            repository = MessageRepository(db)
            message = repository.create_global_message(sender_id, content, GLOBAL_ROOM_ID)
            populated = repository.get_global_message(message.id)
            if populated is None or populated.sender is None:
                raise RepositoryException(f"Global message {message.id} missing after insert")
            return GlobalMessageOut.from_model(populated)

        result = await self._run(work, "Failed to send global message due to server error.")
        MESSAGES_PERSISTED_TOTAL.labels(kind="global").inc()
        return result

    async def save_private(
        self, sender_id: str, receiver_id: str, content: str
    ) -> PrivateMessageOut:
        """
        Persist an unread private message and return it populated.

        Raises:
            InvalidReceiverException: receiver id is well formed but names no user
            PersistenceException: storage failure
        """

        def work(db: Session) -> PrivateMessageOut:
            if UserRepository(db).get_by_id(receiver_id) is None:
                raise InvalidReceiverException()
            repository = MessageRepository(db)
            message = repository.create_private_message(sender_id, receiver_id, content)
            populated = repository.get_by_id(message.id)
            if populated is None:
                raise RepositoryException(f"Private message {message.id} missing after insert")
            return PrivateMessageOut.from_model(populated)

        result = await self._run(work, "Failed to send message due to server error.")
        MESSAGES_PERSISTED_TOTAL.labels(kind="private").inc()
        return result

    async def get_private(self, message_id: str) -> Optional[PrivateMessageOut]:
        def work(db: Session) -> Optional[PrivateMessageOut]:
            message = MessageRepository(db).get_by_id(message_id)
            return PrivateMessageOut.from_model(message) if message is not None else None

        return await self._run(work, "Failed to load message due to server error.")

    async def mark_read(self, message_id: str, receiver_id: str) -> bool:
        """Single false-to-true transition. True only for the caller that performed it."""

        def work(db: Session) -> bool:
            return MessageRepository(db).mark_read_if_unread(message_id, receiver_id)

        return await self._run(work, "Failed to mark message as read due to server error.")
