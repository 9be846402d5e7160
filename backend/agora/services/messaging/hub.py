# backend/agora/services/messaging/hub.py
"""
Messaging hub: the event handlers behind every authenticated connection.

Handlers for one connection run one frame at a time, so a client's own
events are processed in the order it sent them. Across connections the only
shared state is the presence and room registries, read synchronously between
store awaits, and the message rows, whose read flag changes only through a
conditional update.
"""

import logging
from typing import Iterable, Optional, cast

from ...core.constants import GLOBAL_ROOM_ID
from ...core.exceptions import (
    AuthorizationException,
    DomainException,
    InvalidContentException,
    InvalidMessageIdException,
    InvalidReceiverException,
    MessageNotFoundException,
    NotReceiverException,
    SelfMessageNotAllowedException,
)
from ...core.metrics import MESSAGE_ERRORS_TOTAL, READ_RECEIPTS_TOTAL, REALTIME_CONNECTIONS
from ...core.ulid_helper import canonical_ulid
from ...schemas.message import GlobalMessageOut, PrivateMessageOut, ReadReceiptTarget
from .connection import Connection
from .events import (
    ClientEvent,
    build_message_error_event,
    build_message_read_event,
    build_message_status_event,
    build_new_global_message_event,
    build_new_private_message_event,
)
from .presence import PresenceRegistry
from .protocol import (
    GlobalMessagePayload,
    MarkAsReadPayload,
    Payload,
    PrivateMessagePayload,
    clean_content,
    parse_frame,
)
from .rooms import RoomRegistry
from .store import MessageStore

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected server error occurred."


class MessagingHub:
    def __init__(
        self,
        store: MessageStore,
        presence: Optional[PresenceRegistry] = None,
        rooms: Optional[RoomRegistry] = None,
    ) -> None:
        self.store = store
        self.presence = presence if presence is not None else PresenceRegistry()
        self.rooms = rooms if rooms is not None else RoomRegistry()

    # ==========================================
    # Connection lifecycle
    # ==========================================

    async def connect(self, connection: Connection) -> None:
        """Register presence and join the global room for an admitted connection."""
        replaced = self.presence.register(connection.user_id, connection)
        self.rooms.join(GLOBAL_ROOM_ID, connection)
        REALTIME_CONNECTIONS.inc()
        logger.info(
            f"[HUB] {connection.username} ({connection.user_id}) connected"
            + (" (superseding an older session)" if replaced is not None else "")
        )

    async def disconnect(self, connection: Connection) -> None:
        """Undo ``connect``. A superseded connection leaves the newer presence entry alone."""
        self.presence.unregister(connection.user_id, connection)
        self.rooms.leave_all(connection)
        REALTIME_CONNECTIONS.dec()
        logger.info(f"[HUB] {connection.username} ({connection.user_id}) disconnected")

    # ==========================================
    # Frame handling
    # ==========================================

    async def handle(self, connection: Connection, raw: str) -> None:
        """
        Parse and dispatch one inbound frame.

        Every failure is reported to the originating connection as
        ``messageError`` and never to anyone else.
        """
        try:
            event, payload = parse_frame(raw)
            await self.dispatch(connection, event, payload)
        except DomainException as exc:
            logger.info(f"[HUB] Rejected event from {connection.user_id}: {exc.code} {exc.message}")
            MESSAGE_ERRORS_TOTAL.labels(code=exc.code).inc()
            await connection.send(build_message_error_event(exc.message))
        except Exception:
            logger.exception(f"[HUB] Unhandled error processing event from {connection.user_id}")
            MESSAGE_ERRORS_TOTAL.labels(code="INTERNAL_ERROR").inc()
            await connection.send(build_message_error_event(GENERIC_ERROR_MESSAGE))

    async def dispatch(self, connection: Connection, event: ClientEvent, payload: Payload) -> None:
        if event is ClientEvent.GLOBAL_MESSAGE:
            await self.send_global(connection, cast(GlobalMessagePayload, payload).content)
        elif event is ClientEvent.PRIVATE_MESSAGE:
            private = cast(PrivateMessagePayload, payload)
            await self.send_private(connection, private.receiver_id, private.content)
        elif event is ClientEvent.MARK_AS_READ:
            receipt = cast(MarkAsReadPayload, payload)
            await self.mark_read(connection, receipt.message_id, receipt.reader_id)

    # ==========================================
    # Global broadcast
    # ==========================================

    async def send_global(self, connection: Connection, content: object) -> GlobalMessageOut:
        """Persist a global message and broadcast it to the whole room, sender included."""
        cleaned = clean_content(content)
        if cleaned is None:
            raise InvalidContentException()

        message = await self.store.save_global(connection.user_id, cleaned)

        frame = build_new_global_message_event(message)
        members = self.rooms.members(GLOBAL_ROOM_ID)
        delivered = 0
        for member in members:
            try:
                if await member.send(frame):
                    delivered += 1
            except Exception:
                logger.exception(f"[HUB] Broadcast of {message.id} to {member.user_id} failed")
        logger.debug(f"[HUB] Global message {message.id} delivered to {delivered}/{len(members)} connections")
        return message

    # ==========================================
    # Private delivery
    # ==========================================

    async def send_private(
        self, connection: Connection, receiver_id: object, content: object
    ) -> PrivateMessageOut:
        """
        Persist a private message; deliver to the sender, then to the receiver if online.

        Live delivery to the receiver is best effort. An offline receiver
        finds the message through history.
        """
        cleaned = clean_content(content)
        if cleaned is None:
            raise InvalidContentException()
        receiver = canonical_ulid(receiver_id)
        if receiver is None:
            raise InvalidReceiverException()
        if receiver == connection.user_id:
            raise SelfMessageNotAllowedException()

        message = await self.store.save_private(connection.user_id, receiver, cleaned)

        frame = build_new_private_message_event(message)
        await connection.send(frame)
        receiver_connection = self.presence.lookup(receiver)
        if receiver_connection is not None:
            await receiver_connection.send(frame)
        else:
            logger.debug(f"[HUB] Receiver {receiver} offline; message {message.id} stored only")
        return message

    # ==========================================
    # Read receipts
    # ==========================================

    async def mark_read(self, connection: Connection, message_id: object, reader_id: object) -> bool:
        """
        Mark a private message read on behalf of its receiver.

        Returns True when this call performed the transition. A message that
        is already read answers the caller with ``messageStatus`` instead.
        """
        message_key = canonical_ulid(message_id)
        if message_key is None:
            raise InvalidMessageIdException()
        if canonical_ulid(reader_id) != connection.user_id:
            raise AuthorizationException()
        reader = connection.user_id

        message = await self.store.get_private(message_key)
        if message is None:
            raise MessageNotFoundException()
        if message.receiver_id.id != reader:
            raise NotReceiverException()

        if message.is_read or not await self.store.mark_read(message_key, reader):
            READ_RECEIPTS_TOTAL.labels(outcome="already_read").inc()
            await connection.send(build_message_status_event(message_key))
            return False

        READ_RECEIPTS_TOTAL.labels(outcome="read").inc()
        frame = build_message_read_event(message_key, reader)
        sender_connection = self.presence.lookup(message.sender_id.id)
        if sender_connection is not None and sender_connection is not connection:
            await sender_connection.send(frame)
        await connection.send(frame)
        return True

    async def publish_read_receipts(self, receipts: Iterable[ReadReceiptTarget]) -> int:
        """Tell online senders about messages marked read outside the socket path."""
        delivered = 0
        for receipt in receipts:
            READ_RECEIPTS_TOTAL.labels(outcome="read").inc()
            sender_connection = self.presence.lookup(receipt.sender_id)
            if sender_connection is None:
                continue
            if await sender_connection.send(
                build_message_read_event(receipt.message_id, receipt.reader_id)
            ):
                delivered += 1
        return delivered
