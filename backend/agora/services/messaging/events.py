# backend/agora/services/messaging/events.py
"""
Messaging event type definitions and builders.

All frames, in both directions, follow this structure:
{
    "event": str,   # Event name
    "data": dict    # Event-specific payload, camelCase keys
}
"""

from enum import Enum
from typing import Any, Dict

from ...schemas.message import (
    GlobalMessageOut,
    MessageError,
    MessageStatus,
    PrivateMessageOut,
    ReadReceipt,
)
from ...schemas.user import UserProfile


class EventType(str, Enum):
    """Server to client events."""

    CONNECTED = "connected"
    CONNECT_ERROR = "connect_error"
    NEW_GLOBAL_MESSAGE = "newGlobalMessage"
    NEW_PRIVATE_MESSAGE = "newPrivateMessage"
    MESSAGE_READ = "messageRead"
    MESSAGE_STATUS = "messageStatus"
    MESSAGE_ERROR = "messageError"


class ClientEvent(str, Enum):
    """Client to server events."""

    GLOBAL_MESSAGE = "globalMessage"
    PRIVATE_MESSAGE = "privateMessage"
    MARK_AS_READ = "markAsRead"


def build_event(event_type: EventType, data: Dict[str, Any]) -> Dict[str, Any]:
    return {"event": event_type.value, "data": data}


def build_connected_event(profile: UserProfile) -> Dict[str, Any]:
    return build_event(EventType.CONNECTED, {"userId": profile.id, "username": profile.username})


def build_connect_error_event(message: str) -> Dict[str, Any]:
    return build_event(
        EventType.CONNECT_ERROR, MessageError(message=message).model_dump(by_alias=True)
    )


def build_new_global_message_event(message: GlobalMessageOut) -> Dict[str, Any]:
    return build_event(
        EventType.NEW_GLOBAL_MESSAGE, message.model_dump(mode="json", by_alias=True)
    )


def build_new_private_message_event(message: PrivateMessageOut) -> Dict[str, Any]:
    return build_event(
        EventType.NEW_PRIVATE_MESSAGE, message.model_dump(mode="json", by_alias=True)
    )


def build_message_read_event(message_id: str, reader_id: str) -> Dict[str, Any]:
    receipt = ReadReceipt(message_id=message_id, reader_id=reader_id)
    return build_event(EventType.MESSAGE_READ, receipt.model_dump(by_alias=True))


def build_message_status_event(message_id: str) -> Dict[str, Any]:
    status = MessageStatus(message_id=message_id, status="already_read")
    return build_event(EventType.MESSAGE_STATUS, status.model_dump(by_alias=True))


def build_message_error_event(message: str) -> Dict[str, Any]:
    return build_event(
        EventType.MESSAGE_ERROR, MessageError(message=message).model_dump(by_alias=True)
    )
