# backend/agora/schemas/message.py
"""
Populated message schemas for the chat system.

Sender/receiver identity references are resolved to public profiles at
read time; the persisted rows only hold ids.
"""

from datetime import datetime
from typing import Literal

from ..models.message import GlobalMessage, PrivateMessage
from ._strict_base import StrictModel
from .user import UserProfile


class GlobalMessageOut(StrictModel):
    id: str
    sender_id: UserProfile
    content: str
    room_id: str
    timestamp: datetime

    @classmethod
    def from_model(cls, message: GlobalMessage) -> "GlobalMessageOut":
        return cls(
            id=message.id,
            sender_id=UserProfile.model_validate(message.sender),
            content=message.content,
            room_id=message.room_id,
            timestamp=message.timestamp,
        )


class PrivateMessageOut(StrictModel):
    id: str
    sender_id: UserProfile
    receiver_id: UserProfile
    content: str
    timestamp: datetime
    is_read: bool

    @classmethod
    def from_model(cls, message: PrivateMessage) -> "PrivateMessageOut":
        return cls(
            id=message.id,
            sender_id=UserProfile.model_validate(message.sender),
            receiver_id=UserProfile.model_validate(message.receiver),
            content=message.content,
            timestamp=message.timestamp,
            is_read=message.is_read,
        )


class ReadReceipt(StrictModel):
    """Payload of the ``messageRead`` event."""

    message_id: str
    reader_id: str


class ReadReceiptTarget(ReadReceipt):
    """A receipt plus the sender who should be told about it."""

    sender_id: str


class MessageStatus(StrictModel):
    """Payload of the ``messageStatus`` event."""

    message_id: str
    status: Literal["already_read"]


class MessageError(StrictModel):
    """Payload of the ``messageError`` and ``connect_error`` events."""

    message: str
