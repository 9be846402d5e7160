# backend/agora/models/message.py
"""
Message models for the chat system.

GlobalMessage rows are append-only. PrivateMessage rows are append-only
except for ``is_read``, which flips from False to True once, by the receiver.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from ..core.constants import GLOBAL_ROOM_ID
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GlobalMessage(Base):
    """Message posted to the global room."""

    __tablename__ = "global_messages"
    __table_args__ = (Index("ix_global_messages_room_timestamp", "room_id", "timestamp"),)

    id = Column(String(26), primary_key=True, default=generate_ulid)
    sender_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    room_id = Column(String(32), nullable=False, default=GLOBAL_ROOM_ID)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    sender = relationship("User", foreign_keys=[sender_id])


class PrivateMessage(Base):
    """One-to-one message with a read flag owned by the receiver."""

    __tablename__ = "private_messages"
    __table_args__ = (
        Index("ix_private_messages_pair", "sender_id", "receiver_id"),
        Index("ix_private_messages_timestamp", "timestamp"),
    )

    id = Column(String(26), primary_key=True, default=generate_ulid)
    sender_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    is_read = Column(Boolean, nullable=False, default=False)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
