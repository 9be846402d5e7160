# backend/agora/services/messaging/__init__.py
"""
Real-time messaging core.

Connections are admitted by the ConnectionGatekeeper, tracked in the
PresenceRegistry and RoomRegistry, and driven by the MessagingHub, which
persists through the MessageStore and pushes events to live connections.
"""

from .connection import Connection, WebSocketConnection
from .events import ClientEvent, EventType
from .gatekeeper import ConnectionGatekeeper
from .hub import MessagingHub
from .presence import PresenceRegistry
from .rooms import RoomRegistry
from .store import MessageStore

__all__ = [
    "ClientEvent",
    "Connection",
    "ConnectionGatekeeper",
    "EventType",
    "MessageStore",
    "MessagingHub",
    "PresenceRegistry",
    "RoomRegistry",
    "WebSocketConnection",
]
