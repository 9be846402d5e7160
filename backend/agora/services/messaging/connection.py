# backend/agora/services/messaging/connection.py
"""Live connection handles the hub delivers to."""

from abc import ABC, abstractmethod
import logging
from typing import Any, Dict

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from ...core.ulid_helper import generate_ulid

logger = logging.getLogger(__name__)


class Connection(ABC):
    """
    One authenticated client session.

    ``send`` never raises for a peer that has gone away; it returns False so
    a stale handle between disconnect and unregister is harmless.
    """

    def __init__(self, user_id: str, username: str) -> None:
        self.connection_id = generate_ulid()
        self.user_id = user_id
        self.username = username

    @abstractmethod
    async def send(self, frame: Dict[str, Any]) -> bool:
        """Deliver one frame. Returns True if it was handed to the transport."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.username} ({self.user_id}) #{self.connection_id}>"


class WebSocketConnection(Connection):
    def __init__(self, websocket: WebSocket, user_id: str, username: str) -> None:
        super().__init__(user_id, username)
        self.websocket = websocket

    async def send(self, frame: Dict[str, Any]) -> bool:
        if self.websocket.application_state != WebSocketState.CONNECTED:
            return False
        try:
            await self.websocket.send_json(frame)
            return True
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.debug(f"[REALTIME] Failed to send to {self.user_id}: {e}")
            return False
