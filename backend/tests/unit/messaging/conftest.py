# backend/tests/unit/messaging/conftest.py
from typing import Any, Dict, List

import pytest

from agora.database import SessionLocal
from agora.services.messaging import (
    Connection,
    MessageStore,
    MessagingHub,
    PresenceRegistry,
    RoomRegistry,
)


class RecordingConnection(Connection):
    """In-memory connection that keeps every frame it was sent."""

    def __init__(self, user_id: str, username: str = "user", alive: bool = True) -> None:
        super().__init__(user_id, username)
        self.frames: List[Dict[str, Any]] = []
        self.alive = alive

    async def send(self, frame: Dict[str, Any]) -> bool:
        if not self.alive:
            return False
        self.frames.append(frame)
        return True

    def events(self) -> List[str]:
        return [frame["event"] for frame in self.frames]

    def last(self, event: str) -> Dict[str, Any]:
        matching = [frame["data"] for frame in self.frames if frame["event"] == event]
        assert matching, f"no {event!r} frame; got {self.events()}"
        return matching[-1]


@pytest.fixture
def make_connection():
    """Build a RecordingConnection for a User row or a bare user id."""

    def _make(user, alive: bool = True) -> RecordingConnection:
        if isinstance(user, str):
            return RecordingConnection(user, alive=alive)
        return RecordingConnection(user.id, user.username, alive=alive)

    return _make


@pytest.fixture
def hub() -> MessagingHub:
    return MessagingHub(
        store=MessageStore(SessionLocal), presence=PresenceRegistry(), rooms=RoomRegistry()
    )
