# backend/agora/services/messaging/rooms.py
"""Broadcast groups. Only the global room exists."""

import threading
from typing import Dict, List, Set

from ...core.constants import GLOBAL_ROOM_ID
from .connection import Connection


class RoomRegistry:
    def __init__(self) -> None:
        self._rooms: Dict[str, Set[Connection]] = {GLOBAL_ROOM_ID: set()}
        self._lock = threading.Lock()

    def join(self, room_id: str, connection: Connection) -> None:
        with self._lock:
            self._rooms.setdefault(room_id, set()).add(connection)

    def leave(self, room_id: str, connection: Connection) -> None:
        with self._lock:
            self._rooms.get(room_id, set()).discard(connection)

    def leave_all(self, connection: Connection) -> None:
        with self._lock:
            for members in self._rooms.values():
                members.discard(connection)

    def members(self, room_id: str) -> List[Connection]:
        """Snapshot of the room; safe to iterate across awaits."""
        with self._lock:
            return list(self._rooms.get(room_id, ()))
