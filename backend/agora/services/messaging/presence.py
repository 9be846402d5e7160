# backend/agora/services/messaging/presence.py
"""
Presence registry: which user is reachable through which connection.

One entry per user; the most recent connection wins. Lookups never suspend,
so the hub can read presence between awaits without extra coordination.
"""

import logging
import threading
from typing import Dict, List, Optional

from .connection import Connection

logger = logging.getLogger(__name__)


class PresenceRegistry:
    def __init__(self) -> None:
        self._entries: Dict[str, Connection] = {}
        self._lock = threading.Lock()

    def register(self, user_id: str, connection: Connection) -> Optional[Connection]:
        """Map ``user_id`` to ``connection``. Returns the handle it replaced, if any."""
        with self._lock:
            replaced = self._entries.get(user_id)
            self._entries[user_id] = connection
        if replaced is not None and replaced is not connection:
            logger.info(f"[PRESENCE] {user_id} reconnected; previous connection superseded")
            return replaced
        return None

    def lookup(self, user_id: str) -> Optional[Connection]:
        with self._lock:
            return self._entries.get(user_id)

    def unregister(self, user_id: str, connection: Optional[Connection] = None) -> bool:
        """
        Remove the entry for ``user_id``. Idempotent.

        When ``connection`` is given, the entry is removed only if it still
        points at that handle, so a late disconnect from a superseded session
        cannot evict the newer one.
        """
        with self._lock:
            current = self._entries.get(user_id)
            if current is None:
                return False
            if connection is not None and current is not connection:
                return False
            del self._entries[user_id]
            return True

    def online_user_ids(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._entries
