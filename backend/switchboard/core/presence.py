# switchboard/core/presence.py
"""
Process-local presence registry.

Maps an authenticated user id to the live connections that user holds
(one per device or tab). Connection handles are tracked by identity, so
the handle does not need to be hashable, and removing one connection
never disturbs the user's other connections.

Nothing here is persisted or shared across processes.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, NamedTuple, Set

logger = logging.getLogger(__name__)


class PresenceEntry(NamedTuple):
    user_id: str
    connection: Any


class PresenceRegistry:
    def __init__(self) -> None:
        self._connections: Dict[str, Dict[int, Any]] = {}
        self._lock = threading.Lock()

    def register(self, user_id: str, connection: Any) -> None:
        with self._lock:
            self._connections.setdefault(user_id, {})[id(connection)] = connection
        logger.debug("Registered connection for user %s", user_id)

    def deregister(self, user_id: str, connection: Any) -> bool:
        """Remove this exact connection. Returns False if it was not registered."""
        with self._lock:
            handles = self._connections.get(user_id)
            if not handles or handles.pop(id(connection), None) is None:
                return False
            if not handles:
                del self._connections[user_id]
        logger.debug("Deregistered connection for user %s", user_id)
        return True

    def lookup(self, user_ids: Iterable[str]) -> List[PresenceEntry]:
        """Every live connection belonging to any of the given users."""
        with self._lock:
            return [
                PresenceEntry(user_id, connection)
                for user_id in dict.fromkeys(user_ids)
                for connection in self._connections.get(user_id, {}).values()
            ]

    def is_online(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._connections

    def online_users(self) -> Set[str]:
        with self._lock:
            return set(self._connections)

    def connection_count(self) -> int:
        with self._lock:
            return sum(len(handles) for handles in self._connections.values())

    def clear(self) -> None:
        with self._lock:
            self._connections.clear()


# Single registry per server process
registry = PresenceRegistry()
