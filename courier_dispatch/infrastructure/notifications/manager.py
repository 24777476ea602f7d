"""Connection management helpers for driver notification websockets."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track the live websockets of each driver.

    A driver may hold several sockets (phone and tablet). The registry is read
    from worker threads by the publisher, so mutations go through a lock.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[int, Set[WebSocket]] = defaultdict(set)
        self._lock = threading.Lock()

    async def connect(self, driver_id: int, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``driver_id``."""

        await websocket.accept()
        with self._lock:
            self._connections[driver_id].add(websocket)
            count = len(self._connections[driver_id])
        logger.info("Driver %s connected (%s open sockets)", driver_id, count)

    def disconnect(self, driver_id: int, websocket: WebSocket) -> None:
        with self._lock:
            connections = self._connections.get(driver_id)
            if connections is None or websocket not in connections:
                return
            connections.discard(websocket)
            remaining = len(connections)
            if not remaining:
                self._connections.pop(driver_id, None)
        logger.info("Driver %s disconnected (%s open sockets)", driver_id, remaining)

    def connection_count(self, driver_id: int) -> int:
        with self._lock:
            return len(self._connections.get(driver_id, ()))

    def is_connected(self, driver_id: int) -> bool:
        return self.connection_count(driver_id) > 0

    async def send_to_driver(self, driver_id: int, message: dict[str, Any]) -> int:
        """Send ``message`` to every socket of ``driver_id``; return how many got it."""

        with self._lock:
            connections = list(self._connections.get(driver_id, ()))
        delivered = 0
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - dropped sockets
                logger.debug("Dropping websocket of driver %s", driver_id, exc_info=True)
                self.disconnect(driver_id, connection)
            else:
                delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
