"""Utility helpers to push mailbox notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from courier_dispatch.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` to be delivered to its driver."""

        if not self._manager.is_connected(notification.driver_id):
            # The mailbox keeps it; the driver receives it on the next connect.
            return
        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(
                    self._manager.send_to_driver, notification.driver_id, message
                )
            except RuntimeError:
                # Called outside the server (scripts, tests): no sockets to reach.
                logger.debug(
                    "No event loop available to push notification %s", notification.id
                )
        else:
            loop.create_task(
                self._manager.send_to_driver(notification.driver_id, message)
            )


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "driver_id": notification.driver_id,
        "event_type": notification.event_type,
        "order_id": notification.order_id,
        "title": notification.title,
        "message": notification.message,
        "snapshot": dict(notification.snapshot),
        "read": notification.read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
