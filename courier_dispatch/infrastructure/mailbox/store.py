"""In-process storage for per-driver notification mailboxes."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import replace
from datetime import datetime
from typing import Deque, Dict

from courier_dispatch.config import get_settings
from courier_dispatch.domain.entities import MailboxStats, Notification
from courier_dispatch.domain.exceptions import NotFoundError
from courier_dispatch.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationMailbox:
    """Bounded, newest-first notification mailboxes keyed by driver.

    Each driver has its own lock, so appends for one driver are serialized
    while different drivers never contend. When an append would exceed
    ``capacity`` the single oldest entry is discarded. Reads return copies.
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity <= 0:
            raise ValueError("Mailbox capacity must be positive")
        self.capacity = capacity
        self._mailboxes: Dict[int, Deque[Notification]] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._id_lock = threading.Lock()
        self._last_id = 0

    def append(self, driver_id: int, notification: Notification) -> Notification:
        """Store ``notification`` as the newest entry of ``driver_id``'s mailbox."""

        created_at = notification.created_at or now_in_app_timezone()
        stored = replace(
            notification,
            id=self._next_id(created_at),
            driver_id=driver_id,
            created_at=created_at,
            snapshot=dict(notification.snapshot),
        )
        lock, mailbox = self._mailbox_for(driver_id, create=True)
        with lock:
            if len(mailbox) == self.capacity:
                evicted = mailbox[-1]
                logger.debug(
                    "Mailbox of driver %s is full, evicting notification %s",
                    driver_id,
                    evicted.id,
                )
            mailbox.appendleft(stored)
        return _copy(stored)

    def list(self, driver_id: int) -> list[Notification]:
        """Return ``driver_id``'s notifications, most recent first."""

        lock, mailbox = self._mailbox_for(driver_id, create=False)
        if mailbox is None:
            return []
        with lock:
            return [_copy(entry) for entry in mailbox]

    def mark_read(
        self, driver_id: int, notification_id: int, *, now: datetime | None = None
    ) -> Notification:
        """Flag a notification as read; re-marking is a no-op."""

        lock, mailbox = self._mailbox_for(driver_id, create=False)
        if mailbox is not None:
            with lock:
                for entry in mailbox:
                    if entry.id == notification_id:
                        if not entry.read:
                            entry.read = True
                            entry.read_at = now or now_in_app_timezone()
                        return _copy(entry)
        raise NotFoundError(
            f"Notification {notification_id} not found for driver {driver_id}"
        )

    def delete(self, driver_id: int, notification_id: int) -> None:
        lock, mailbox = self._mailbox_for(driver_id, create=False)
        if mailbox is not None:
            with lock:
                for entry in mailbox:
                    if entry.id == notification_id:
                        mailbox.remove(entry)
                        return
        raise NotFoundError(
            f"Notification {notification_id} not found for driver {driver_id}"
        )

    def purge_older_than(self, cutoff: datetime) -> int:
        """Remove every notification created before ``cutoff``; return how many."""

        removed = 0
        for driver_id in self._driver_ids():
            lock, mailbox = self._mailbox_for(driver_id, create=False)
            if mailbox is None:
                continue
            with lock:
                kept = [entry for entry in mailbox if entry.created_at >= cutoff]
                dropped = len(mailbox) - len(kept)
                if dropped:
                    mailbox.clear()
                    mailbox.extend(kept)
                    removed += dropped
                    logger.debug(
                        "Purged %s expired notifications for driver %s", dropped, driver_id
                    )
        return removed

    def stats(self) -> MailboxStats:
        total = unread = with_notifications = 0
        driver_ids = self._driver_ids()
        for driver_id in driver_ids:
            entries = self.list(driver_id)
            if entries:
                with_notifications += 1
                total += len(entries)
                unread += sum(1 for entry in entries if not entry.read)
        return MailboxStats(
            total_notifications=total,
            total_unread=unread,
            drivers_with_notifications=with_notifications,
            total_mailboxes=len(driver_ids),
        )

    def clear(self) -> None:
        """Drop every mailbox."""

        with self._registry_lock:
            self._mailboxes.clear()
            self._locks.clear()

    def _mailbox_for(self, driver_id: int, *, create: bool):
        with self._registry_lock:
            mailbox = self._mailboxes.get(driver_id)
            if mailbox is None:
                if not create:
                    return None, None
                mailbox = deque(maxlen=self.capacity)
                self._mailboxes[driver_id] = mailbox
                self._locks[driver_id] = threading.Lock()
            return self._locks[driver_id], mailbox

    def _driver_ids(self) -> list[int]:
        with self._registry_lock:
            return list(self._mailboxes)

    def _next_id(self, created_at: datetime) -> int:
        # Millisecond timestamp, bumped so ids stay strictly increasing.
        candidate = int(created_at.timestamp() * 1000)
        with self._id_lock:
            self._last_id = max(candidate, self._last_id + 1)
            return self._last_id


def _copy(notification: Notification) -> Notification:
    return replace(notification, snapshot=dict(notification.snapshot))


driver_mailbox = NotificationMailbox(capacity=get_settings().mailbox_capacity)


__all__ = ["NotificationMailbox", "driver_mailbox"]
