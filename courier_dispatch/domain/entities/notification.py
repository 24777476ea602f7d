"""Domain entity representing a dispatch notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_NEW_ORDER = "new_order"


@dataclass
class Notification:
    """Point-in-time message stored in exactly one driver's mailbox.

    ``snapshot`` is a copy of the order fields at creation time, not a live
    view of the order.
    """

    id: int | None
    driver_id: int
    event_type: str
    order_id: int
    title: str
    message: str
    snapshot: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class MailboxContents:
    """A driver's notifications, newest first, with their counters."""

    notifications: list[Notification]
    total: int
    unread: int


@dataclass(frozen=True)
class MailboxStats:
    """Aggregated mailbox counters across every driver."""

    total_notifications: int
    total_unread: int
    drivers_with_notifications: int
    total_mailboxes: int


__all__ = ["Notification", "MailboxContents", "MailboxStats", "NOTIFICATION_NEW_ORDER"]
