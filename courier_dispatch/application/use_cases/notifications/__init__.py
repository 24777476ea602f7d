"""Use cases for driver notifications."""

from .dispatcher import build_new_order_notification, notify_new_order, order_snapshot
from .mailbox import delete_notification, get_mailbox, mailbox_stats, mark_read
from .retention import purge_expired

__all__ = [
    "build_new_order_notification",
    "notify_new_order",
    "order_snapshot",
    "delete_notification",
    "get_mailbox",
    "mailbox_stats",
    "mark_read",
    "purge_expired",
]
