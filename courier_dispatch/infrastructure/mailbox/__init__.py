"""Notification mailbox storage."""

from .store import NotificationMailbox, driver_mailbox

__all__ = ["NotificationMailbox", "driver_mailbox"]
