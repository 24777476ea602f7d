"""Use cases reading and updating a driver's mailbox."""

from __future__ import annotations

from datetime import datetime

from courier_dispatch.application.permissions import ensure_admin, ensure_self_or_admin
from courier_dispatch.domain.entities import (
    Actor,
    MailboxContents,
    MailboxStats,
    Notification,
)
from courier_dispatch.infrastructure.mailbox import NotificationMailbox, driver_mailbox
from courier_dispatch.utils import ensure_app_timezone


def get_mailbox(
    *,
    driver_id: int,
    actor: Actor | None = None,
    mailbox: NotificationMailbox | None = None,
) -> MailboxContents:
    """Return the notifications of ``driver_id``, newest first."""

    ensure_self_or_admin(actor, driver_id)
    notifications = (mailbox or driver_mailbox).list(driver_id)
    return MailboxContents(
        notifications=notifications,
        total=len(notifications),
        unread=sum(1 for notification in notifications if not notification.read),
    )


def mark_read(
    *,
    driver_id: int,
    notification_id: int,
    actor: Actor | None = None,
    mailbox: NotificationMailbox | None = None,
    now: datetime | None = None,
) -> Notification:
    ensure_self_or_admin(actor, driver_id)
    return (mailbox or driver_mailbox).mark_read(
        driver_id, notification_id, now=ensure_app_timezone(now)
    )


def delete_notification(
    *,
    driver_id: int,
    notification_id: int,
    actor: Actor | None = None,
    mailbox: NotificationMailbox | None = None,
) -> None:
    ensure_self_or_admin(actor, driver_id)
    (mailbox or driver_mailbox).delete(driver_id, notification_id)


def mailbox_stats(
    *, actor: Actor, mailbox: NotificationMailbox | None = None
) -> MailboxStats:
    ensure_admin(actor)
    return (mailbox or driver_mailbox).stats()


__all__ = ["get_mailbox", "mark_read", "delete_notification", "mailbox_stats"]
