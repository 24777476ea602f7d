"""Retention of mailbox notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from courier_dispatch.application.permissions import ensure_admin
from courier_dispatch.application.policy import retention_window
from courier_dispatch.domain.entities import Actor
from courier_dispatch.infrastructure.mailbox import NotificationMailbox, driver_mailbox
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def purge_expired(
    *,
    actor: Actor | None = None,
    mailbox: NotificationMailbox | None = None,
    now: datetime | None = None,
) -> int:
    """Delete notifications older than the retention window, read or not."""

    if actor is not None:
        ensure_admin(actor)
    cutoff = (ensure_app_timezone(now) or now_in_app_timezone()) - retention_window()
    removed = (mailbox or driver_mailbox).purge_older_than(cutoff)
    if removed:
        logger.info("Purged %s notifications created before %s", removed, cutoff.isoformat())
    return removed


__all__ = ["purge_expired"]
