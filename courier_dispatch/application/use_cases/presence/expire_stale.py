"""Housekeeping that flips drivers with stale heartbeats offline."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.policy import heartbeat_timeout
from courier_dispatch.infrastructure.repositories import DriverPresenceRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def expire_stale_presence(session: Session, *, now: datetime | None = None) -> int:
    """Mark online drivers whose heartbeat timed out as offline.

    Availability never depends on this running. Each flip is conditional on the
    heartbeat observed here, so a heartbeat that lands in between wins.
    """

    checked_at = ensure_app_timezone(now) or now_in_app_timezone()
    timeout = heartbeat_timeout()
    repository = DriverPresenceRepository(session)

    expired = 0
    for presence in repository.list_online():
        if presence.heartbeat_fresh(checked_at, timeout):
            continue
        if repository.mark_offline_if_unchanged(
            presence.driver_id,
            observed_heartbeat=presence.last_heartbeat,
            now=checked_at,
        ):
            expired += 1

    if expired:
        logger.info("Marked %s drivers with stale heartbeats offline", expired)
    return expired


__all__ = ["expire_stale_presence"]
