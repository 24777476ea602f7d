"""Effective availability of drivers for dispatch."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.policy import heartbeat_timeout
from courier_dispatch.infrastructure.repositories import DriverPresenceRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone


def effective_availability(
    session: Session, *, driver_id: int, now: datetime | None = None
) -> bool:
    """Return ``True`` when ``driver_id`` is online, not forced offline and fresh.

    Heartbeat expiry is evaluated here, at read time, so a driver stops being
    available the moment the timeout elapses even if no sweep has run.
    """

    presence = DriverPresenceRepository(session).get(driver_id)
    if presence is None:
        return False
    checked_at = ensure_app_timezone(now) or now_in_app_timezone()
    return presence.is_effectively_available(checked_at, heartbeat_timeout())


def list_available(session: Session, *, now: datetime | None = None) -> list[int]:
    """Return the ids of every driver currently available for dispatch."""

    checked_at = ensure_app_timezone(now) or now_in_app_timezone()
    timeout = heartbeat_timeout()
    return [
        presence.driver_id
        for presence in DriverPresenceRepository(session).list_online()
        if presence.is_effectively_available(checked_at, timeout)
    ]


__all__ = ["effective_availability", "list_available"]
