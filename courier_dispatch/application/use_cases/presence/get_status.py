"""Use case returning a driver's presence record and availability."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.permissions import ensure_self_or_admin
from courier_dispatch.application.policy import heartbeat_timeout
from courier_dispatch.domain.entities import Actor, DriverPresence, PresenceStatus
from courier_dispatch.infrastructure.repositories import DriverPresenceRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

from .validators import require_driver


def get_status(
    session: Session,
    *,
    driver_id: int,
    actor: Actor | None = None,
    now: datetime | None = None,
) -> PresenceStatus:
    """Return the presence of ``driver_id``; an offline default when none exists."""

    ensure_self_or_admin(actor, driver_id)
    require_driver(session, driver_id)
    return build_status(session, driver_id=driver_id, now=now)


def build_status(
    session: Session, *, driver_id: int, now: datetime | None = None
) -> PresenceStatus:
    checked_at = ensure_app_timezone(now) or now_in_app_timezone()
    presence = DriverPresenceRepository(session).get(driver_id) or DriverPresence(
        driver_id=driver_id
    )
    return PresenceStatus(
        presence=presence,
        available=presence.is_effectively_available(checked_at, heartbeat_timeout()),
        checked_at=checked_at,
    )


__all__ = ["get_status", "build_status"]
