"""Use case recording a driver heartbeat."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.permissions import ensure_self_or_admin
from courier_dispatch.domain.entities import Actor, PresenceStatus
from courier_dispatch.domain.exceptions import ForcedOfflineError, PermissionDeniedError
from courier_dispatch.infrastructure.repositories import (
    DriverPresenceRepository,
    UserRepository,
)
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

from .get_status import build_status
from .validators import require_driver


def heartbeat(
    session: Session,
    *,
    driver_id: int,
    actor: Actor | None = None,
    now: datetime | None = None,
) -> PresenceStatus:
    """Stamp ``last_heartbeat`` and mark the driver online."""

    ensure_self_or_admin(actor, driver_id)
    require_driver(session, driver_id)
    if not UserRepository(session).is_active(driver_id):
        raise PermissionDeniedError(f"Driver {driver_id} is not active")

    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    repository = DriverPresenceRepository(session)
    repository.ensure(driver_id, now=timestamp)
    if not repository.record_heartbeat(driver_id, now=timestamp):
        current = repository.get(driver_id)
        raise ForcedOfflineError(driver_id, current.offline_reason if current else None)
    return build_status(session, driver_id=driver_id, now=timestamp)


__all__ = ["heartbeat"]
