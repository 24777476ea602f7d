"""Use case for drivers toggling themselves online or offline."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.permissions import ensure_self_or_admin
from courier_dispatch.domain.entities import (
    PRESENCE_ONLINE,
    PRESENCE_STATUSES,
    Actor,
    PresenceStatus,
)
from courier_dispatch.domain.exceptions import (
    ForcedOfflineError,
    PermissionDeniedError,
    ValidationError,
)
from courier_dispatch.infrastructure.repositories import DriverPresenceRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

from .get_status import build_status
from .validators import require_driver

logger = logging.getLogger(__name__)


def set_status(
    session: Session,
    *,
    driver_id: int,
    status: str,
    actor: Actor | None = None,
    now: datetime | None = None,
) -> PresenceStatus:
    """Set the self-reported presence of ``driver_id``.

    Going online stamps a fresh heartbeat and fails with
    :class:`ForcedOfflineError` while an administrator keeps the driver offline.
    Going offline clears the heartbeat and is always accepted.
    """

    if status not in PRESENCE_STATUSES:
        raise ValidationError(
            [f"status must be one of: {', '.join(PRESENCE_STATUSES)}"],
        )
    ensure_self_or_admin(actor, driver_id)
    driver = require_driver(session, driver_id)

    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    repository = DriverPresenceRepository(session)
    repository.ensure(driver_id, now=timestamp)

    if status == PRESENCE_ONLINE:
        if not driver.is_active:
            raise PermissionDeniedError(f"Driver {driver_id} is not active")
        if not repository.set_online(driver_id, now=timestamp):
            current = repository.get(driver_id)
            raise ForcedOfflineError(driver_id, current.offline_reason if current else None)
    else:
        repository.set_offline(driver_id, now=timestamp)

    logger.debug("Driver %s is now %s", driver_id, status)
    return build_status(session, driver_id=driver_id, now=timestamp)


__all__ = ["set_status"]
