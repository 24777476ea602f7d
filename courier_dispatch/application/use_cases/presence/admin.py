"""Administrative presence overrides and reporting."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.permissions import ensure_admin
from courier_dispatch.application.policy import heartbeat_timeout
from courier_dispatch.domain.entities import (
    DEFAULT_FORCE_OFFLINE_REASON,
    ROLE_DRIVER,
    Actor,
    PresenceOverview,
    PresenceStatus,
)
from courier_dispatch.infrastructure.repositories import (
    DriverPresenceRepository,
    UserRepository,
)
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

from .get_status import build_status
from .validators import require_driver

logger = logging.getLogger(__name__)


def force_offline(
    session: Session,
    *,
    driver_id: int,
    actor: Actor,
    reason: str | None = None,
    now: datetime | None = None,
) -> PresenceStatus:
    """Take ``driver_id`` offline and block it from coming back online."""

    ensure_admin(actor)
    require_driver(session, driver_id)

    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    reason = (reason or "").strip() or DEFAULT_FORCE_OFFLINE_REASON
    repository = DriverPresenceRepository(session)
    repository.ensure(driver_id, now=timestamp)
    repository.force_offline(driver_id, reason=reason, now=timestamp)
    logger.info("Admin %s forced driver %s offline: %s", actor.id, driver_id, reason)
    return build_status(session, driver_id=driver_id, now=timestamp)


def allow_online(
    session: Session,
    *,
    driver_id: int,
    actor: Actor,
    now: datetime | None = None,
) -> PresenceStatus:
    """Lift the override; the driver still has to go online by itself."""

    ensure_admin(actor)
    require_driver(session, driver_id)

    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    repository = DriverPresenceRepository(session)
    repository.ensure(driver_id, now=timestamp)
    repository.allow_online(driver_id, now=timestamp)
    logger.info("Admin %s allowed driver %s back online", actor.id, driver_id)
    return build_status(session, driver_id=driver_id, now=timestamp)


def presence_overview(
    session: Session, *, actor: Actor, now: datetime | None = None
) -> PresenceOverview:
    ensure_admin(actor)

    checked_at = ensure_app_timezone(now) or now_in_app_timezone()
    timeout = heartbeat_timeout()
    records = DriverPresenceRepository(session).list_all()
    return PresenceOverview(
        registered_drivers=len(UserRepository(session).list_by_role(ROLE_DRIVER)),
        online=sum(1 for record in records if record.online),
        available=sum(
            1 for record in records if record.is_effectively_available(checked_at, timeout)
        ),
        forced_offline=sum(1 for record in records if record.force_offline),
    )


__all__ = ["force_offline", "allow_online", "presence_overview"]
