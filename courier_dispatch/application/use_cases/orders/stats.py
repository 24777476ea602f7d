"""Dashboard counters for drivers."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.permissions import ensure_self_or_admin
from courier_dispatch.application.use_cases.presence.validators import require_driver
from courier_dispatch.domain.entities import (
    ORDER_STATUS_ASSIGNED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_IN_PROGRESS,
    ORDER_STATUS_PENDING_ASSIGNMENT,
    Actor,
    DriverOrderStats,
)
from courier_dispatch.infrastructure.repositories import OrderRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone


def driver_order_stats(
    session: Session,
    *,
    driver_id: int,
    actor: Actor | None = None,
    now: datetime | None = None,
) -> DriverOrderStats:
    ensure_self_or_admin(actor, driver_id)
    require_driver(session, driver_id)

    repository = OrderRepository(session)
    current = ensure_app_timezone(now) or now_in_app_timezone()
    start_of_day = current.replace(hour=0, minute=0, second=0, microsecond=0)

    assigned = repository.count(
        statuses=[ORDER_STATUS_ASSIGNED], assigned_driver_id=driver_id
    )
    in_progress = repository.count(
        statuses=[ORDER_STATUS_IN_PROGRESS], assigned_driver_id=driver_id
    )
    delivered = repository.count(
        statuses=[ORDER_STATUS_DELIVERED], assigned_driver_id=driver_id
    )
    return DriverOrderStats(
        driver_id=driver_id,
        total_orders=repository.count(handled_by_driver=driver_id),
        available_orders=repository.count(
            statuses=[ORDER_STATUS_PENDING_ASSIGNMENT], unassigned=True
        ),
        assigned_orders=assigned,
        in_progress_orders=in_progress,
        delivered_orders=delivered,
        today_orders=repository.count(
            handled_by_driver=driver_id, created_from=start_of_day
        ),
        total_earnings=repository.sum_delivery_fees(
            assigned_driver_id=driver_id, status=ORDER_STATUS_DELIVERED
        ),
    )


__all__ = ["driver_order_stats"]
