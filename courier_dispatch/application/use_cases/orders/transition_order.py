"""Use case moving an order through its lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import (
    ASSIGNED_STATUSES,
    ORDER_STATUS_ASSIGNED,
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_IN_PROGRESS,
    Actor,
    Order,
    User,
    allowed_transitions,
)
from courier_dispatch.domain.exceptions import (
    AlreadyAssignedError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from courier_dispatch.infrastructure.repositories import OrderRepository, UserRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

MAX_CANCELLATION_REASON_LENGTH = 255


def transition_order(
    session: Session,
    *,
    order_id: int,
    actor: Actor,
    requested_status: str,
    extra: Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> Order:
    """Apply ``requested_status`` to the order on behalf of ``actor``.

    Claims (``pending_assignment -> assigned``) bind exactly one driver in a
    single conditional write. Drivers claim for themselves; administrators
    claim on behalf of ``extra["driver_id"]``. Cancellation accepts an
    optional ``extra["reason"]``.
    """

    extra = extra or {}
    repository = OrderRepository(session)
    order = repository.get(order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")

    if requested_status == ORDER_STATUS_ASSIGNED and order.status in ASSIGNED_STATUSES:
        raise AlreadyAssignedError(order_id, order.status)
    if requested_status not in allowed_transitions(order.status):
        raise InvalidTransitionError(order.status, requested_status)

    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    if requested_status == ORDER_STATUS_ASSIGNED:
        return _claim(session, repository, order, actor, extra, timestamp)

    _ensure_may_progress(order, actor)
    values = _transition_values(order, actor, requested_status, extra, timestamp)
    updated = repository.apply_transition(
        order_id,
        from_status=order.status,
        to_status=requested_status,
        values=values,
        expected_driver_id=actor.id if actor.is_driver() else None,
    )
    if not updated:
        _raise_for_lost_write(repository, order_id, actor, requested_status)

    logger.info(
        "Order %s moved from %s to %s by %s %s",
        order_id,
        order.status,
        requested_status,
        actor.role,
        actor.id,
    )
    return _reload(repository, order_id)


def _claim(
    session: Session,
    repository: OrderRepository,
    order: Order,
    actor: Actor,
    extra: Mapping[str, Any],
    timestamp: datetime,
) -> Order:
    if actor.is_driver():
        driver_id = actor.id
    elif actor.is_admin():
        driver_id = _driver_id_from_extra(extra)
    else:
        raise PermissionDeniedError("Only drivers and administrators may assign orders")

    driver = _active_driver(session, driver_id)
    claimed = repository.claim(
        order.id,
        driver_id=driver_id,
        driver_name=driver.name,
        driver_phone=driver.phone,
        accepted_at=timestamp,
    )
    if not claimed:
        current = repository.get(order.id)
        if current is None:
            raise NotFoundError(f"Order {order.id} not found")
        if current.status in ASSIGNED_STATUSES:
            raise AlreadyAssignedError(order.id, current.status)
        raise InvalidTransitionError(current.status, ORDER_STATUS_ASSIGNED)

    logger.info("Order %s assigned to driver %s", order.id, driver_id)
    return _reload(repository, order.id)


def _driver_id_from_extra(extra: Mapping[str, Any]) -> int:
    value = extra.get("driver_id")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(["driver_id is required to assign an order"])
    return value


def _active_driver(session: Session, driver_id: int) -> User:
    users = UserRepository(session)
    driver = users.get(driver_id)
    if driver is None or not driver.is_driver():
        raise NotFoundError(f"Driver {driver_id} not found")
    if not driver.is_active:
        raise PermissionDeniedError(f"Driver {driver_id} is not active")
    return driver


def _ensure_may_progress(order: Order, actor: Actor) -> None:
    if actor.is_admin():
        return
    if actor.is_driver():
        if order.is_bound_to(actor.id):
            return
        raise PermissionDeniedError(
            f"Order {order.id} is not assigned to driver {actor.id}"
        )
    raise PermissionDeniedError("Only drivers and administrators may update orders")


def _transition_values(
    order: Order,
    actor: Actor,
    requested_status: str,
    extra: Mapping[str, Any],
    timestamp: datetime,
) -> dict[str, Any]:
    values: dict[str, Any] = {"updated_at": timestamp}
    if requested_status == ORDER_STATUS_IN_PROGRESS:
        values["started_at"] = timestamp
    elif requested_status == ORDER_STATUS_DELIVERED:
        values["completed_at"] = timestamp
    elif requested_status == ORDER_STATUS_CANCELLED:
        values.update(
            cancelled_at=timestamp,
            cancellation_reason=_cancellation_reason(extra),
            cancelled_by=actor.id,
            assigned_driver_id=None,
            cancelled_driver_id=order.assigned_driver_id,
        )
    return values


def _cancellation_reason(extra: Mapping[str, Any]) -> str | None:
    reason = extra.get("reason")
    if reason is None:
        return None
    if not isinstance(reason, str):
        raise ValidationError(["reason must be a string"])
    reason = reason.strip()
    if len(reason) > MAX_CANCELLATION_REASON_LENGTH:
        raise ValidationError(
            [f"reason must be at most {MAX_CANCELLATION_REASON_LENGTH} characters"]
        )
    return reason or None


def _raise_for_lost_write(
    repository: OrderRepository, order_id: int, actor: Actor, requested_status: str
) -> None:
    current = repository.get(order_id)
    if current is None:
        raise NotFoundError(f"Order {order_id} not found")
    if requested_status not in allowed_transitions(current.status):
        raise InvalidTransitionError(current.status, requested_status)
    if actor.is_driver() and not current.is_bound_to(actor.id):
        raise PermissionDeniedError(
            f"Order {order_id} is not assigned to driver {actor.id}"
        )
    raise InvalidTransitionError(current.status, requested_status)


def _reload(repository: OrderRepository, order_id: int) -> Order:
    order = repository.get(order_id)
    if order is None:  # pragma: no cover - orders are never deleted
        raise NotFoundError(f"Order {order_id} not found")
    errors = order.consistency_errors()
    if errors:
        logger.error("Order %s is inconsistent: %s", order_id, "; ".join(errors))
    return order


__all__ = ["transition_order"]
