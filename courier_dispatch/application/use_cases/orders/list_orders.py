"""Use case listing orders visible to the caller."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import ORDER_PRIORITIES, Actor, Order
from courier_dispatch.domain.exceptions import PermissionDeniedError, ValidationError
from courier_dispatch.infrastructure.repositories import OrderRepository

from .validators import validate_statuses

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def list_orders(
    session: Session,
    *,
    actor: Actor | None = None,
    statuses: list[str] | None = None,
    assigned_driver_id: int | None = None,
    priority: str | None = None,
    order_type: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    skip: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Sequence[Order]:
    """Return orders newest first, restricted to what ``actor`` may see."""

    errors: list[str] = []
    if skip < 0:
        errors.append("skip must not be negative")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        errors.append(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if priority is not None and priority not in ORDER_PRIORITIES:
        errors.append(f"priority must be one of: {', '.join(ORDER_PRIORITIES)}")
    if created_from and created_to and created_from > created_to:
        errors.append("created_from must not be after created_to")
    if errors:
        raise ValidationError(errors, message="Invalid filter")
    status_values = validate_statuses(statuses)

    customer_id = None
    visible_to_driver = None
    if actor is not None and not actor.is_admin():
        if actor.is_customer():
            customer_id = actor.id
        elif actor.is_driver():
            visible_to_driver = actor.id
        else:
            raise PermissionDeniedError("Unknown role")

    return OrderRepository(session).list(
        customer_id=customer_id,
        visible_to_driver=visible_to_driver,
        statuses=status_values,
        assigned_driver_id=assigned_driver_id,
        priority=priority,
        order_type=order_type,
        created_from=created_from,
        created_to=created_to,
        skip=skip,
        limit=limit,
    )


__all__ = ["list_orders"]
