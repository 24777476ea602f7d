"""Use case for creating delivery orders."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from courier_dispatch.application.use_cases.notifications import notify_new_order
from courier_dispatch.domain.entities import (
    ORDER_STATUS_PENDING_ASSIGNMENT,
    Actor,
    Order,
    OrderDraft,
)
from courier_dispatch.domain.exceptions import PermissionDeniedError
from courier_dispatch.infrastructure.repositories import OrderRepository
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

from .validators import validate_order_draft

logger = logging.getLogger(__name__)

OrderDispatcher = Callable[[Order], object]


def create_order(
    session: Session,
    *,
    actor: Actor,
    draft: OrderDraft,
    dispatcher: OrderDispatcher | None = None,
    now: datetime | None = None,
) -> Order:
    """Validate and persist a new order, then announce it to available drivers.

    Customers always own the orders they create; administrators may create an
    order on behalf of ``draft.customer_id``. The announcement runs through
    ``dispatcher`` (inline fan-out by default) and can never fail creation.
    """

    if not (actor.is_customer() or actor.is_admin()):
        raise PermissionDeniedError("Only customers and administrators may create orders")

    validated = validate_order_draft(draft)
    customer_id = actor.id
    if actor.is_admin() and draft.customer_id is not None:
        customer_id = draft.customer_id

    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    entity = Order(
        id=None,
        customer_id=customer_id,
        customer_name=validated.customer_name,
        customer_phone=validated.customer_phone,
        address=validated.address,
        items=validated.items,
        subtotal=validated.subtotal,
        delivery_fee=validated.delivery_fee,
        tax=validated.tax,
        total=validated.total,
        status=ORDER_STATUS_PENDING_ASSIGNMENT,
        priority=validated.priority,
        payment_method=validated.payment_method,
        order_type=validated.order_type,
        notes=validated.notes,
        customer_location=validated.customer_location,
        estimated_delivery_time=validated.estimated_delivery_time,
        created_at=timestamp,
        updated_at=timestamp,
    )
    order = OrderRepository(session).create(entity)
    logger.info("Order %s created for customer %s", order.id, customer_id)

    _trigger_dispatch(session, order, dispatcher, timestamp)
    return order


def _trigger_dispatch(
    session: Session,
    order: Order,
    dispatcher: OrderDispatcher | None,
    timestamp: datetime,
) -> None:
    try:
        if dispatcher is None:
            notify_new_order(session, order=order, now=timestamp)
        else:
            dispatcher(order)
    except Exception:
        session.rollback()
        logger.exception("Dispatch of order %s failed", order.id)


__all__ = ["create_order", "OrderDispatcher"]
