"""Fan-out of new order events into driver mailboxes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from courier_dispatch.application.use_cases.presence import list_available
from courier_dispatch.domain.entities import NOTIFICATION_NEW_ORDER, Notification, Order
from courier_dispatch.infrastructure.mailbox import NotificationMailbox, driver_mailbox
from courier_dispatch.infrastructure.notifications import NotificationPublisher
from courier_dispatch.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def order_snapshot(order: Order) -> dict[str, Any]:
    """Point-in-time copy of the order fields drivers need to decide."""

    return {
        "total": str(order.total),
        "delivery_fee": str(order.delivery_fee),
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "customer_location": dict(order.customer_location)
        if order.customer_location
        else None,
        "address": order.address,
        "priority": order.priority,
    }


def build_new_order_notification(
    order: Order, *, driver_id: int, now: datetime | None = None
) -> Notification:
    return Notification(
        id=None,
        driver_id=driver_id,
        event_type=NOTIFICATION_NEW_ORDER,
        order_id=order.id,
        title="New order available",
        message=f"Order #{order.id} to {order.address} ({order.total})",
        snapshot=order_snapshot(order),
        created_at=ensure_app_timezone(now) or now_in_app_timezone(),
    )


def notify_new_order(
    session: Session,
    *,
    order: Order,
    mailbox: NotificationMailbox | None = None,
    publisher: NotificationPublisher | None = None,
    now: datetime | None = None,
) -> int:
    """Append one notification per available driver and return how many got one.

    Realtime delivery through ``publisher`` is best effort; the mailbox entry
    is the record of the event.
    """

    mailbox = mailbox or driver_mailbox
    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    driver_ids = list_available(session, now=timestamp)

    for driver_id in driver_ids:
        stored = mailbox.append(
            driver_id,
            build_new_order_notification(order, driver_id=driver_id, now=timestamp),
        )
        if publisher is None:
            continue
        try:
            publisher.dispatch(stored)
        except Exception:
            logger.exception(
                "Realtime push of notification %s to driver %s failed",
                stored.id,
                driver_id,
            )

    logger.info("Order %s announced to %s drivers", order.id, len(driver_ids))
    return len(driver_ids)


__all__ = ["build_new_order_notification", "notify_new_order", "order_snapshot"]
