"""Routes for creating, reading and progressing delivery orders."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from courier_dispatch.application.use_cases.notifications import notify_new_order
from courier_dispatch.application.use_cases.orders import (
    OrderDispatcher,
    create_order as create_order_uc,
    get_order as get_order_uc,
    list_orders as list_orders_uc,
    transition_order as transition_order_uc,
)
from courier_dispatch.domain.entities import Actor, Order, OrderDraft
from courier_dispatch.infrastructure.database import SessionLocal, get_db
from courier_dispatch.infrastructure.notifications import notification_publisher
from courier_dispatch.interfaces.api.dependencies import get_current_actor
from courier_dispatch.interfaces.api.schemas import (
    OrderCreate,
    OrderRead,
    OrderTransitionRequest,
)

router = APIRouter(prefix="/orders", tags=["orders"])
logger = logging.getLogger(__name__)


def _to_read_model(order: Order) -> OrderRead:
    return OrderRead.model_validate(order)


def announce_order(order_id: int) -> None:
    """Fan an order out to available drivers on a fresh session."""

    session = SessionLocal()
    try:
        order = get_order_uc(session, order_id=order_id)
        notify_new_order(session, order=order, publisher=notification_publisher)
    except Exception:
        logger.exception("Background dispatch of order %s failed", order_id)
    finally:
        session.close()


def _background_dispatcher(background_tasks: BackgroundTasks) -> OrderDispatcher:
    def schedule(order: Order) -> None:
        background_tasks.add_task(announce_order, order.id)

    return schedule


@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: OrderCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> OrderRead:
    """Create an order and announce it to available drivers after responding."""

    order = create_order_uc(
        db,
        actor=actor,
        draft=OrderDraft(**order_in.model_dump()),
        dispatcher=_background_dispatcher(background_tasks),
    )
    return _to_read_model(order)


@router.get("/", response_model=list[OrderRead])
def list_orders(
    status_filter: list[str] | None = Query(default=None, alias="status"),
    assigned_driver_id: int | None = None,
    priority: str | None = None,
    order_type: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[OrderRead]:
    """Return the orders visible to the caller, newest first."""

    orders = list_orders_uc(
        db,
        actor=actor,
        statuses=status_filter,
        assigned_driver_id=assigned_driver_id,
        priority=priority,
        order_type=order_type,
        created_from=created_from,
        created_to=created_to,
        skip=skip,
        limit=limit,
    )
    return [_to_read_model(order) for order in orders]


@router.get("/{order_id}", response_model=OrderRead)
def read_order(
    order_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> OrderRead:
    return _to_read_model(get_order_uc(db, order_id=order_id, actor=actor))


@router.post("/{order_id}/transition", response_model=OrderRead)
def transition_order(
    order_id: int,
    transition_in: OrderTransitionRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> OrderRead:
    """Claim, start, deliver or cancel an order."""

    order = transition_order_uc(
        db,
        order_id=order_id,
        actor=actor,
        requested_status=transition_in.status,
        extra=transition_in.extra(),
    )
    return _to_read_model(order)
