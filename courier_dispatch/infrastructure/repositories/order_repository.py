"""Persistence layer for delivery orders."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import and_, func, or_, update
from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import (
    ORDER_STATUS_ASSIGNED,
    ORDER_STATUS_PENDING_ASSIGNMENT,
    Order,
    OrderItem,
)
from courier_dispatch.infrastructure.models import OrderModel
from courier_dispatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

_DATETIME_COLUMNS = frozenset(
    {"accepted_at", "started_at", "completed_at", "cancelled_at", "updated_at"}
)


class OrderRepository:
    """Provide reads and guarded writes for :class:`Order` records.

    Every status change is a single conditional ``UPDATE`` whose ``WHERE``
    clause re-checks the expected current state, so two callers racing on the
    same order can never both succeed.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, order_id: int) -> Order | None:
        model = self.session.get(OrderModel, order_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def list(
        self,
        *,
        customer_id: int | None = None,
        visible_to_driver: int | None = None,
        statuses: Iterable[str] | None = None,
        assigned_driver_id: int | None = None,
        priority: str | None = None,
        order_type: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> Sequence[Order]:
        query = self.session.query(OrderModel).populate_existing()
        if customer_id is not None:
            query = query.filter(OrderModel.customer_id == customer_id)
        if visible_to_driver is not None:
            query = query.filter(
                or_(
                    _handled_by(visible_to_driver),
                    and_(
                        OrderModel.status == ORDER_STATUS_PENDING_ASSIGNMENT,
                        OrderModel.assigned_driver_id.is_(None),
                    ),
                )
            )
        status_values = list(statuses or [])
        if status_values:
            query = query.filter(OrderModel.status.in_(status_values))
        if assigned_driver_id is not None:
            query = query.filter(OrderModel.assigned_driver_id == assigned_driver_id)
        if priority is not None:
            query = query.filter(OrderModel.priority == priority)
        if order_type is not None:
            query = query.filter(OrderModel.order_type == order_type)
        if created_from is not None:
            query = query.filter(
                OrderModel.created_at >= ensure_app_naive_datetime(created_from)
            )
        if created_to is not None:
            query = query.filter(
                OrderModel.created_at <= ensure_app_naive_datetime(created_to)
            )
        query = query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, order: Order) -> Order:
        model = OrderModel()
        self._apply_entity_to_model(model, order)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def claim(
        self,
        order_id: int,
        *,
        driver_id: int,
        driver_name: str | None,
        driver_phone: str | None,
        accepted_at: datetime,
    ) -> bool:
        """Bind ``driver_id`` to an unassigned pending order in one atomic write.

        Returns ``False`` when the order is no longer pending or already has a
        driver at the moment of the write.
        """

        accepted = ensure_app_naive_datetime(accepted_at)
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == ORDER_STATUS_PENDING_ASSIGNMENT,
                OrderModel.assigned_driver_id.is_(None),
            )
            .values(
                status=ORDER_STATUS_ASSIGNED,
                assigned_driver_id=driver_id,
                assigned_driver_name=driver_name,
                assigned_driver_phone=driver_phone,
                accepted_at=accepted,
                updated_at=accepted,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        self.session.commit()
        return result.rowcount == 1

    def apply_transition(
        self,
        order_id: int,
        *,
        from_status: str,
        to_status: str,
        values: dict[str, Any],
        expected_driver_id: int | None = None,
    ) -> bool:
        """Move the order from ``from_status`` to ``to_status`` if it is still there.

        When ``expected_driver_id`` is given the write also requires that driver
        to be the current assignee.
        """

        conditions = [OrderModel.id == order_id, OrderModel.status == from_status]
        if expected_driver_id is not None:
            conditions.append(OrderModel.assigned_driver_id == expected_driver_id)

        payload = {
            key: ensure_app_naive_datetime(value) if key in _DATETIME_COLUMNS else value
            for key, value in values.items()
        }
        payload["status"] = to_status
        statement = (
            update(OrderModel)
            .where(*conditions)
            .values(**payload)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        self.session.commit()
        return result.rowcount == 1

    def count(
        self,
        *,
        statuses: Iterable[str] | None = None,
        assigned_driver_id: int | None = None,
        unassigned: bool = False,
        handled_by_driver: int | None = None,
        created_from: datetime | None = None,
    ) -> int:
        query = self.session.query(func.count(OrderModel.id))
        status_values = list(statuses or [])
        if status_values:
            query = query.filter(OrderModel.status.in_(status_values))
        if assigned_driver_id is not None:
            query = query.filter(OrderModel.assigned_driver_id == assigned_driver_id)
        if unassigned:
            query = query.filter(OrderModel.assigned_driver_id.is_(None))
        if handled_by_driver is not None:
            query = query.filter(_handled_by(handled_by_driver))
        if created_from is not None:
            query = query.filter(
                OrderModel.created_at >= ensure_app_naive_datetime(created_from)
            )
        return int(query.scalar() or 0)

    def sum_delivery_fees(self, *, assigned_driver_id: int, status: str) -> Decimal:
        total = (
            self.session.query(func.sum(OrderModel.delivery_fee))
            .filter(
                OrderModel.assigned_driver_id == assigned_driver_id,
                OrderModel.status == status,
            )
            .scalar()
        )
        return Decimal(str(total)) if total is not None else Decimal("0")

    @staticmethod
    def _to_entity(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            customer_id=model.customer_id,
            customer_name=model.customer_name,
            customer_phone=model.customer_phone,
            address=model.address,
            items=[_item_from_json(entry) for entry in model.items or []],
            subtotal=_as_decimal(model.subtotal),
            delivery_fee=_as_decimal(model.delivery_fee),
            tax=_as_decimal(model.tax),
            total=_as_decimal(model.total),
            status=model.status,
            priority=model.priority,
            payment_method=model.payment_method,
            order_type=model.order_type,
            notes=model.notes,
            customer_location=model.customer_location,
            estimated_delivery_time=model.estimated_delivery_time,
            assigned_driver_id=model.assigned_driver_id,
            assigned_driver_name=model.assigned_driver_name,
            assigned_driver_phone=model.assigned_driver_phone,
            accepted_at=ensure_app_timezone(model.accepted_at),
            started_at=ensure_app_timezone(model.started_at),
            completed_at=ensure_app_timezone(model.completed_at),
            cancelled_at=ensure_app_timezone(model.cancelled_at),
            cancellation_reason=model.cancellation_reason,
            cancelled_by=model.cancelled_by,
            cancelled_driver_id=model.cancelled_driver_id,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )

    @staticmethod
    def _apply_entity_to_model(model: OrderModel, order: Order) -> None:
        model.customer_id = order.customer_id
        model.customer_name = order.customer_name
        model.customer_phone = order.customer_phone
        model.address = order.address
        model.customer_location = order.customer_location
        model.items = [item.to_dict() for item in order.items]
        model.subtotal = order.subtotal
        model.delivery_fee = order.delivery_fee
        model.tax = order.tax
        model.total = order.total
        model.status = order.status
        model.priority = order.priority
        model.payment_method = order.payment_method
        model.order_type = order.order_type
        model.notes = order.notes
        model.estimated_delivery_time = order.estimated_delivery_time
        model.assigned_driver_id = order.assigned_driver_id
        model.assigned_driver_name = order.assigned_driver_name
        model.assigned_driver_phone = order.assigned_driver_phone
        model.accepted_at = ensure_app_naive_datetime(order.accepted_at)
        model.started_at = ensure_app_naive_datetime(order.started_at)
        model.completed_at = ensure_app_naive_datetime(order.completed_at)
        model.cancelled_at = ensure_app_naive_datetime(order.cancelled_at)
        model.cancellation_reason = order.cancellation_reason
        model.cancelled_by = order.cancelled_by
        model.cancelled_driver_id = order.cancelled_driver_id
        model.created_at = ensure_app_naive_datetime(
            order.created_at or now_in_app_timezone()
        )
        model.updated_at = ensure_app_naive_datetime(order.updated_at)


def _handled_by(driver_id: int):
    """Orders the driver holds or held until they were cancelled."""

    return or_(
        OrderModel.assigned_driver_id == driver_id,
        OrderModel.cancelled_driver_id == driver_id,
    )


def _as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _item_from_json(entry: dict[str, Any]) -> OrderItem:
    return OrderItem(
        name=str(entry.get("name", "")),
        quantity=int(entry.get("quantity", 0)),
        price=_as_decimal(entry.get("price")),
    )


__all__ = ["OrderRepository"]
