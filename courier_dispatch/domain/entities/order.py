"""Domain entities describing a delivery order and its lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

ORDER_STATUS_PENDING_ASSIGNMENT = "pending_assignment"
ORDER_STATUS_ASSIGNED = "assigned"
ORDER_STATUS_IN_PROGRESS = "in_progress"
ORDER_STATUS_DELIVERED = "delivered"
ORDER_STATUS_CANCELLED = "cancelled"

ORDER_STATUSES = (
    ORDER_STATUS_PENDING_ASSIGNMENT,
    ORDER_STATUS_ASSIGNED,
    ORDER_STATUS_IN_PROGRESS,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_CANCELLED,
)

# Statuses in which an order is bound to exactly one driver.
ASSIGNED_STATUSES = frozenset(
    {ORDER_STATUS_ASSIGNED, ORDER_STATUS_IN_PROGRESS, ORDER_STATUS_DELIVERED}
)
TERMINAL_STATUSES = frozenset({ORDER_STATUS_DELIVERED, ORDER_STATUS_CANCELLED})

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ORDER_STATUS_PENDING_ASSIGNMENT: frozenset(
        {ORDER_STATUS_ASSIGNED, ORDER_STATUS_CANCELLED}
    ),
    ORDER_STATUS_ASSIGNED: frozenset({ORDER_STATUS_IN_PROGRESS, ORDER_STATUS_CANCELLED}),
    ORDER_STATUS_IN_PROGRESS: frozenset({ORDER_STATUS_DELIVERED, ORDER_STATUS_CANCELLED}),
    ORDER_STATUS_DELIVERED: frozenset(),
    ORDER_STATUS_CANCELLED: frozenset(),
}

PRIORITY_LOW = "low"
PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

ORDER_PRIORITIES = (PRIORITY_LOW, PRIORITY_NORMAL, PRIORITY_HIGH, PRIORITY_URGENT)


def allowed_transitions(status: str) -> frozenset[str]:
    """Return the statuses reachable from ``status`` (empty for unknown values)."""

    return ALLOWED_TRANSITIONS.get(status, frozenset())


@dataclass
class OrderItem:
    """Single line of an order."""

    name: str
    quantity: int
    price: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity, "price": str(self.price)}


@dataclass
class OrderDraft:
    """Raw order data as received from the request handler, before validation."""

    customer_name: str | None = None
    customer_phone: str | None = None
    address: str | None = None
    items: list[dict[str, Any]] | None = None
    subtotal: Any = None
    delivery_fee: Any = None
    tax: Any = None
    total: Any = None
    priority: str | None = None
    payment_method: str | None = None
    order_type: str | None = None
    notes: str | None = None
    customer_location: dict[str, Any] | None = None
    estimated_delivery_time: Any = None
    customer_id: int | None = None


@dataclass
class Order:
    """A delivery order tracked through the dispatch lifecycle.

    ``status`` is the source of truth. The assignee and the lifecycle
    timestamps are derived from it and checked by :meth:`consistency_errors`.
    """

    id: int | None
    customer_id: int
    customer_name: str
    customer_phone: str
    address: str
    items: list[OrderItem]
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal
    status: str = ORDER_STATUS_PENDING_ASSIGNMENT
    priority: str = PRIORITY_NORMAL
    payment_method: str = "cash"
    order_type: str = "restaurant"
    notes: str | None = None
    customer_location: dict[str, Any] | None = None
    estimated_delivery_time: int = 30
    assigned_driver_id: int | None = None
    assigned_driver_name: str | None = None
    assigned_driver_phone: str | None = None
    accepted_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    cancelled_by: int | None = None
    cancelled_driver_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_assigned(self) -> bool:
        return self.status in ASSIGNED_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_bound_to(self, driver_id: int) -> bool:
        """Return ``True`` when ``driver_id`` currently holds this order."""

        return self.is_assigned and self.assigned_driver_id == driver_id

    def consistency_errors(self) -> list[str]:
        """Return the invariant violations between status, assignee and timestamps."""

        errors: list[str] = []
        if self.is_assigned and self.assigned_driver_id is None:
            errors.append(f"status '{self.status}' requires an assigned driver")
        if not self.is_assigned and self.assigned_driver_id is not None:
            errors.append(f"status '{self.status}' must not have an assigned driver")
        if self.completed_at is not None and self.status != ORDER_STATUS_DELIVERED:
            errors.append("completed_at is only valid for delivered orders")
        if self.started_at is not None and self.accepted_at is None:
            errors.append("started_at requires accepted_at")
        return errors


@dataclass(frozen=True)
class DriverOrderStats:
    """Dashboard counters for a single driver."""

    driver_id: int
    total_orders: int
    available_orders: int
    assigned_orders: int
    in_progress_orders: int
    delivered_orders: int
    today_orders: int
    total_earnings: Decimal


__all__ = [
    "Order",
    "OrderDraft",
    "OrderItem",
    "DriverOrderStats",
    "ALLOWED_TRANSITIONS",
    "ASSIGNED_STATUSES",
    "TERMINAL_STATUSES",
    "ORDER_STATUSES",
    "ORDER_STATUS_PENDING_ASSIGNMENT",
    "ORDER_STATUS_ASSIGNED",
    "ORDER_STATUS_IN_PROGRESS",
    "ORDER_STATUS_DELIVERED",
    "ORDER_STATUS_CANCELLED",
    "ORDER_PRIORITIES",
    "PRIORITY_LOW",
    "PRIORITY_NORMAL",
    "PRIORITY_HIGH",
    "PRIORITY_URGENT",
    "allowed_transitions",
]
