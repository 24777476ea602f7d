"""Validation helpers for incoming order data."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from courier_dispatch.domain.entities import (
    ORDER_PRIORITIES,
    ORDER_STATUSES,
    PRIORITY_NORMAL,
    OrderDraft,
    OrderItem,
)
from courier_dispatch.domain.exceptions import ValidationError

MIN_DELIVERY_MINUTES = 5
MAX_DELIVERY_MINUTES = 120
DEFAULT_DELIVERY_MINUTES = 30
MAX_NAME_LENGTH = 100
MAX_PHONE_LENGTH = 30


@dataclass(frozen=True)
class ValidatedOrder:
    customer_name: str
    customer_phone: str
    address: str
    items: list[OrderItem]
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal
    priority: str
    payment_method: str
    order_type: str
    notes: str | None
    customer_location: dict[str, Any] | None
    estimated_delivery_time: int


def validate_order_draft(draft: OrderDraft) -> ValidatedOrder:
    """Check every field of ``draft`` and report all violations at once."""

    errors: list[str] = []

    customer_name = _required_text(draft.customer_name, "customer_name", errors, MAX_NAME_LENGTH)
    customer_phone = _required_text(
        draft.customer_phone, "customer_phone", errors, MAX_PHONE_LENGTH
    )
    address = _required_text(draft.address, "address", errors)
    items = _validate_items(draft.items, errors)

    subtotal = _decimal(draft.subtotal, "subtotal", errors, required=True, positive=True)
    total = _decimal(draft.total, "total", errors, required=True, positive=True)
    delivery_fee = _decimal(draft.delivery_fee, "delivery_fee", errors)
    tax = _decimal(draft.tax, "tax", errors)

    priority = draft.priority or PRIORITY_NORMAL
    if priority not in ORDER_PRIORITIES:
        errors.append(f"priority must be one of: {', '.join(ORDER_PRIORITIES)}")

    estimated = _estimated_time(draft.estimated_delivery_time, errors)

    location = draft.customer_location
    if location is not None and not isinstance(location, Mapping):
        errors.append("customer_location must be an object")
        location = None

    if errors:
        raise ValidationError(errors, message="Invalid order")

    return ValidatedOrder(
        customer_name=customer_name,
        customer_phone=customer_phone,
        address=address,
        items=items,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        tax=tax,
        total=total,
        priority=priority,
        payment_method=(draft.payment_method or "cash").strip() or "cash",
        order_type=(draft.order_type or "restaurant").strip() or "restaurant",
        notes=(draft.notes or "").strip() or None,
        customer_location=dict(location) if location is not None else None,
        estimated_delivery_time=estimated,
    )


def validate_statuses(statuses: list[str] | None) -> list[str]:
    values = [status for status in statuses or [] if status]
    unknown = [status for status in values if status not in ORDER_STATUSES]
    if unknown:
        raise ValidationError(
            [f"Unknown order status '{status}'" for status in unknown],
            message="Invalid filter",
        )
    return values


def _required_text(
    value: Any, field: str, errors: list[str], max_length: int | None = None
) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        errors.append(f"{field} is required")
    elif max_length is not None and len(text) > max_length:
        errors.append(f"{field} must be at most {max_length} characters")
    return text


def _decimal(
    value: Any,
    field: str,
    errors: list[str],
    *,
    required: bool = False,
    positive: bool = False,
) -> Decimal:
    if value is None or value == "":
        if required:
            errors.append(f"{field} is required")
        return Decimal("0")
    if isinstance(value, bool):
        errors.append(f"{field} must be a number")
        return Decimal("0")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        errors.append(f"{field} must be a number")
        return Decimal("0")
    if not number.is_finite():
        errors.append(f"{field} must be a number")
        return Decimal("0")
    if positive and number <= 0:
        errors.append(f"{field} must be greater than 0")
    elif number < 0:
        errors.append(f"{field} must not be negative")
    return number


def _estimated_time(value: Any, errors: list[str]) -> int:
    if value is None or value == "":
        return DEFAULT_DELIVERY_MINUTES
    if isinstance(value, bool):
        errors.append("estimated_delivery_time must be an integer")
        return DEFAULT_DELIVERY_MINUTES
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        errors.append("estimated_delivery_time must be an integer")
        return DEFAULT_DELIVERY_MINUTES
    if not MIN_DELIVERY_MINUTES <= minutes <= MAX_DELIVERY_MINUTES:
        errors.append(
            f"estimated_delivery_time must be between {MIN_DELIVERY_MINUTES} "
            f"and {MAX_DELIVERY_MINUTES} minutes"
        )
    return minutes


def _validate_items(value: Any, errors: list[str]) -> list[OrderItem]:
    if not isinstance(value, list) or not value:
        errors.append("items must contain at least one item")
        return []

    items: list[OrderItem] = []
    for index, raw in enumerate(value):
        label = f"items[{index}]"
        if not isinstance(raw, Mapping):
            errors.append(f"{label} must be an object")
            continue
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append(f"{label}.name is required")
            name = ""
        quantity = raw.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            errors.append(f"{label}.quantity must be a positive integer")
            quantity = 0
        price = _decimal(raw.get("price"), f"{label}.price", errors, required=True)
        items.append(OrderItem(name=name.strip(), quantity=quantity, price=price))
    return items


__all__ = ["ValidatedOrder", "validate_order_draft", "validate_statuses"]
