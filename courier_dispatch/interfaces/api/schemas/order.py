"""Schemas for order endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderCreate(BaseModel):
    """Order payload; field checks happen in the use case so all errors are reported."""

    customer_name: str | None = None
    customer_phone: str | None = None
    address: str | None = None
    items: Any = None
    subtotal: Any = None
    delivery_fee: Any = None
    tax: Any = None
    total: Any = None
    priority: str | None = None
    payment_method: str | None = None
    order_type: str | None = None
    notes: str | None = None
    customer_location: Any = None
    estimated_delivery_time: Any = None
    customer_id: int | None = Field(
        default=None, description="Customer on whose behalf an administrator orders"
    )


class OrderTransitionRequest(BaseModel):
    status: str = Field(..., min_length=1)
    driver_id: int | None = Field(
        default=None, description="Driver to assign when an administrator claims"
    )
    reason: str | None = Field(default=None, description="Cancellation reason")

    model_config = ConfigDict(extra="forbid")

    def extra(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        if self.driver_id is not None:
            values["driver_id"] = self.driver_id
        if self.reason is not None:
            values["reason"] = self.reason
        return values


class OrderItemRead(BaseModel):
    name: str
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderRead(BaseModel):
    id: int
    customer_id: int
    customer_name: str
    customer_phone: str
    address: str
    customer_location: dict[str, Any] | None
    items: list[OrderItemRead]
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal
    status: str
    priority: str
    payment_method: str
    order_type: str
    notes: str | None
    estimated_delivery_time: int
    assigned_driver_id: int | None
    assigned_driver_name: str | None
    assigned_driver_phone: str | None
    accepted_at: datetime | None
    started_at: datetime | None
    completed_at: datetime | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    cancelled_by: int | None
    cancelled_driver_id: int | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class DriverOrderStatsRead(BaseModel):
    driver_id: int
    total_orders: int
    available_orders: int
    assigned_orders: int
    in_progress_orders: int
    delivered_orders: int
    today_orders: int
    total_earnings: Decimal

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "OrderCreate",
    "OrderTransitionRequest",
    "OrderItemRead",
    "OrderRead",
    "DriverOrderStatsRead",
]
