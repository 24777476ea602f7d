"""SQLAlchemy model for delivery orders."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, Numeric, String, Text

from courier_dispatch.infrastructure.database import Base
from courier_dispatch.utils import now_in_app_naive_datetime


class OrderModel(Base):
    """Database representation of an order and its lifecycle state."""

    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_status_assigned_driver", "status", "assigned_driver_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, nullable=False, index=True)
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=False)
    address = Column(Text, nullable=False)
    customer_location = Column(JSON, nullable=True)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False)
    status = Column(String(30), nullable=False, default="pending_assignment")
    priority = Column(String(10), nullable=False, default="normal")
    payment_method = Column(String(30), nullable=False, default="cash")
    order_type = Column(String(30), nullable=False, default="restaurant")
    notes = Column(Text, nullable=True)
    estimated_delivery_time = Column(Integer, nullable=False, default=30)
    assigned_driver_id = Column(Integer, nullable=True, index=True)
    assigned_driver_name = Column(String(100), nullable=True)
    assigned_driver_phone = Column(String(30), nullable=True)
    accepted_at = Column(DateTime(), nullable=True)
    started_at = Column(DateTime(), nullable=True)
    completed_at = Column(DateTime(), nullable=True)
    cancelled_at = Column(DateTime(), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    cancelled_by = Column(Integer, nullable=True)
    cancelled_driver_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True)


__all__ = ["OrderModel"]
