"""Use cases for delivery orders."""

from .create_order import OrderDispatcher, create_order
from .get_order import can_view, get_order
from .list_orders import list_orders
from .stats import driver_order_stats
from .transition_order import transition_order
from .validators import ValidatedOrder, validate_order_draft

__all__ = [
    "OrderDispatcher",
    "create_order",
    "can_view",
    "get_order",
    "list_orders",
    "driver_order_stats",
    "transition_order",
    "ValidatedOrder",
    "validate_order_draft",
]
