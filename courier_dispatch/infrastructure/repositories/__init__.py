"""Repository implementations for the infrastructure layer."""

from .driver_presence_repository import DriverPresenceRepository
from .order_repository import OrderRepository
from .user_repository import UserRepository

__all__ = [
    "DriverPresenceRepository",
    "OrderRepository",
    "UserRepository",
]
