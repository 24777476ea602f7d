"""ORM models used by the infrastructure layer."""

from .driver_presence import DriverPresenceModel
from .order import OrderModel
from .user import UserModel

__all__ = [
    "DriverPresenceModel",
    "OrderModel",
    "UserModel",
]
