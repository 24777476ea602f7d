"""Domain entities exposed by the dispatch core."""

from .actor import Actor
from .driver_presence import (
    DEFAULT_FORCE_OFFLINE_REASON,
    PRESENCE_OFFLINE,
    PRESENCE_ONLINE,
    PRESENCE_STATUSES,
    DriverPresence,
    PresenceOverview,
    PresenceStatus,
)
from .notification import (
    NOTIFICATION_NEW_ORDER,
    MailboxContents,
    MailboxStats,
    Notification,
)
from .order import (
    ALLOWED_TRANSITIONS,
    ASSIGNED_STATUSES,
    ORDER_PRIORITIES,
    ORDER_STATUS_ASSIGNED,
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_IN_PROGRESS,
    ORDER_STATUS_PENDING_ASSIGNMENT,
    ORDER_STATUSES,
    PRIORITY_NORMAL,
    TERMINAL_STATUSES,
    DriverOrderStats,
    Order,
    OrderDraft,
    OrderItem,
    allowed_transitions,
)
from .user import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_DRIVER, ROLES, User

__all__ = [
    "Actor",
    "User",
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "ROLE_DRIVER",
    "ROLES",
    "Order",
    "OrderDraft",
    "OrderItem",
    "DriverOrderStats",
    "ALLOWED_TRANSITIONS",
    "ASSIGNED_STATUSES",
    "TERMINAL_STATUSES",
    "ORDER_STATUSES",
    "ORDER_PRIORITIES",
    "ORDER_STATUS_PENDING_ASSIGNMENT",
    "ORDER_STATUS_ASSIGNED",
    "ORDER_STATUS_IN_PROGRESS",
    "ORDER_STATUS_DELIVERED",
    "ORDER_STATUS_CANCELLED",
    "PRIORITY_NORMAL",
    "allowed_transitions",
    "DriverPresence",
    "PresenceStatus",
    "PresenceOverview",
    "PRESENCE_ONLINE",
    "PRESENCE_OFFLINE",
    "PRESENCE_STATUSES",
    "DEFAULT_FORCE_OFFLINE_REASON",
    "Notification",
    "MailboxContents",
    "MailboxStats",
    "NOTIFICATION_NEW_ORDER",
]
