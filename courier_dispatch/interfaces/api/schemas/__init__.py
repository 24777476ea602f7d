from .maintenance import ExpirePresenceResult, PurgeResult
from .notification import MailboxRead, MailboxStatsRead, NotificationRead
from .order import (
    DriverOrderStatsRead,
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderTransitionRequest,
)
from .presence import (
    AvailableDriversRead,
    ForceOfflineRequest,
    PresenceOverviewRead,
    PresenceRead,
    PresenceUpdate,
)

__all__ = [
    "ExpirePresenceResult",
    "PurgeResult",
    "MailboxRead",
    "MailboxStatsRead",
    "NotificationRead",
    "DriverOrderStatsRead",
    "OrderCreate",
    "OrderItemRead",
    "OrderRead",
    "OrderTransitionRequest",
    "AvailableDriversRead",
    "ForceOfflineRequest",
    "PresenceOverviewRead",
    "PresenceRead",
    "PresenceUpdate",
]
