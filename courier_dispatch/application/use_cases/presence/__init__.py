"""Use cases for driver presence."""

from .admin import allow_online, force_offline, presence_overview
from .availability import effective_availability, list_available
from .expire_stale import expire_stale_presence
from .get_status import get_status
from .heartbeat import heartbeat
from .set_status import set_status

__all__ = [
    "allow_online",
    "force_offline",
    "presence_overview",
    "effective_availability",
    "list_available",
    "expire_stale_presence",
    "get_status",
    "heartbeat",
    "set_status",
]
