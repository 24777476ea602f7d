"""Domain entity describing a driver's presence for dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

PRESENCE_ONLINE = "online"
PRESENCE_OFFLINE = "offline"

PRESENCE_STATUSES = (PRESENCE_ONLINE, PRESENCE_OFFLINE)

DEFAULT_FORCE_OFFLINE_REASON = "Forced offline by an administrator"


@dataclass
class DriverPresence:
    """Self-reported and administrative presence of a single driver."""

    driver_id: int
    online: bool = False
    force_offline: bool = False
    last_heartbeat: datetime | None = None
    last_status_change: datetime | None = None
    offline_reason: str | None = None

    def heartbeat_fresh(self, now: datetime, timeout: timedelta) -> bool:
        """Return ``True`` when the last heartbeat is no older than ``timeout``."""

        if self.last_heartbeat is None:
            return False
        # Aware values sharing a zone subtract by wall clock, so compare in UTC.
        elapsed = now.astimezone(timezone.utc) - self.last_heartbeat.astimezone(
            timezone.utc
        )
        return elapsed <= timeout

    def is_effectively_available(self, now: datetime, timeout: timedelta) -> bool:
        """The single definition of "available for dispatch"."""

        return (
            self.online
            and not self.force_offline
            and self.heartbeat_fresh(now, timeout)
        )


@dataclass(frozen=True)
class PresenceStatus:
    """Presence record together with its availability at read time."""

    presence: DriverPresence
    available: bool
    checked_at: datetime


@dataclass(frozen=True)
class PresenceOverview:
    """Aggregated presence counters for administrators."""

    registered_drivers: int
    online: int
    available: int
    forced_offline: int


__all__ = [
    "DriverPresence",
    "PresenceStatus",
    "PresenceOverview",
    "PRESENCE_ONLINE",
    "PRESENCE_OFFLINE",
    "PRESENCE_STATUSES",
    "DEFAULT_FORCE_OFFLINE_REASON",
]
