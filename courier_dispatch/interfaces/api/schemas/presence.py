"""Schemas for driver presence endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from courier_dispatch.domain.entities import PresenceStatus


class PresenceUpdate(BaseModel):
    status: str = Field(..., description="Either 'online' or 'offline'")


class ForceOfflineRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=255)


class PresenceRead(BaseModel):
    driver_id: int
    online: bool
    force_offline: bool
    available: bool
    last_heartbeat: datetime | None
    last_status_change: datetime | None
    offline_reason: str | None
    checked_at: datetime

    @classmethod
    def from_status(cls, status: PresenceStatus) -> "PresenceRead":
        presence = status.presence
        return cls(
            driver_id=presence.driver_id,
            online=presence.online,
            force_offline=presence.force_offline,
            available=status.available,
            last_heartbeat=presence.last_heartbeat,
            last_status_change=presence.last_status_change,
            offline_reason=presence.offline_reason,
            checked_at=status.checked_at,
        )


class AvailableDriversRead(BaseModel):
    driver_ids: list[int]
    count: int


class PresenceOverviewRead(BaseModel):
    registered_drivers: int
    online: int
    available: int
    forced_offline: int

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "PresenceUpdate",
    "ForceOfflineRequest",
    "PresenceRead",
    "AvailableDriversRead",
    "PresenceOverviewRead",
]
