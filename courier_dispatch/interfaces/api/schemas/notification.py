"""Pydantic models describing mailbox payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    driver_id: int
    event_type: str
    order_id: int
    title: str
    message: str
    snapshot: dict[str, Any] = Field(default_factory=dict)
    read: bool
    read_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MailboxRead(BaseModel):
    notifications: list[NotificationRead]
    total: int
    unread: int

    model_config = ConfigDict(from_attributes=True)


class MailboxStatsRead(BaseModel):
    total_notifications: int
    total_unread: int
    drivers_with_notifications: int
    total_mailboxes: int

    model_config = ConfigDict(from_attributes=True)


__all__ = ["NotificationRead", "MailboxRead", "MailboxStatsRead"]
