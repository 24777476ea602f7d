"""Dispatch policy values derived from the application settings."""

from __future__ import annotations

from datetime import timedelta

from courier_dispatch.config import get_settings


def heartbeat_timeout() -> timedelta:
    """Maximum heartbeat age for a driver to count as available."""

    return timedelta(seconds=get_settings().heartbeat_timeout_seconds)


def retention_window() -> timedelta:
    """Age after which mailbox notifications are purged."""

    return timedelta(days=get_settings().notification_retention_days)


def sweep_interval() -> float:
    return float(get_settings().retention_sweep_interval_seconds)


__all__ = ["heartbeat_timeout", "retention_window", "sweep_interval"]
