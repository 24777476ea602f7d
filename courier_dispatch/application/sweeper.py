"""Background thread that periodically evicts expired dispatch state."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Optional

from sqlalchemy.orm import Session

from courier_dispatch.config import get_settings
from courier_dispatch.infrastructure.database import SessionLocal
from courier_dispatch.infrastructure.mailbox import NotificationMailbox, driver_mailbox

from .policy import sweep_interval
from .use_cases.notifications import purge_expired
from .use_cases.presence import expire_stale_presence

logger = logging.getLogger(__name__)

_sweeper_instance: Optional["RetentionSweeper"] = None


class RetentionSweeper:
    """Purge old notifications and, optionally, stale presence on an interval."""

    def __init__(
        self,
        interval_seconds: float,
        *,
        mailbox: NotificationMailbox | None = None,
        session_factory: Callable[[], Session] = SessionLocal,
        expire_presence: bool = True,
    ) -> None:
        self.interval_seconds = interval_seconds
        self.mailbox = mailbox or driver_mailbox
        self.session_factory = session_factory
        self.expire_presence = expire_presence
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="retention-sweeper", daemon=True
        )

    def start(self) -> None:
        if not self._thread.is_alive():
            logger.info(
                "Starting retention sweeper (interval=%ss, expire_presence=%s)",
                self.interval_seconds,
                self.expire_presence,
            )
            self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout)

    def run_once(self) -> tuple[int, int]:
        """Run one sweep and return ``(purged notifications, expired drivers)``."""

        purged = purge_expired(mailbox=self.mailbox)
        expired = 0
        if self.expire_presence:
            session = self.session_factory()
            try:
                expired = expire_stale_presence(session)
            finally:
                session.close()
        return purged, expired

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                purged, expired = self.run_once()
                if purged or expired:
                    logger.info(
                        "Retention sweep purged %s notifications, expired %s drivers",
                        purged,
                        expired,
                    )
            except Exception:  # pragma: no cover - best effort logging
                logger.exception("Retention sweeper encountered an error")


def start_retention_sweeper() -> Optional[RetentionSweeper]:
    global _sweeper_instance

    settings = get_settings()
    if not settings.enable_retention_sweeper:
        return None

    if _sweeper_instance is None:
        _sweeper_instance = RetentionSweeper(
            sweep_interval(), expire_presence=settings.expire_stale_presence
        )
        _sweeper_instance.start()
    return _sweeper_instance


def stop_retention_sweeper() -> None:
    global _sweeper_instance

    if _sweeper_instance is not None:
        _sweeper_instance.stop()
        _sweeper_instance = None


__all__ = ["RetentionSweeper", "start_retention_sweeper", "stop_retention_sweeper"]
