"""Tests for the retention sweeper."""

from __future__ import annotations

from datetime import timedelta

from courier_dispatch.application import sweeper as sweeper_module
from courier_dispatch.application.sweeper import RetentionSweeper, start_retention_sweeper
from courier_dispatch.application.use_cases.presence import heartbeat
from courier_dispatch.domain.entities import NOTIFICATION_NEW_ORDER, Notification
from courier_dispatch.infrastructure.mailbox import NotificationMailbox
from courier_dispatch.infrastructure.repositories import DriverPresenceRepository
from courier_dispatch.utils import now_in_app_timezone


def _notification(created_at) -> Notification:
    return Notification(
        id=None,
        driver_id=0,
        event_type=NOTIFICATION_NEW_ORDER,
        order_id=1,
        title="New order available",
        message="Order #1",
        created_at=created_at,
    )


def test_run_once_purges_notifications_and_expires_presence(session, directory):
    now = now_in_app_timezone()
    mailbox = NotificationMailbox(capacity=5)
    mailbox.append(directory.driver_a.id, _notification(now - timedelta(days=8)))
    mailbox.append(directory.driver_a.id, _notification(now - timedelta(hours=1)))
    heartbeat(session, driver_id=directory.driver_a.id, now=now - timedelta(minutes=10))
    heartbeat(session, driver_id=directory.driver_b.id, now=now)

    sweeper = RetentionSweeper(3600, mailbox=mailbox)
    purged, expired = sweeper.run_once()

    assert purged == 1
    assert expired == 1
    assert len(mailbox.list(directory.driver_a.id)) == 1
    repository = DriverPresenceRepository(session)
    assert repository.get(directory.driver_a.id).online is False
    assert repository.get(directory.driver_b.id).online is True


def test_presence_expiry_can_be_disabled(session, directory):
    heartbeat(
        session,
        driver_id=directory.driver_a.id,
        now=now_in_app_timezone() - timedelta(minutes=10),
    )

    sweeper = RetentionSweeper(3600, mailbox=NotificationMailbox(), expire_presence=False)
    assert sweeper.run_once() == (0, 0)
    assert DriverPresenceRepository(session).get(directory.driver_a.id).online is True


def test_sweeper_thread_starts_and_stops():
    sweeper = RetentionSweeper(0.01, mailbox=NotificationMailbox(), expire_presence=False)
    sweeper.start()
    sweeper.stop(timeout=2)
    assert not sweeper._thread.is_alive()


def test_start_is_a_no_op_when_disabled():
    assert start_retention_sweeper() is None
    assert sweeper_module._sweeper_instance is None
