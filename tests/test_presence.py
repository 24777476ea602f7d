"""Tests for driver presence, availability and administrative overrides."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from courier_dispatch.application.use_cases.notifications import notify_new_order
from courier_dispatch.application.use_cases.orders import create_order
from courier_dispatch.application.use_cases.presence import (
    allow_online,
    effective_availability,
    expire_stale_presence,
    force_offline,
    get_status,
    heartbeat,
    list_available,
    presence_overview,
    set_status,
)
from courier_dispatch.config import reset_settings_cache
from courier_dispatch.domain.entities import DEFAULT_FORCE_OFFLINE_REASON, DriverPresence
from courier_dispatch.domain.exceptions import (
    ForcedOfflineError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from courier_dispatch.infrastructure.mailbox import driver_mailbox
from courier_dispatch.infrastructure.repositories import DriverPresenceRepository
from courier_dispatch.utils import get_app_timezone


def test_status_defaults_to_offline_without_record(session, directory, t0):
    status = get_status(session, driver_id=directory.driver_a.id, now=t0)
    assert status.presence.online is False
    assert status.presence.last_heartbeat is None
    assert status.available is False
    assert DriverPresenceRepository(session).get(directory.driver_a.id) is None


def test_going_online_stamps_heartbeat_and_offline_clears_it(session, directory, t0):
    driver_id = directory.driver_a.id

    online = set_status(session, driver_id=driver_id, status="online", now=t0)
    assert online.presence.online is True
    assert online.presence.last_heartbeat == t0
    assert online.presence.last_status_change == t0
    assert online.available is True

    offline = set_status(
        session, driver_id=driver_id, status="offline", now=t0 + timedelta(seconds=30)
    )
    assert offline.presence.online is False
    assert offline.presence.last_heartbeat is None
    assert offline.presence.last_status_change == t0 + timedelta(seconds=30)
    assert offline.available is False


def test_each_condition_flips_availability(session, directory, t0):
    driver_id = directory.driver_a.id
    admin = directory.actor(directory.admin)

    heartbeat(session, driver_id=driver_id, now=t0)
    assert effective_availability(session, driver_id=driver_id, now=t0) is True

    # Stale heartbeat.
    assert effective_availability(session, driver_id=driver_id, now=t0 + timedelta(seconds=121)) is False

    # Explicitly offline.
    set_status(session, driver_id=driver_id, status="offline", now=t0)
    assert effective_availability(session, driver_id=driver_id, now=t0) is False

    # Forced offline.
    heartbeat(session, driver_id=driver_id, now=t0)
    force_offline(session, driver_id=driver_id, actor=admin, now=t0)
    assert effective_availability(session, driver_id=driver_id, now=t0) is False


def test_heartbeat_expiry_scenario(session, directory, draft_factory, t0):
    """Heartbeat at t=0: available at 120s, not at 130s, not notified at 131s."""

    driver_id = directory.driver_a.id
    heartbeat(session, driver_id=driver_id, now=t0)

    assert effective_availability(session, driver_id=driver_id, now=t0 + timedelta(seconds=120))
    assert not effective_availability(session, driver_id=driver_id, now=t0 + timedelta(seconds=130))

    order = create_order(
        session,
        actor=directory.actor(directory.customer),
        draft=draft_factory(),
        now=t0 + timedelta(seconds=131),
    )
    assert order.id is not None
    assert driver_mailbox.list(driver_id) == []


def test_force_offline_blocks_online_and_heartbeat(session, directory, t0):
    driver_id = directory.driver_a.id
    admin = directory.actor(directory.admin)
    set_status(session, driver_id=driver_id, status="online", now=t0)

    status = force_offline(session, driver_id=driver_id, actor=admin, reason="Late deliveries")
    assert status.presence.force_offline is True
    assert status.presence.online is False
    assert status.presence.offline_reason == "Late deliveries"

    with pytest.raises(ForcedOfflineError) as excinfo:
        set_status(session, driver_id=driver_id, status="online")
    assert "Late deliveries" in str(excinfo.value)
    with pytest.raises(ForcedOfflineError):
        heartbeat(session, driver_id=driver_id)

    # Going offline is always accepted.
    assert set_status(session, driver_id=driver_id, status="offline").presence.force_offline

    allowed = allow_online(session, driver_id=driver_id, actor=admin)
    assert allowed.presence.force_offline is False
    assert allowed.presence.offline_reason is None
    assert allowed.presence.online is False

    assert set_status(session, driver_id=driver_id, status="online").available is True


def test_force_offline_uses_default_reason_and_creates_record(session, directory):
    status = force_offline(
        session, driver_id=directory.driver_b.id, actor=directory.actor(directory.admin)
    )
    assert status.presence.offline_reason == DEFAULT_FORCE_OFFLINE_REASON


def test_overrides_are_admin_only(session, directory):
    driver = directory.actor(directory.driver_a)
    with pytest.raises(PermissionDeniedError):
        force_offline(session, driver_id=directory.driver_b.id, actor=driver)
    with pytest.raises(PermissionDeniedError):
        allow_online(session, driver_id=directory.driver_b.id, actor=driver)
    with pytest.raises(PermissionDeniedError):
        presence_overview(session, actor=driver)


def test_presence_calls_reject_unknown_or_non_driver_ids(session, directory):
    for driver_id in (999, directory.customer.id):
        with pytest.raises(NotFoundError):
            set_status(session, driver_id=driver_id, status="online")
        with pytest.raises(NotFoundError):
            heartbeat(session, driver_id=driver_id)


def test_presence_rejects_bad_status_and_foreign_callers(session, directory):
    with pytest.raises(ValidationError):
        set_status(session, driver_id=directory.driver_a.id, status="busy")
    with pytest.raises(PermissionDeniedError):
        set_status(
            session,
            driver_id=directory.driver_a.id,
            status="online",
            actor=directory.actor(directory.driver_b),
        )
    with pytest.raises(PermissionDeniedError):
        heartbeat(session, driver_id=directory.inactive_driver.id)


def test_list_available_only_returns_fresh_online_drivers(session, directory, t0):
    heartbeat(session, driver_id=directory.driver_a.id, now=t0)
    heartbeat(session, driver_id=directory.driver_b.id, now=t0 - timedelta(minutes=5))
    set_status(session, driver_id=directory.driver_c.id, status="offline", now=t0)

    assert list_available(session, now=t0) == [directory.driver_a.id]


def test_expire_stale_presence_keeps_fresh_drivers(session, directory, t0):
    heartbeat(session, driver_id=directory.driver_a.id, now=t0)
    heartbeat(session, driver_id=directory.driver_b.id, now=t0 - timedelta(minutes=5))

    assert expire_stale_presence(session, now=t0) == 1

    repository = DriverPresenceRepository(session)
    assert repository.get(directory.driver_a.id).online is True
    expired = repository.get(directory.driver_b.id)
    assert expired.online is False
    assert expired.last_heartbeat is None


def test_stale_cleanup_does_not_clobber_newer_heartbeat(session, directory, t0):
    driver_id = directory.driver_a.id
    heartbeat(session, driver_id=driver_id, now=t0 - timedelta(minutes=5))
    repository = DriverPresenceRepository(session)
    observed = repository.get(driver_id).last_heartbeat

    heartbeat(session, driver_id=driver_id, now=t0)

    assert not repository.mark_offline_if_unchanged(driver_id, observed_heartbeat=observed, now=t0)
    assert repository.get(driver_id).online is True


def test_presence_overview_counts(session, directory, t0):
    admin = directory.actor(directory.admin)
    heartbeat(session, driver_id=directory.driver_a.id, now=t0)
    heartbeat(session, driver_id=directory.driver_b.id, now=t0 - timedelta(minutes=10))
    force_offline(session, driver_id=directory.driver_c.id, actor=admin, now=t0)

    overview = presence_overview(session, actor=admin, now=t0)
    assert overview.registered_drivers == 4
    assert overview.online == 2
    assert overview.available == 1
    assert overview.forced_offline == 1


def test_notify_skips_unavailable_drivers(session, directory, place_order, t0):
    heartbeat(session, driver_id=directory.driver_a.id, now=t0)
    order = place_order(now=t0)

    assert notify_new_order(session, order=order, now=t0 + timedelta(seconds=131)) == 0
    assert notify_new_order(session, order=order, now=t0 + timedelta(seconds=60)) == 1


@pytest.fixture()
def new_york_timezone(monkeypatch):
    monkeypatch.setenv("APP_TIMEZONE", "America/New_York")
    reset_settings_cache()
    get_app_timezone.cache_clear()
    yield ZoneInfo("America/New_York")
    reset_settings_cache()
    get_app_timezone.cache_clear()


# 2026-11-01 06:00 UTC is when New York falls back from EDT to EST.
FALL_BACK = datetime(2026, 11, 1, 6, 0, tzinfo=timezone.utc)


def test_heartbeat_age_is_measured_in_real_time(new_york_timezone):
    before = datetime(2026, 11, 1, 1, 59, tzinfo=new_york_timezone)
    after = datetime(2026, 11, 1, 1, 30, tzinfo=new_york_timezone, fold=1)
    presence = DriverPresence(driver_id=1, online=True, last_heartbeat=before)

    assert after - before < timedelta(0)
    assert presence.heartbeat_fresh(after, timedelta(minutes=2)) is False
    assert presence.heartbeat_fresh(after, timedelta(minutes=31)) is True


def test_availability_across_daylight_saving_change(session, directory, new_york_timezone):
    driver_id = directory.driver_a.id

    heartbeat(session, driver_id=driver_id, now=FALL_BACK - timedelta(minutes=1))
    assert effective_availability(
        session, driver_id=driver_id, now=FALL_BACK - timedelta(seconds=30)
    )
    assert not effective_availability(
        session, driver_id=driver_id, now=FALL_BACK + timedelta(minutes=30)
    )
    assert list_available(session, now=FALL_BACK + timedelta(minutes=30)) == []

    # The repeated 01:xx hour after the change must not read as an hour-old heartbeat.
    heartbeat(session, driver_id=driver_id, now=FALL_BACK + timedelta(minutes=10))
    stored = DriverPresenceRepository(session).get(driver_id)
    assert stored.last_heartbeat.astimezone(timezone.utc) == FALL_BACK + timedelta(minutes=10)
    assert effective_availability(
        session, driver_id=driver_id, now=FALL_BACK + timedelta(minutes=11)
    )
    assert expire_stale_presence(session, now=FALL_BACK + timedelta(minutes=11)) == 0


def test_heartbeat_bringing_driver_online_updates_status_change(session, directory, t0):
    driver_id = directory.driver_a.id
    set_status(session, driver_id=driver_id, status="offline", now=t0)

    revived = heartbeat(session, driver_id=driver_id, now=t0 + timedelta(minutes=5))
    assert revived.presence.online is True
    assert revived.presence.last_status_change == t0 + timedelta(minutes=5)

    again = heartbeat(session, driver_id=driver_id, now=t0 + timedelta(minutes=6))
    assert again.presence.last_heartbeat == t0 + timedelta(minutes=6)
    assert again.presence.last_status_change == t0 + timedelta(minutes=5)
