"""Shared fixtures for the dispatch core test-suite."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "courier_dispatch_tests.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["ENABLE_RETENTION_SWEEPER"] = "false"

from courier_dispatch.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from courier_dispatch.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_DRIVER,
    Actor,
    Order,
    OrderDraft,
    User,
)
from courier_dispatch.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from courier_dispatch.infrastructure.mailbox import driver_mailbox  # noqa: E402
from courier_dispatch.infrastructure.repositories import UserRepository  # noqa: E402

T0 = datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)


@dataclass
class Directory:
    customer: User
    other_customer: User
    admin: User
    driver_a: User
    driver_b: User
    driver_c: User
    inactive_driver: User

    @staticmethod
    def actor(user: User) -> Actor:
        return Actor(id=user.id, role=user.role)


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from empty tables and empty mailboxes."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    driver_mailbox.clear()
    yield
    driver_mailbox.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def directory(session) -> Directory:
    """Seed the user directory with customers, an admin and drivers."""

    repository = UserRepository(session)

    def _create(name: str, role: str, phone: str | None = None, active: bool = True) -> User:
        return repository.create(
            User(id=None, name=name, phone=phone, role=role, is_active=active)
        )

    return Directory(
        customer=_create("Carla Customer", ROLE_CUSTOMER, "555-0100"),
        other_customer=_create("Omar Customer", ROLE_CUSTOMER, "555-0101"),
        admin=_create("Ada Admin", ROLE_ADMIN),
        driver_a=_create("Alice Driver", ROLE_DRIVER, "555-0200"),
        driver_b=_create("Bob Driver", ROLE_DRIVER, "555-0201"),
        driver_c=_create("Chen Driver", ROLE_DRIVER, "555-0202"),
        inactive_driver=_create("Ivan Driver", ROLE_DRIVER, "555-0203", active=False),
    )


def make_draft(**overrides) -> OrderDraft:
    values = {
        "customer_name": "Carla Customer",
        "customer_phone": "555-0100",
        "address": "221B Baker Street",
        "items": [{"name": "Pizza", "quantity": 2, "price": "8.50"}],
        "subtotal": "17.00",
        "delivery_fee": "3.00",
        "tax": "1.36",
        "total": "21.36",
        "customer_location": {"lat": 51.52, "lng": -0.158},
    }
    values.update(overrides)
    return OrderDraft(**values)


@pytest.fixture()
def place_order(session, directory):
    """Create orders as the seeded customer without announcing them."""

    from courier_dispatch.application.use_cases.orders import create_order

    def _place(now: datetime = T0, **overrides) -> Order:
        return create_order(
            session,
            actor=Directory.actor(directory.customer),
            draft=make_draft(**overrides),
            dispatcher=lambda order: None,
            now=now,
        )

    return _place


@pytest.fixture()
def t0() -> datetime:
    return T0


@pytest.fixture()
def draft_factory():
    return make_draft
