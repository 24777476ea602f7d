"""Tests for order creation, visibility and listing."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from courier_dispatch.application.use_cases.orders import (
    create_order,
    driver_order_stats,
    get_order,
    list_orders,
    transition_order,
)
from courier_dispatch.domain.entities import (
    ORDER_STATUS_ASSIGNED,
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_IN_PROGRESS,
    ORDER_STATUS_PENDING_ASSIGNMENT,
    OrderDraft,
)
from courier_dispatch.domain.exceptions import PermissionDeniedError, ValidationError


def test_create_order_persists_pending_order(session, directory, draft_factory, t0):
    order = create_order(
        session,
        actor=directory.actor(directory.customer),
        draft=draft_factory(customer_id=directory.other_customer.id),
        dispatcher=lambda order: None,
        now=t0,
    )

    assert order.id is not None
    assert order.status == ORDER_STATUS_PENDING_ASSIGNMENT
    assert order.assigned_driver_id is None
    # Customers cannot order on behalf of someone else.
    assert order.customer_id == directory.customer.id
    assert order.total == Decimal("21.36")
    assert order.items[0].price == Decimal("8.50")
    assert order.priority == "normal"
    assert order.payment_method == "cash"
    assert order.order_type == "restaurant"
    assert order.estimated_delivery_time == 30
    assert order.created_at == t0


def test_admin_creates_order_for_customer(session, directory, draft_factory):
    order = create_order(
        session,
        actor=directory.actor(directory.admin),
        draft=draft_factory(customer_id=directory.other_customer.id, priority="urgent"),
        dispatcher=lambda order: None,
    )
    assert order.customer_id == directory.other_customer.id
    assert order.priority == "urgent"


def test_drivers_cannot_create_orders(session, directory, draft_factory):
    with pytest.raises(PermissionDeniedError):
        create_order(
            session,
            actor=directory.actor(directory.driver_a),
            draft=draft_factory(),
            dispatcher=lambda order: None,
        )


def test_validation_reports_every_violation(session, directory):
    with pytest.raises(ValidationError) as excinfo:
        create_order(
            session,
            actor=directory.actor(directory.customer),
            draft=OrderDraft(),
            dispatcher=lambda order: None,
        )

    errors = excinfo.value.errors
    for field in ("customer_name", "customer_phone", "address", "items", "subtotal", "total"):
        assert any(message.startswith(field) for message in errors), field
    assert len(errors) == 6


def test_validation_checks_amounts_items_and_ranges(session, directory, draft_factory):
    draft = draft_factory(
        items=[{"name": "", "quantity": 0, "price": "-1"}, "not an item"],
        subtotal="0",
        total="abc",
        delivery_fee="-2",
        tax=True,
        priority="asap",
        estimated_delivery_time=240,
        customer_location="somewhere",
    )
    with pytest.raises(ValidationError) as excinfo:
        create_order(
            session,
            actor=directory.actor(directory.customer),
            draft=draft,
            dispatcher=lambda order: None,
        )

    errors = excinfo.value.errors
    assert "items[0].name is required" in errors
    assert "items[0].quantity must be a positive integer" in errors
    assert "items[0].price must not be negative" in errors
    assert "items[1] must be an object" in errors
    assert "subtotal must be greater than 0" in errors
    assert "total must be a number" in errors
    assert "delivery_fee must not be negative" in errors
    assert "tax must be a number" in errors
    assert any(message.startswith("priority") for message in errors)
    assert any(message.startswith("estimated_delivery_time") for message in errors)
    assert "customer_location must be an object" in errors
    assert list_orders(session) == []


def test_dispatch_failure_does_not_fail_creation(session, directory, draft_factory, caplog):
    def _broken_dispatcher(order):
        raise RuntimeError("fan-out unavailable")

    order = create_order(
        session,
        actor=directory.actor(directory.customer),
        draft=draft_factory(),
        dispatcher=_broken_dispatcher,
    )

    assert get_order(session, order_id=order.id).status == ORDER_STATUS_PENDING_ASSIGNMENT
    assert f"Dispatch of order {order.id} failed" in caplog.text


def test_list_scoping_per_role(session, directory, place_order, draft_factory, t0):
    mine_pending = place_order(now=t0)
    mine_taken_by_b = place_order(now=t0 + timedelta(minutes=1))
    other = create_order(
        session,
        actor=directory.actor(directory.other_customer),
        draft=draft_factory(customer_name="Omar"),
        dispatcher=lambda order: None,
        now=t0 + timedelta(minutes=2),
    )
    transition_order(
        session,
        order_id=mine_taken_by_b.id,
        actor=directory.actor(directory.driver_b),
        requested_status=ORDER_STATUS_ASSIGNED,
    )

    customer_view = list_orders(session, actor=directory.actor(directory.customer))
    assert [order.id for order in customer_view] == [mine_taken_by_b.id, mine_pending.id]

    driver_b_view = list_orders(session, actor=directory.actor(directory.driver_b))
    assert {order.id for order in driver_b_view} == {
        mine_pending.id,
        mine_taken_by_b.id,
        other.id,
    }

    driver_c_view = list_orders(session, actor=directory.actor(directory.driver_c))
    assert {order.id for order in driver_c_view} == {mine_pending.id, other.id}

    admin_view = list_orders(session, actor=directory.actor(directory.admin))
    assert [order.id for order in admin_view] == [other.id, mine_taken_by_b.id, mine_pending.id]


def test_get_applies_visibility_rule(session, directory, place_order):
    order = place_order()
    assert get_order(session, order_id=order.id, actor=directory.actor(directory.driver_c)).id == order.id

    with pytest.raises(PermissionDeniedError):
        get_order(session, order_id=order.id, actor=directory.actor(directory.other_customer))

    transition_order(
        session,
        order_id=order.id,
        actor=directory.actor(directory.driver_b),
        requested_status=ORDER_STATUS_ASSIGNED,
    )
    with pytest.raises(PermissionDeniedError):
        get_order(session, order_id=order.id, actor=directory.actor(directory.driver_c))
    assert get_order(session, order_id=order.id, actor=directory.actor(directory.driver_b))


def test_list_filters_and_paging(session, directory, place_order, t0):
    orders = [
        place_order(now=t0 + timedelta(minutes=index), priority=priority)
        for index, priority in enumerate(["low", "high", "high", "normal"])
    ]
    admin = directory.actor(directory.admin)
    transition_order(
        session,
        order_id=orders[1].id,
        actor=admin,
        requested_status=ORDER_STATUS_ASSIGNED,
        extra={"driver_id": directory.driver_a.id},
    )

    high = list_orders(session, actor=admin, priority="high")
    assert [order.id for order in high] == [orders[2].id, orders[1].id]

    assigned = list_orders(
        session, actor=admin, statuses=[ORDER_STATUS_ASSIGNED, ORDER_STATUS_DELIVERED]
    )
    assert [order.id for order in assigned] == [orders[1].id]

    by_driver = list_orders(session, actor=admin, assigned_driver_id=directory.driver_a.id)
    assert [order.id for order in by_driver] == [orders[1].id]

    page = list_orders(session, actor=admin, skip=1, limit=2)
    assert [order.id for order in page] == [orders[2].id, orders[1].id]

    window = list_orders(
        session,
        actor=admin,
        created_from=t0 + timedelta(minutes=1),
        created_to=t0 + timedelta(minutes=2),
    )
    assert [order.id for order in window] == [orders[2].id, orders[1].id]


def test_list_rejects_invalid_filters(session, directory):
    with pytest.raises(ValidationError) as excinfo:
        list_orders(session, statuses=["lost"], limit=0, skip=-1)
    assert any("limit" in message for message in excinfo.value.errors)
    assert any("skip" in message for message in excinfo.value.errors)

    with pytest.raises(ValidationError):
        list_orders(session, statuses=["lost"])


def test_driver_order_stats(session, directory, place_order, t0):
    driver = directory.actor(directory.driver_a)
    delivered = place_order(now=t0, delivery_fee="4.50", total="22.86")
    in_progress = place_order(now=t0)
    place_order(now=t0)

    for order_id, steps in (
        (delivered.id, [ORDER_STATUS_ASSIGNED, ORDER_STATUS_IN_PROGRESS, ORDER_STATUS_DELIVERED]),
        (in_progress.id, [ORDER_STATUS_ASSIGNED, ORDER_STATUS_IN_PROGRESS]),
    ):
        for status in steps:
            transition_order(session, order_id=order_id, actor=driver, requested_status=status)

    stats = driver_order_stats(
        session, driver_id=directory.driver_a.id, actor=driver, now=t0 + timedelta(hours=1)
    )
    assert stats.total_orders == 2
    assert stats.available_orders == 1
    assert stats.assigned_orders == 0
    assert stats.in_progress_orders == 1
    assert stats.delivered_orders == 1
    assert stats.today_orders == 2
    assert stats.total_earnings == Decimal("4.50")

    with pytest.raises(PermissionDeniedError):
        driver_order_stats(
            session, driver_id=directory.driver_a.id, actor=directory.actor(directory.driver_b)
        )


def test_cancelled_order_stays_in_driver_history(session, directory, place_order, t0):
    driver = directory.actor(directory.driver_b)
    order = place_order(now=t0)
    transition_order(
        session, order_id=order.id, actor=driver, requested_status=ORDER_STATUS_ASSIGNED, now=t0
    )
    transition_order(
        session,
        order_id=order.id,
        actor=driver,
        requested_status=ORDER_STATUS_CANCELLED,
        extra={"reason": "Customer unreachable"},
        now=t0 + timedelta(minutes=5),
    )

    stats = driver_order_stats(
        session, driver_id=directory.driver_b.id, actor=driver, now=t0 + timedelta(hours=1)
    )
    assert stats.total_orders == 1
    assert stats.today_orders == 1
    assert stats.assigned_orders == 0
    assert stats.available_orders == 0

    history = list_orders(session, actor=driver, statuses=[ORDER_STATUS_CANCELLED])
    assert [entry.id for entry in history] == [order.id]
    assert get_order(session, order_id=order.id, actor=driver).assigned_driver_id is None

    other = directory.actor(directory.driver_c)
    assert list_orders(session, actor=other) == []
    with pytest.raises(PermissionDeniedError):
        get_order(session, order_id=order.id, actor=other)
    other_stats = driver_order_stats(session, driver_id=directory.driver_c.id, now=t0)
    assert other_stats.total_orders == 0
