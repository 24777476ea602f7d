"""Use case returning a single order."""

from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import ORDER_STATUS_PENDING_ASSIGNMENT, Actor, Order
from courier_dispatch.domain.exceptions import NotFoundError, PermissionDeniedError
from courier_dispatch.infrastructure.repositories import OrderRepository


def can_view(order: Order, actor: Actor | None) -> bool:
    """Visibility rule shared by reads: own orders, claimable orders or everything."""

    if actor is None or actor.is_admin():
        return True
    if actor.is_customer():
        return order.customer_id == actor.id
    if actor.is_driver():
        if actor.id in (order.assigned_driver_id, order.cancelled_driver_id):
            return True
        return (
            order.status == ORDER_STATUS_PENDING_ASSIGNMENT
            and order.assigned_driver_id is None
        )
    return False


def get_order(session: Session, *, order_id: int, actor: Actor | None = None) -> Order:
    order = OrderRepository(session).get(order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")
    if not can_view(order, actor):
        raise PermissionDeniedError(f"Order {order_id} is not visible to this user")
    return order
