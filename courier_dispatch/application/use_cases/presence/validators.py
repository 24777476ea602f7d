"""Identity checks for presence operations."""

from __future__ import annotations

from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import User
from courier_dispatch.domain.exceptions import NotFoundError
from courier_dispatch.infrastructure.repositories import UserRepository


def require_driver(session: Session, driver_id: int) -> User:
    """Return the directory entry of ``driver_id`` or fail when it is not a driver."""

    user = UserRepository(session).get(driver_id)
    if user is None or not user.is_driver():
        raise NotFoundError(f"Driver {driver_id} not found")
    return user


__all__ = ["require_driver"]
