"""Role checks shared by the use cases."""

from __future__ import annotations

from courier_dispatch.domain.entities import Actor
from courier_dispatch.domain.exceptions import PermissionDeniedError


def ensure_admin(actor: Actor) -> None:
    if not actor.is_admin():
        raise PermissionDeniedError("Administrator privileges are required")


def ensure_self_or_admin(actor: Actor | None, driver_id: int) -> None:
    """Allow ``actor`` to act on ``driver_id`` only as that driver or an admin.

    ``None`` stands for an internal caller and is always allowed.
    """

    if actor is None or actor.is_admin():
        return
    if actor.is_driver() and actor.id == driver_id:
        return
    raise PermissionDeniedError("Drivers may only manage their own presence and mailbox")


__all__ = ["ensure_admin", "ensure_self_or_admin"]
