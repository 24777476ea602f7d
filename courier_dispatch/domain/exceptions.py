"""Typed failures raised by the dispatch core."""

from __future__ import annotations

from collections.abc import Iterable


class DispatchError(Exception):
    """Base class for every expected failure of the dispatch core."""


class ValidationError(DispatchError, ValueError):
    """Raised when input is malformed; carries every violation found."""

    def __init__(self, errors: Iterable[str], message: str = "Invalid input") -> None:
        self.errors = list(errors)
        super().__init__(message)

    def __str__(self) -> str:
        if not self.errors:
            return self.args[0]
        return f"{self.args[0]}: {'; '.join(self.errors)}"


class NotFoundError(DispatchError, LookupError):
    """Raised when an order, notification or driver does not exist."""


class PermissionDeniedError(DispatchError, PermissionError):
    """Raised when the actor may not perform the requested operation."""


class InvalidTransitionError(DispatchError):
    """Raised when an order cannot move from its current status to the requested one."""

    def __init__(self, current_status: str, requested_status: str) -> None:
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Cannot change order status from '{current_status}' to '{requested_status}'"
        )


class AlreadyAssignedError(InvalidTransitionError):
    """Raised when a driver loses the race to claim an order."""

    def __init__(self, order_id: int, current_status: str = "assigned") -> None:
        self.order_id = order_id
        self.current_status = current_status
        self.requested_status = "assigned"
        DispatchError.__init__(
            self,
            f"Order {order_id} was already accepted by another driver, pick a different order",
        )


class ForcedOfflineError(DispatchError):
    """Raised when a presence change is rejected by an administrative override."""

    def __init__(self, driver_id: int, reason: str | None = None) -> None:
        self.driver_id = driver_id
        self.reason = reason
        detail = f"Driver {driver_id} was forced offline by an administrator"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


__all__ = [
    "DispatchError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "InvalidTransitionError",
    "AlreadyAssignedError",
    "ForcedOfflineError",
]
