"""Authenticated caller of a dispatch operation."""

from dataclasses import dataclass

from .user import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_DRIVER


@dataclass(frozen=True)
class Actor:
    """Identity and role established upstream for an inbound call."""

    id: int
    role: str

    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def is_driver(self) -> bool:
        return self.role == ROLE_DRIVER

    def is_customer(self) -> bool:
        return self.role == ROLE_CUSTOMER


__all__ = ["Actor"]
