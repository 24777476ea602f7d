"""Domain entity describing a user known to the identity service."""

from dataclasses import dataclass

ROLE_CUSTOMER = "customer"
ROLE_DRIVER = "driver"
ROLE_ADMIN = "admin"

ROLES = (ROLE_CUSTOMER, ROLE_DRIVER, ROLE_ADMIN)


@dataclass
class User:
    """Identity attributes the dispatch core reads but never owns."""

    id: int | None
    name: str
    phone: str | None
    role: str
    is_active: bool = True

    def has_role(self, role: str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.lower() == role.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ROLE_ADMIN)

    def is_driver(self) -> bool:
        return self.has_role(ROLE_DRIVER)


__all__ = ["User", "ROLE_CUSTOMER", "ROLE_DRIVER", "ROLE_ADMIN", "ROLES"]
