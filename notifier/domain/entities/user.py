"""Domain entity representing a marketplace user."""

from dataclasses import dataclass

ROLE_CUSTOMER = "CUSTOMER"
ROLE_SELLER = "SELLER"
ROLE_COMPANY = "COMPANY"
ROLE_DELIVERY_AGENT = "DELIVERY_AGENT"
ROLE_ADMIN = "ADMIN"

USER_ROLES = (
    ROLE_CUSTOMER,
    ROLE_SELLER,
    ROLE_COMPANY,
    ROLE_DELIVERY_AGENT,
    ROLE_ADMIN,
)


@dataclass
class User:
    """Attributes of a user that matter for audience resolution and targeting."""

    id: int | None
    email: str
    name: str
    role: str
    is_verified: bool
    phone: str | None = None

    def has_role(self, role: str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.upper() == role.upper()


__all__ = [
    "ROLE_ADMIN",
    "ROLE_COMPANY",
    "ROLE_CUSTOMER",
    "ROLE_DELIVERY_AGENT",
    "ROLE_SELLER",
    "USER_ROLES",
    "User",
]
