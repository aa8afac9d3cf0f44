"""
Actor domain entity.

The authenticated caller as described by the claims of their access token,
independent of how the claims are transported.
"""

from dataclasses import dataclass

from src.domain.enums import RoleId


@dataclass(frozen=True)
class Actor:
    """
    Domain entity for the caller of an operation.

    role_id is kept as a plain int: tokens can carry role ids outside the
    recognized set, and the access matrix is the one place that rejects them.
    """

    user_id: int
    role_id: int | None
    company_id: int | None
    email: str | None = None
    role_name: str | None = None

    @property
    def role(self) -> RoleId | None:
        """Recognized role, or None for an unknown role id"""
        if self.role_id in RoleId.values():
            return RoleId(self.role_id)
        return None

    @property
    def is_super_admin(self) -> bool:
        return self.role is RoleId.SUPER_ADMIN

    def belongs_to_company(self, company_id: int | None) -> bool:
        """Check if actor belongs to the specified company."""
        return company_id is not None and self.company_id == company_id
