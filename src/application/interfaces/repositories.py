"""
Repository interfaces (ports) used by the session and permission services.

Implemented by the SQLAlchemy repositories in
src.infrastructure.persistence.repositories; tests substitute in-memory fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.infrastructure.persistence.models.user import User


class IUserRepository(Protocol):
    """Credential storage and token slot operations"""

    async def get_by_id(self, id: int) -> User | None: ...

    async def get_active_by_email(self, email: str) -> User | None:
        """Active, non-deleted user by case-insensitive email"""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Non-deleted user by case-insensitive email (active or not)"""
        ...

    async def set_refresh_token(self, user_id: int, token: str, expires_at: datetime) -> None: ...

    async def rotate_refresh_token(
        self,
        user_id: int,
        current_token: str,
        new_token: str,
        new_expires_at: datetime,
        now: datetime,
    ) -> bool:
        """Replace the token only if it still equals current_token and is unexpired"""
        ...

    async def clear_refresh_token(self, user_id: int) -> None: ...

    async def update_password(self, user_id: int, password_hash: str) -> None: ...

    async def consume_reset_token(
        self, email: str, token: str, password_hash: str, now: datetime
    ) -> bool:
        """Set the password and clear the token only if email+token match and are unexpired"""
        ...


class IPermissionRepository(Protocol):
    async def get_permission_names(self, role_id: int, company_id: int) -> list[str]: ...


class IRoleRepository(Protocol):
    async def get_name(self, role_id: int) -> str | None: ...
