from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.user import User
from src.infrastructure.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Repository for credentials and their token slot.

    Token writes are single conditional UPDATE statements so that two
    concurrent requests cannot both redeem the same token.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    @staticmethod
    def _email_matches(email: str):
        return func.lower(User.email) == email.strip().lower()

    async def get_active_by_email(self, email: str) -> User | None:
        """Get an active, non-deleted user by case-insensitive email"""
        result = await self.db.execute(
            select(User).where(
                self._email_matches(email),
                User.is_active.is_(True),
                User.is_deleted.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a non-deleted user by case-insensitive email"""
        result = await self.db.execute(
            select(User).where(self._email_matches(email), User.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def get_in_company(self, user_id: int, company_id: int) -> User | None:
        """Get an active user and verify it belongs to the company"""
        result = await self.db.execute(
            select(User).where(
                User.id == user_id,
                User.company_id == company_id,
                User.is_deleted.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def set_refresh_token(self, user_id: int, token: str, expires_at: datetime) -> None:
        """Store a new token unconditionally, replacing whatever was there"""
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token, refresh_token_expiry_time=expires_at)
            .execution_options(synchronize_session=False)
        )

    async def rotate_refresh_token(
        self,
        user_id: int,
        current_token: str,
        new_token: str,
        new_expires_at: datetime,
        now: datetime,
    ) -> bool:
        """
        Compare-and-set rotation.

        Returns False when the stored token no longer equals current_token,
        has expired, or the user is inactive/deleted.
        """
        result = await self.db.execute(
            update(User)
            .where(
                User.id == user_id,
                User.refresh_token == current_token,
                User.refresh_token_expiry_time > now,
                User.is_active.is_(True),
                User.is_deleted.is_(False),
            )
            .values(refresh_token=new_token, refresh_token_expiry_time=new_expires_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def clear_refresh_token(self, user_id: int) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None, refresh_token_expiry_time=None)
            .execution_options(synchronize_session=False)
        )

    async def update_password(self, user_id: int, password_hash: str) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash)
            .execution_options(synchronize_session=False)
        )

    async def consume_reset_token(
        self, email: str, token: str, password_hash: str, now: datetime
    ) -> bool:
        """
        Redeem a reset token: set the new password and clear the token in one statement.

        Returns False when no non-deleted user has this email, token and an
        unexpired token; a redeemed token therefore cannot be used twice.
        """
        result = await self.db.execute(
            update(User)
            .where(
                self._email_matches(email),
                User.refresh_token == token,
                User.refresh_token_expiry_time > now,
                User.is_deleted.is_(False),
            )
            .values(
                password_hash=password_hash,
                refresh_token=None,
                refresh_token_expiry_time=None,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
