from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Repository for Role lookups"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Role)

    async def get_name(self, role_id: int) -> str | None:
        """Display name of a role, used as the role claim"""
        result = await self.db.execute(select(Role.name).where(Role.id == role_id))
        return result.scalar_one_or_none()
