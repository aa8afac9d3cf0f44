from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.permission import (Permission,
                                                              RolePermission)
from src.infrastructure.persistence.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    """Repository for Permission operations"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Permission)

    async def get_by_name(self, name: str) -> Permission | None:
        result = await self.db.execute(select(Permission).where(Permission.name == name))
        return result.scalar_one_or_none()

    async def get_permission_names(self, role_id: int, company_id: int) -> list[str]:
        """Names of all permissions granted to a role within a company"""
        result = await self.db.execute(
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(
                RolePermission.role_id == role_id,
                RolePermission.company_id == company_id,
            )
            .distinct()
            .order_by(Permission.name)
        )
        return list(result.scalars().all())

    async def assign_permission_to_role(
        self, role_id: int, permission_id: int, company_id: int
    ) -> RolePermission:
        """Grant a permission to a role within a company"""
        role_permission = RolePermission(
            company_id=company_id, role_id=role_id, permission_id=permission_id
        )
        self.db.add(role_permission)
        await self.db.flush()
        await self.db.refresh(role_permission)
        return role_permission

    async def has_role_permission(
        self, role_id: int, permission_id: int, company_id: int
    ) -> bool:
        result = await self.db.execute(
            select(RolePermission.id).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
                RolePermission.company_id == company_id,
            )
        )
        return result.first() is not None
