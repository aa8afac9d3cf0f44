from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.value_objects.access_scope import AccessScope
from src.infrastructure.persistence.models.project import Project, ProjectMember
from src.infrastructure.persistence.repositories.base import BaseRepository
from src.infrastructure.persistence.repositories.scope import apply_scope


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project and ProjectMember operations"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Project)

    async def list_in_scope(
        self, scope: AccessScope, skip: int = 0, limit: int = 100
    ) -> list[Project]:
        """Active projects visible under the scope, newest first"""
        stmt = apply_scope(
            select(Project).where(Project.is_deleted.is_(False)), scope, Project
        )
        result = await self.db.execute(
            stmt.order_by(Project.created_at.desc(), Project.id.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def is_member(self, project_id: int, user_id: int) -> bool:
        """Check for an active membership of the user in the project"""
        return await self.get_membership(project_id, user_id) is not None

    async def get_membership(self, project_id: int, user_id: int) -> ProjectMember | None:
        result = await self.db.execute(
            select(ProjectMember).where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id == user_id,
                ProjectMember.is_deleted.is_(False),
            )
        )
        return result.scalars().first()

    async def list_members(self, project_id: int) -> list[ProjectMember]:
        """Active memberships of the project, oldest first"""
        result = await self.db.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id, ProjectMember.is_deleted.is_(False))
            .order_by(ProjectMember.joined_at, ProjectMember.id)
        )
        return list(result.scalars().all())

    async def add_member(
        self, project_id: int, user_id: int, added_by: int | None
    ) -> ProjectMember:
        member = ProjectMember(project_id=project_id, user_id=user_id, added_by=added_by)
        self.db.add(member)
        await self.db.flush()
        await self.db.refresh(member)
        return member

    async def soft_delete_member(self, project_id: int, user_id: int) -> int:
        """Soft delete the user's active membership rows; returns rows affected"""
        result = await self.db.execute(
            update(ProjectMember)
            .where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id == user_id,
                ProjectMember.is_deleted.is_(False),
            )
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def soft_delete(self, project_id: int, deleted_by: int | None) -> int:
        result = await self.db.execute(
            update(Project)
            .where(Project.id == project_id, Project.is_deleted.is_(False))
            .values(is_deleted=True, updated_by=deleted_by)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
