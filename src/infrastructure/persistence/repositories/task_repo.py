from __future__ import annotations

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.value_objects.access_scope import AccessScope
from src.infrastructure.persistence.models.project import Project
from src.infrastructure.persistence.models.task import Task, TaskList
from src.infrastructure.persistence.repositories.base import BaseRepository
from src.infrastructure.persistence.repositories.scope import apply_scope


def active_project_ids():
    """Ids of projects that are not soft-deleted"""
    return select(Project.id).where(Project.is_deleted.is_(False))


class TaskListRepository(BaseRepository[TaskList]):
    """Repository for TaskList operations"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TaskList)

    async def get_active_by_id(self, id: int) -> TaskList | None:
        """Non-deleted list whose project is not deleted either"""
        result = await self.db.execute(
            select(TaskList).where(
                TaskList.id == id,
                TaskList.is_deleted.is_(False),
                TaskList.project_id.in_(active_project_ids()),
            )
        )
        return result.scalar_one_or_none()

    async def list_for_project(self, project_id: int, scope: AccessScope) -> list[TaskList]:
        stmt = apply_scope(
            select(TaskList).where(
                TaskList.project_id == project_id, TaskList.is_deleted.is_(False)
            ),
            scope,
            TaskList,
        )
        result = await self.db.execute(stmt.order_by(TaskList.list_order, TaskList.id))
        return list(result.scalars().all())

    async def soft_delete(self, task_list_id: int, deleted_by: int | None) -> int:
        result = await self.db.execute(
            update(TaskList)
            .where(TaskList.id == task_list_id, TaskList.is_deleted.is_(False))
            .values(is_deleted=True, updated_by=deleted_by)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class TaskRepository(BaseRepository[Task]):
    """
    Repository for tasks and subtasks (one flat table, parent_task_id links them).

    Cascade helpers collect the affected ids first, then soft delete with bulk
    UPDATEs, so the caller can cascade to documents with the same id set.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Task)

    async def get_active_by_id(self, id: int) -> Task | None:
        """Non-deleted task or subtask whose project is not deleted either"""
        result = await self.db.execute(
            select(Task).where(
                Task.id == id,
                Task.is_deleted.is_(False),
                Task.project_id.in_(active_project_ids()),
            )
        )
        return result.scalar_one_or_none()

    async def list_subtasks(self, parent_task_id: int) -> list[Task]:
        result = await self.db.execute(
            select(Task)
            .where(Task.parent_task_id == parent_task_id, Task.is_deleted.is_(False))
            .order_by(Task.id)
        )
        return list(result.scalars().all())

    async def list_in_scope(self, task_list_id: int, scope: AccessScope) -> list[Task]:
        """Top-level tasks of a list visible under the scope"""
        stmt = apply_scope(
            select(Task).where(
                Task.task_list_id == task_list_id,
                Task.parent_task_id.is_(None),
                Task.is_deleted.is_(False),
            ),
            scope,
            Task,
        )
        result = await self.db.execute(stmt.order_by(Task.id))
        return list(result.scalars().all())

    async def list_top_level(
        self,
        scope: AccessScope,
        status_id: int | None = None,
        priority_id: int | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Task]:
        """Top-level tasks of active projects under the scope, latest due date first"""
        stmt = select(Task).where(
            Task.parent_task_id.is_(None),
            Task.is_deleted.is_(False),
            Task.project_id.in_(active_project_ids()),
        )
        if status_id is not None:
            stmt = stmt.where(Task.status_id == status_id)
        if priority_id is not None:
            stmt = stmt.where(Task.priority_id == priority_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))
        stmt = apply_scope(stmt, scope, Task)
        result = await self.db.execute(
            stmt.order_by(Task.due_date.desc(), Task.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def ids_in_task_tree(self, task_id: int) -> list[int]:
        """The task itself plus its direct, non-deleted subtasks"""
        result = await self.db.execute(
            select(Task.id).where(
                or_(Task.id == task_id, Task.parent_task_id == task_id),
                Task.is_deleted.is_(False),
            )
        )
        return list(result.scalars().all())

    async def ids_in_task_list(self, task_list_id: int) -> list[int]:
        """Every non-deleted task of a list, including subtasks reached through their parent"""
        top_level = select(Task.id).where(Task.task_list_id == task_list_id)
        result = await self.db.execute(
            select(Task.id).where(
                or_(
                    Task.task_list_id == task_list_id,
                    Task.parent_task_id.in_(top_level),
                ),
                Task.is_deleted.is_(False),
            )
        )
        return list(result.scalars().all())

    async def soft_delete_many(self, task_ids: list[int], deleted_by: int | None) -> int:
        if not task_ids:
            return 0
        result = await self.db.execute(
            update(Task)
            .where(Task.id.in_(task_ids), Task.is_deleted.is_(False))
            .values(is_deleted=True, updated_by=deleted_by)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def count_with_status(self, status_id: int) -> int:
        return await self._count_where(Task.status_id == status_id)

    async def count_with_priority(self, priority_id: int) -> int:
        return await self._count_where(Task.priority_id == priority_id)

    async def _count_where(self, condition) -> int:
        # Soft-deleted tasks still hold the foreign key, so they count too
        result = await self.db.execute(select(func.count(Task.id)).where(condition))
        return int(result.scalar_one())
