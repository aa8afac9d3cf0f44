from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.reference import (TaskPriority,
                                                             TaskStatus)
from src.infrastructure.persistence.repositories.base import BaseRepository


class TaskStatusRepository(BaseRepository[TaskStatus]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, TaskStatus)

    async def get_by_name(self, name: str) -> TaskStatus | None:
        result = await self.db.execute(select(TaskStatus).where(TaskStatus.name == name))
        return result.scalar_one_or_none()


class TaskPriorityRepository(BaseRepository[TaskPriority]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, TaskPriority)

    async def get_by_name(self, name: str) -> TaskPriority | None:
        result = await self.db.execute(select(TaskPriority).where(TaskPriority.name == name))
        return result.scalar_one_or_none()
