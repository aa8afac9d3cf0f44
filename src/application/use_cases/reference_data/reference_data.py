"""
Reference data use case.

Task statuses and priorities are the only rows that are ever hard-deleted,
and only while no task (deleted or not) still points at them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.domain.enums import RoleId
from src.domain.exceptions import (AuthorizationException, ConflictException,
                                   ResourceNotFoundException)
from src.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from src.domain.entities.actor import Actor
    from src.infrastructure.persistence.repositories import (
        TaskPriorityRepository, TaskRepository, TaskStatusRepository)

logger = get_logger(__name__)

# Roles allowed to edit the platform-wide reference tables
_EDITORS = frozenset({RoleId.SUPER_ADMIN, RoleId.COMPANY_ADMIN})


class ReferenceDataService:
    def __init__(
        self,
        status_repo: TaskStatusRepository,
        priority_repo: TaskPriorityRepository,
        task_repo: TaskRepository,
    ) -> None:
        self.status_repo = status_repo
        self.priority_repo = priority_repo
        self.task_repo = task_repo

    @staticmethod
    def _require_editor(actor: Actor, resource: str) -> None:
        if actor.role not in _EDITORS:
            raise AuthorizationException(resource, "delete")

    async def delete_status(self, actor: Actor, status_id: int) -> None:
        """
        Raises:
            ResourceNotFoundException: no such status
            ConflictException: tasks still reference it
        """
        self._require_editor(actor, "task_status")
        status = await self.status_repo.get_by_id(status_id)
        if status is None:
            raise ResourceNotFoundException("TaskStatus", status_id)

        in_use = await self.task_repo.count_with_status(status_id)
        if in_use:
            raise ConflictException(
                f"Cannot delete status '{status.name}': it is used by {in_use} task(s).",
                resource_type="TaskStatus",
            )
        await self.status_repo.delete(status)
        logger.info("Task status %s deleted by user %s", status_id, actor.user_id)

    async def delete_priority(self, actor: Actor, priority_id: int) -> None:
        """
        Raises:
            ResourceNotFoundException: no such priority
            ConflictException: tasks still reference it
        """
        self._require_editor(actor, "task_priority")
        priority = await self.priority_repo.get_by_id(priority_id)
        if priority is None:
            raise ResourceNotFoundException("TaskPriority", priority_id)

        in_use = await self.task_repo.count_with_priority(priority_id)
        if in_use:
            raise ConflictException(
                f"Cannot delete priority '{priority.name}': it is used by {in_use} task(s).",
                resource_type="TaskPriority",
            )
        await self.priority_repo.delete(priority)
        logger.info("Task priority %s deleted by user %s", priority_id, actor.user_id)
