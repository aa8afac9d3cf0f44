"""
Project membership use case.

Memberships decide what an Employee can see, so only SuperAdmins and the
company-wide roles of the project's company manage them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.domain.enums import Action, EntityKind, RoleId
from src.domain.exceptions import (AuthorizationException, ConflictException,
                                   ResourceNotFoundException)
from src.domain.value_objects.access_scope import ScopeTarget
from src.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from src.application.services.access_scope_resolver import \
        AccessScopeResolver
    from src.domain.entities.actor import Actor
    from src.infrastructure.persistence.models.project import ProjectMember
    from src.infrastructure.persistence.repositories import (ProjectRepository,
                                                             UserRepository)

logger = get_logger(__name__)


class ProjectMembershipService:
    def __init__(
        self,
        scope_resolver: AccessScopeResolver,
        project_repo: ProjectRepository,
        user_repo: UserRepository,
    ) -> None:
        self.scope_resolver = scope_resolver
        self.project_repo = project_repo
        self.user_repo = user_repo

    async def _authorize(self, actor: Actor, project_id: int, action: Action) -> int:
        project = await self.project_repo.get_active_by_id(project_id)
        if project is None:
            raise ResourceNotFoundException("Project", project_id)
        is_member = False
        if actor.role is RoleId.EMPLOYEE:
            is_member = await self.project_repo.is_member(project.id, actor.user_id)
        self.scope_resolver.authorize(
            actor,
            ScopeTarget(
                kind=EntityKind.PROJECT_MEMBER,
                company_id=project.company_id,
                project_id=project.id,
                actor_is_member=is_member,
            ),
            action,
        )
        return project.company_id

    async def list_members(self, actor: Actor, project_id: int) -> list[ProjectMember]:
        """Active members of the project (Employees: only projects they belong to)"""
        await self._authorize(actor, project_id, Action.READ)
        return await self.project_repo.list_members(project_id)

    async def add_member(self, actor: Actor, project_id: int, user_id: int) -> ProjectMember:
        """
        Raises:
            ResourceNotFoundException: project or user missing
            AuthorizationException: caller may not manage members, or the user
                belongs to another company (SuperAdmins excepted)
            ConflictException: the user already holds an active membership
        """
        company_id = await self._authorize(actor, project_id, Action.CREATE)

        user = await self.user_repo.get_by_id(user_id)
        if user is None or user.is_deleted:
            raise ResourceNotFoundException("User", user_id)
        if not actor.is_super_admin and user.company_id != company_id:
            raise AuthorizationException(
                EntityKind.PROJECT_MEMBER.value,
                Action.CREATE.value,
                "Cannot add a user from another company.",
            )

        if await self.project_repo.is_member(project_id, user_id):
            raise ConflictException(
                "User is already a member of the project.", resource_type="ProjectMember"
            )

        member = await self.project_repo.add_member(project_id, user_id, added_by=actor.user_id)
        logger.info("User %s added to project %s by user %s", user_id, project_id, actor.user_id)
        return member

    async def remove_member(self, actor: Actor, project_id: int, user_id: int) -> None:
        await self._authorize(actor, project_id, Action.DELETE)
        removed = await self.project_repo.soft_delete_member(project_id, user_id)
        if removed == 0:
            raise ResourceNotFoundException("ProjectMember", user_id)
        logger.info("User %s removed from project %s by user %s", user_id, project_id, actor.user_id)
