"""Translate an AccessScope into SQL filters."""

from typing import Any

from sqlalchemy import Select, select

from src.domain.value_objects.access_scope import AccessScope
from src.infrastructure.persistence.models.project import Project, ProjectMember


def member_project_ids(user_id: int):
    """Subquery of project ids where the user holds an active membership"""
    return select(ProjectMember.project_id).where(
        ProjectMember.user_id == user_id,
        ProjectMember.is_deleted.is_(False),
    )


def apply_scope(stmt: Select, scope: AccessScope, model: Any) -> Select:
    """
    Narrow a select over ``model`` to the rows the scope allows.

    ``model`` must have company_id; membership narrowing uses project_id
    (or id for Project itself), assignee narrowing uses assigned_to.
    """
    if scope.company_id is not None:
        stmt = stmt.where(model.company_id == scope.company_id)
    if scope.member_user_id is not None:
        project_column = model.id if model is Project else model.project_id
        stmt = stmt.where(project_column.in_(member_project_ids(scope.member_user_id)))
    if scope.assignee_user_id is not None:
        stmt = stmt.where(model.assigned_to == scope.assignee_user_id)
    return stmt
