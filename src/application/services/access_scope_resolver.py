"""
Access matrix for the four platform roles.

Turns an actor plus a kind of entity and an action into an AccessScope (a row
predicate) or denies outright. Pure: no I/O, membership facts arrive on the
ScopeTarget supplied by the caller.

    SuperAdmin (1)         everything; optional company filter narrows
    CompanyAdmin (2)       own company only
    DepartmentHead (4)     own company only
    Employee (3)           projects they are a member of; task changes only
                           on tasks assigned to them
"""

from __future__ import annotations

import logging

from src.domain.entities.actor import Actor
from src.domain.enums import Action, EntityKind, RoleId
from src.domain.exceptions import AuthorizationException
from src.domain.value_objects.access_scope import AccessScope, ScopeTarget

logger = logging.getLogger(__name__)

UNKNOWN_ROLE = "Access denied due to unknown role."
CROSS_COMPANY = "Access denied: resource belongs to another company."

# Kinds an Employee may never create, change or delete
_EMPLOYEE_READ_ONLY = frozenset(
    {EntityKind.PROJECT, EntityKind.TASK_LIST, EntityKind.PROJECT_MEMBER}
)
_TASK_KINDS = frozenset({EntityKind.TASK, EntityKind.SUBTASK})


class AccessScopeResolver:
    """Single home of the role/company/membership rules"""

    def _deny(self, actor: Actor, kind: EntityKind, action: Action, reason: str):
        logger.warning(
            "Access denied: user=%s role=%s company=%s %s %s (%s)",
            actor.user_id,
            actor.role_id,
            actor.company_id,
            action.value,
            kind.value,
            reason,
        )
        return AuthorizationException(kind.value, action.value, reason)

    def scope(
        self,
        actor: Actor,
        kind: EntityKind,
        action: Action = Action.READ,
        company_filter: int | None = None,
    ) -> AccessScope:
        """
        Row predicate for ``actor`` performing ``action`` on rows of ``kind``.

        Raises:
            AuthorizationException: unknown role, a company filter outside the
                actor's company, or an action the role can never perform
        """
        role = actor.role

        if role is None:
            raise self._deny(actor, kind, action, UNKNOWN_ROLE)

        if role is RoleId.SUPER_ADMIN:
            return AccessScope(company_id=company_filter)

        if company_filter is not None and company_filter != actor.company_id:
            raise self._deny(actor, kind, action, CROSS_COMPANY)

        if actor.company_id is None:
            # Company-bound roles without a company see nothing
            raise self._deny(actor, kind, action, CROSS_COMPANY)

        if role in RoleId.company_wide():
            return AccessScope(company_id=actor.company_id)

        # Employee
        if action is Action.READ:
            # An explicit company filter still applies on top of membership
            return AccessScope(company_id=company_filter, member_user_id=actor.user_id)

        if kind in _EMPLOYEE_READ_ONLY and action is not Action.UPLOAD_DOCUMENT:
            raise self._deny(
                actor, kind, action, f"Employees cannot {action.value} a {kind.value}."
            )

        if kind is EntityKind.PROJECT:
            # Project document upload: member of a project in their own company
            return AccessScope(company_id=actor.company_id, member_user_id=actor.user_id)

        if kind in _TASK_KINDS and action is Action.CREATE:
            return AccessScope(company_id=actor.company_id, member_user_id=actor.user_id)

        if kind in _TASK_KINDS:
            # Update, delete and document upload: only on tasks assigned to them
            return AccessScope(company_id=actor.company_id, assignee_user_id=actor.user_id)

        raise self._deny(actor, kind, action, f"Employees cannot {action.value} a {kind.value}.")

    def authorize(
        self, actor: Actor, target: ScopeTarget, action: Action = Action.READ
    ) -> AccessScope:
        """
        Check one concrete row. Returns the scope that admitted it.

        Raises:
            AuthorizationException: when the row lies outside the actor's scope
        """
        scope = self.scope(actor, target.kind, action)
        reason = scope.violation(target)
        if reason is not None:
            message = CROSS_COMPANY if reason == "cross-company" else f"Access denied: {reason}."
            raise self._deny(actor, target.kind, action, message)
        return scope

    def authorize_project_creation(self, actor: Actor, company_id: int) -> None:
        """
        Only SuperAdmin, CompanyAdmin and DepartmentHead create projects, the
        latter two only for their own company.
        """
        self.authorize(
            actor,
            ScopeTarget(kind=EntityKind.PROJECT, company_id=company_id),
            Action.CREATE,
        )
