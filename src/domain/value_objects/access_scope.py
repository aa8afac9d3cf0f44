"""Access scope value objects produced by the access matrix."""

from dataclasses import dataclass

from src.domain.enums import EntityKind


@dataclass(frozen=True)
class ScopeTarget:
    """
    A concrete row an actor wants to read or change.

    ``actor_is_member`` is whether the actor holds an active membership in the
    row's owning project; the caller looks it up, the matrix only reads it.
    """

    kind: EntityKind
    company_id: int | None
    project_id: int | None = None
    assigned_to: int | None = None
    actor_is_member: bool = False


@dataclass(frozen=True)
class AccessScope:
    """
    Row predicate for one actor and one kind of entity.

    Each populated field narrows the visible rows; an all-None scope is unrestricted.
    The same object filters list queries (see repositories.scope.apply_scope)
    and checks single rows via ``permits``.
    """

    company_id: int | None = None
    member_user_id: int | None = None
    assignee_user_id: int | None = None

    @property
    def is_unrestricted(self) -> bool:
        return self.company_id is None and self.member_user_id is None and self.assignee_user_id is None

    def violation(self, target: ScopeTarget) -> str | None:
        """Name the first narrowing the target fails, or None when it is inside the scope."""
        if self.company_id is not None and target.company_id != self.company_id:
            return "cross-company"
        if self.member_user_id is not None and not target.actor_is_member:
            return "not a project member"
        if self.assignee_user_id is not None and target.assigned_to != self.assignee_user_id:
            return "not the assignee"
        return None

    def permits(self, target: ScopeTarget) -> bool:
        return self.violation(target) is None
