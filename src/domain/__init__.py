"""
Domain layer - Enterprise Business Rules.

This is the innermost layer containing business entities, value objects,
and domain exceptions. It has no dependencies on other layers.
"""

from src.domain.entities import Actor
from src.domain.enums import (Action, DocumentOwnerKind, EntityKind,
                              ProjectStatus, RoleId)
from src.domain.exceptions import (AuthenticationException,
                                   AuthorizationException, ConflictException,
                                   InvalidTokenException,
                                   ResourceNotFoundException,
                                   ValidationException, WorkboardException)
from src.domain.value_objects import AccessScope, ScopeTarget

__all__ = [
    # Entities
    "Actor",
    # Value Objects
    "AccessScope",
    "ScopeTarget",
    # Enums
    "Action",
    "DocumentOwnerKind",
    "EntityKind",
    "ProjectStatus",
    "RoleId",
    # Exceptions
    "WorkboardException",
    "ValidationException",
    "AuthenticationException",
    "InvalidTokenException",
    "AuthorizationException",
    "ResourceNotFoundException",
    "ConflictException",
]
