"""Domain value objects."""

from src.domain.value_objects.access_scope import AccessScope, ScopeTarget
from src.domain.value_objects.password_policy import (
    is_strong_password, password_policy_violations)

__all__ = [
    "AccessScope",
    "ScopeTarget",
    "is_strong_password",
    "password_policy_violations",
]
