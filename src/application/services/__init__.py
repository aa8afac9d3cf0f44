"""Application services."""

from src.application.services.access_scope_resolver import AccessScopeResolver
from src.application.services.permission_resolver import PermissionResolver
from src.application.services.session_manager import (LoginResult,
                                                      SessionManager,
                                                      SessionUser, TokenPair)

__all__ = [
    "AccessScopeResolver",
    "LoginResult",
    "PermissionResolver",
    "SessionManager",
    "SessionUser",
    "TokenPair",
]
