"""
Application layer - Application Business Rules.

This layer contains application-specific business rules, including:
- Interfaces (ports) for infrastructure dependencies
- Use cases that orchestrate the work hierarchy
- Application services (sessions, permissions, access scopes)
"""

from src.application.interfaces import (ICacheService, INotifier,
                                        IPermissionRepository,
                                        IRoleRepository, IStorageService,
                                        IUserRepository)
from src.application.services import (AccessScopeResolver, PermissionResolver,
                                      SessionManager)
from src.application.use_cases import (HierarchyLifecycle,
                                       ProjectMembershipService,
                                       ReferenceDataService)

__all__ = [
    # Interfaces
    "ICacheService",
    "INotifier",
    "IPermissionRepository",
    "IRoleRepository",
    "IStorageService",
    "IUserRepository",
    # Services
    "AccessScopeResolver",
    "PermissionResolver",
    "SessionManager",
    # Use Cases
    "HierarchyLifecycle",
    "ProjectMembershipService",
    "ReferenceDataService",
]
