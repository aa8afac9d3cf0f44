"""
Application layer interfaces (ports).

These protocols define the contracts between the application layer
and the infrastructure layer, following the Dependency Inversion Principle.
"""

from src.application.interfaces.repositories import (IPermissionRepository,
                                                     IRoleRepository,
                                                     IUserRepository)
from src.application.interfaces.services import ICacheService, INotifier
from src.application.interfaces.storage import IStorageService

__all__ = [
    # Repository interfaces
    "IUserRepository",
    "IPermissionRepository",
    "IRoleRepository",
    # Service interfaces
    "ICacheService",
    "INotifier",
    # Storage interface
    "IStorageService",
]
