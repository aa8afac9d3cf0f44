""" Repository module for the persistence layer. """

from src.infrastructure.persistence.repositories.base import BaseRepository
from src.infrastructure.persistence.repositories.company_repo import CompanyRepository
from src.infrastructure.persistence.repositories.document_repo import DocumentRepository
from src.infrastructure.persistence.repositories.permission_repo import PermissionRepository
from src.infrastructure.persistence.repositories.project_repo import ProjectRepository
from src.infrastructure.persistence.repositories.reference_repo import (
    TaskPriorityRepository, TaskStatusRepository)
from src.infrastructure.persistence.repositories.role_repo import RoleRepository
from src.infrastructure.persistence.repositories.task_repo import (
    TaskListRepository, TaskRepository)
from src.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "CompanyRepository",
    "DocumentRepository",
    "PermissionRepository",
    "ProjectRepository",
    "RoleRepository",
    "TaskListRepository",
    "TaskPriorityRepository",
    "TaskRepository",
    "TaskStatusRepository",
    "UserRepository",
]
