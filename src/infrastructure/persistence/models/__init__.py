from src.infrastructure.persistence.models.company import Company
from src.infrastructure.persistence.models.document import Document
# Mixins for model composition
from src.infrastructure.persistence.models.mixins import (
    AuditedCompanyModel, CompanyMixin, IntIdMixin, SoftDeleteMixin,
    TimestampMixin, UserAuditMixin)
from src.infrastructure.persistence.models.permission import (Permission,
                                                              RolePermission)
from src.infrastructure.persistence.models.project import (Project,
                                                           ProjectMember)
from src.infrastructure.persistence.models.reference import (TaskPriority,
                                                             TaskStatus)
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.models.task import Task, TaskList
from src.infrastructure.persistence.models.user import User

__all__ = [
    # Models
    "Company",
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "Project",
    "ProjectMember",
    "TaskList",
    "Task",
    "Document",
    "TaskStatus",
    "TaskPriority",
    # Mixins
    "IntIdMixin",
    "CompanyMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "UserAuditMixin",
    "AuditedCompanyModel",
]
