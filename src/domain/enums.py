"""Domain enumerations for the Workboard application."""

from enum import Enum, IntEnum


class RoleId(IntEnum):
    """
    The four roles the access matrix recognizes.

    Role rows may exist with other ids, but the access matrix denies them.
    """

    SUPER_ADMIN = 1
    COMPANY_ADMIN = 2
    EMPLOYEE = 3
    DEPARTMENT_HEAD = 4

    @classmethod
    def values(cls) -> list[int]:
        """Get all valid values"""
        return [role.value for role in cls]

    @classmethod
    def company_wide(cls) -> frozenset["RoleId"]:
        """Roles whose visibility is the whole of their own company"""
        return frozenset({cls.COMPANY_ADMIN, cls.DEPARTMENT_HEAD})


class EntityKind(str, Enum):
    """Kinds of rows the access matrix is evaluated against"""

    PROJECT = "project"
    TASK_LIST = "task_list"
    TASK = "task"
    SUBTASK = "subtask"
    PROJECT_MEMBER = "project_member"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [kind.value for kind in cls]


class Action(str, Enum):
    """Operations checked by the access matrix"""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    UPLOAD_DOCUMENT = "upload_document"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [action.value for action in cls]

    @property
    def is_mutation(self) -> bool:
        return self is not Action.READ


class DocumentOwnerKind(str, Enum):
    """Entity a document is attached to"""

    PROJECT = "project"
    TASK = "task"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [kind.value for kind in cls]


class ProjectStatus(str, Enum):
    """Project status enumeration"""

    PLANNED = "Planned"
    IN_PROGRESS = "InProgress"
    ON_HOLD = "OnHold"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class TaskStatusName(str, Enum):
    """Default task statuses seeded for every company"""

    TODO = "ToDo"
    IN_PROGRESS = "InProgress"
    DONE = "Done"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]
