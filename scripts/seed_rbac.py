"""
Seed the platform roles, the permission catalog, per-company grants and the
default task statuses and priorities.

Idempotent: existing rows are left alone.

Usage:
    python -m scripts.seed_rbac
"""
import asyncio
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import RoleId, TaskStatusName
from src.infrastructure.persistence.database import AsyncSessionLocal
from src.infrastructure.persistence.models.company import Company
from src.infrastructure.persistence.models.permission import Permission
from src.infrastructure.persistence.models.reference import (TaskPriority,
                                                             TaskStatus)
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.repositories import (
    PermissionRepository, TaskPriorityRepository, TaskStatusRepository)


class RoleData(TypedDict):
    """Type definition for role configuration"""

    name: str
    description: str
    permissions: list[str]
    is_admin: bool


# Permission catalog: (name, module_id, description)
PERMISSIONS = [
    ("project:read", 1, "View projects"),
    ("project:create", 1, "Create projects"),
    ("project:update", 1, "Update projects"),
    ("project:delete", 1, "Delete projects"),
    ("project:manage_members", 1, "Add and remove project members"),
    ("project:upload_document", 1, "Attach documents to projects"),
    ("tasklist:read", 2, "View task lists"),
    ("tasklist:create", 2, "Create task lists"),
    ("tasklist:delete", 2, "Delete task lists"),
    ("task:read", 3, "View tasks and subtasks"),
    ("task:create", 3, "Create tasks and subtasks"),
    ("task:update", 3, "Update tasks and subtasks"),
    ("task:delete", 3, "Delete tasks and subtasks"),
    ("task:upload_document", 3, "Attach documents to tasks"),
    ("reference:delete", 4, "Delete task statuses and priorities"),
]

_ALL = [name for name, _, _ in PERMISSIONS]

ROLES: dict[RoleId, RoleData] = {
    RoleId.SUPER_ADMIN: {
        "name": "SuperAdmin",
        "description": "Platform-wide access across companies",
        "permissions": _ALL,
        "is_admin": True,
    },
    RoleId.COMPANY_ADMIN: {
        "name": "CompanyAdmin",
        "description": "Full access within their own company",
        "permissions": _ALL,
        "is_admin": True,
    },
    RoleId.EMPLOYEE: {
        "name": "Employee",
        "description": "Projects they are a member of; changes to tasks assigned to them",
        "permissions": [
            "project:read",
            "project:upload_document",
            "tasklist:read",
            "task:read",
            "task:create",
            "task:update",
            "task:delete",
            "task:upload_document",
        ],
        "is_admin": False,
    },
    RoleId.DEPARTMENT_HEAD: {
        "name": "DepartmentHead",
        "description": "Company-wide access to projects and tasks",
        "permissions": [name for name in _ALL if name != "reference:delete"],
        "is_admin": False,
    },
}

# name -> color
TASK_STATUSES = {
    TaskStatusName.TODO.value: "#9e9e9e",
    TaskStatusName.IN_PROGRESS.value: "#2196f3",
    TaskStatusName.DONE.value: "#4caf50",
}
TASK_PRIORITIES = {"Low": "#8bc34a", "Medium": "#ffc107", "High": "#f44336"}


async def seed_roles(db: AsyncSession) -> None:
    for role_id, data in ROLES.items():
        if await db.get(Role, int(role_id)) is not None:
            print(f"  ℹ Role already exists: {data['name']}")
            continue
        db.add(
            Role(
                id=int(role_id),
                name=data["name"],
                description=data["description"],
                is_admin=data["is_admin"],
            )
        )
        print(f"  ✓ Created role: {data['name']} ({int(role_id)})")
    await db.flush()


async def seed_permissions(db: AsyncSession) -> dict[str, int]:
    """Create the permission catalog. Returns mapping of name -> permission_id"""
    repo = PermissionRepository(db)
    permission_map: dict[str, int] = {}

    for name, module_id, description in PERMISSIONS:
        existing = await repo.get_by_name(name)
        if existing is None:
            existing = await repo.create(
                Permission(name=name, module_id=module_id, description=description)
            )
            print(f"  ✓ Created permission: {name}")
        permission_map[name] = existing.id

    return permission_map


async def seed_grants_for_company(
    db: AsyncSession, company_id: int, permission_map: dict[str, int]
) -> int:
    """Grant each role its default permissions inside one company"""
    repo = PermissionRepository(db)
    granted = 0
    for role_id, data in ROLES.items():
        for name in data["permissions"]:
            permission_id = permission_map[name]
            if await repo.has_role_permission(int(role_id), permission_id, company_id):
                continue
            await repo.assign_permission_to_role(int(role_id), permission_id, company_id)
            granted += 1
    return granted


async def seed_reference_data(db: AsyncSession) -> None:
    statuses = TaskStatusRepository(db)
    for name, color in TASK_STATUSES.items():
        if await statuses.get_by_name(name) is None:
            await statuses.create(TaskStatus(name=name, color=color))
            print(f"  ✓ Created task status: {name}")

    priorities = TaskPriorityRepository(db)
    for name, color in TASK_PRIORITIES.items():
        if await priorities.get_by_name(name) is None:
            await priorities.create(TaskPriority(name=name, color=color))
            print(f"  ✓ Created task priority: {name}")


async def seed_all_companies():
    """Seed roles, permissions and reference data, then grants for every active company"""
    async with AsyncSessionLocal() as db:
        print("\n🌱 Seeding roles and permissions...\n")
        await seed_roles(db)
        permission_map = await seed_permissions(db)
        await seed_reference_data(db)
        await db.commit()

        result = await db.execute(select(Company).where(Company.is_active.is_(True)))
        companies = result.scalars().all()
        print(f"\n🌱 Seeding grants for {len(companies)} company(ies)...\n")

        for company in companies:
            granted = await seed_grants_for_company(db, company.id, permission_map)
            await db.commit()
            print(f"  ✅ {company.name}: {granted} new grant(s)")

        print("\n✅ RBAC seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_all_companies())
