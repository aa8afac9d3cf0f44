"""Tests for ReferenceDataService"""

import pytest

from src.application.use_cases.reference_data.reference_data import \
    ReferenceDataService
from src.domain.exceptions import (AuthorizationException, ConflictException,
                                   ResourceNotFoundException)
from src.infrastructure.persistence.models import (Project, Task,
                                                   TaskPriority, TaskStatus)
from src.infrastructure.persistence.repositories import (
    TaskPriorityRepository, TaskRepository, TaskStatusRepository)


@pytest.fixture
def reference_data(test_db):
    return ReferenceDataService(
        status_repo=TaskStatusRepository(test_db),
        priority_repo=TaskPriorityRepository(test_db),
        task_repo=TaskRepository(test_db),
    )


@pytest.fixture
async def catalog(test_db, seed):
    """Statuses and priorities, one of each used by a task"""
    used_status = TaskStatus(name="InProgress")
    free_status = TaskStatus(name="Archived")
    used_priority = TaskPriority(name="High")
    free_priority = TaskPriority(name="Someday")
    test_db.add_all([used_status, free_status, used_priority, free_priority])
    await test_db.flush()

    project = Project(company_id=7, name="Apollo", status="Planned")
    test_db.add(project)
    await test_db.flush()
    test_db.add(
        Task(
            company_id=7,
            project_id=project.id,
            title="T",
            status_id=used_status.id,
            priority_id=used_priority.id,
            is_deleted=True,
        )
    )
    await test_db.flush()
    return {
        "used_status": used_status.id,
        "free_status": free_status.id,
        "used_priority": used_priority.id,
        "free_priority": free_priority.id,
    }


@pytest.mark.asyncio
async def test_unused_status_is_hard_deleted(reference_data, seed, catalog):
    await reference_data.delete_status(seed.admin_7.actor, catalog["free_status"])

    assert await reference_data.status_repo.get_by_id(catalog["free_status"]) is None


@pytest.mark.asyncio
async def test_status_still_referenced_is_a_conflict(reference_data, seed, catalog):
    """Soft-deleted tasks still hold the reference"""
    with pytest.raises(ConflictException):
        await reference_data.delete_status(seed.super_admin.actor, catalog["used_status"])

    assert await reference_data.status_repo.get_by_id(catalog["used_status"]) is not None


@pytest.mark.asyncio
async def test_priority_rules(reference_data, seed, catalog):
    with pytest.raises(ConflictException):
        await reference_data.delete_priority(seed.admin_7.actor, catalog["used_priority"])

    await reference_data.delete_priority(seed.admin_7.actor, catalog["free_priority"])

    assert await reference_data.priority_repo.get_by_id(catalog["free_priority"]) is None


@pytest.mark.asyncio
async def test_missing_rows_are_not_found(reference_data, seed, catalog):
    with pytest.raises(ResourceNotFoundException):
        await reference_data.delete_status(seed.admin_7.actor, 999)
    with pytest.raises(ResourceNotFoundException):
        await reference_data.delete_priority(seed.admin_7.actor, 999)


@pytest.mark.asyncio
@pytest.mark.parametrize("who", ["employee_7", "head_7"])
async def test_only_admins_delete_reference_data(reference_data, seed, catalog, who):
    actor = getattr(seed, who).actor

    with pytest.raises(AuthorizationException):
        await reference_data.delete_status(actor, catalog["free_status"])
    with pytest.raises(AuthorizationException):
        await reference_data.delete_priority(actor, catalog["free_priority"])
