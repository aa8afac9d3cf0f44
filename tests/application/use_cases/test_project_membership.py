"""Tests for ProjectMembershipService"""

import pytest

from src.application.services.access_scope_resolver import AccessScopeResolver
from src.application.use_cases.hierarchy.project_membership import \
    ProjectMembershipService
from src.domain.exceptions import (AuthorizationException, ConflictException,
                                   ResourceNotFoundException)
from src.infrastructure.persistence.models import Project
from src.infrastructure.persistence.repositories import (ProjectRepository,
                                                         UserRepository)


@pytest.fixture
def memberships(test_db):
    return ProjectMembershipService(
        scope_resolver=AccessScopeResolver(),
        project_repo=ProjectRepository(test_db),
        user_repo=UserRepository(test_db),
    )


@pytest.fixture
async def project(test_db, seed):
    project = Project(company_id=7, name="Apollo", status="Planned")
    test_db.add(project)
    await test_db.flush()
    return project


@pytest.mark.asyncio
async def test_admin_adds_and_removes_member(memberships, seed, project):
    member = await memberships.add_member(seed.admin_7.actor, project.id, seed.employee_7.id)

    assert member.project_id == project.id
    assert member.user_id == seed.employee_7.id
    assert member.added_by == seed.admin_7.id
    assert await memberships.project_repo.is_member(project.id, seed.employee_7.id)

    await memberships.remove_member(seed.admin_7.actor, project.id, seed.employee_7.id)

    assert not await memberships.project_repo.is_member(project.id, seed.employee_7.id)


@pytest.mark.asyncio
async def test_duplicate_membership_is_a_conflict(memberships, seed, project):
    await memberships.add_member(seed.head_7.actor, project.id, seed.employee_7.id)

    with pytest.raises(ConflictException):
        await memberships.add_member(seed.head_7.actor, project.id, seed.employee_7.id)


@pytest.mark.asyncio
async def test_member_can_be_added_again_after_removal(memberships, seed, project):
    await memberships.add_member(seed.admin_7.actor, project.id, seed.employee_7.id)
    await memberships.remove_member(seed.admin_7.actor, project.id, seed.employee_7.id)

    await memberships.add_member(seed.admin_7.actor, project.id, seed.employee_7.id)

    assert await memberships.project_repo.is_member(project.id, seed.employee_7.id)


@pytest.mark.asyncio
async def test_user_from_another_company_is_refused(memberships, seed, project):
    with pytest.raises(AuthorizationException) as exc_info:
        await memberships.add_member(seed.admin_7.actor, project.id, seed.employee_9.id)
    assert exc_info.value.message == "Cannot add a user from another company."


@pytest.mark.asyncio
async def test_super_admin_may_add_across_companies(memberships, seed, project):
    member = await memberships.add_member(seed.super_admin.actor, project.id, seed.employee_9.id)

    assert member.user_id == seed.employee_9.id


@pytest.mark.asyncio
async def test_employee_cannot_manage_members(memberships, seed, project):
    with pytest.raises(AuthorizationException):
        await memberships.add_member(seed.employee_7.actor, project.id, seed.other_employee_7.id)


@pytest.mark.asyncio
async def test_admin_of_other_company_cannot_manage_members(memberships, seed, project):
    with pytest.raises(AuthorizationException):
        await memberships.add_member(seed.admin_9.actor, project.id, seed.employee_9.id)


@pytest.mark.asyncio
async def test_unknown_user_or_project_is_not_found(memberships, seed, project):
    with pytest.raises(ResourceNotFoundException):
        await memberships.add_member(seed.admin_7.actor, project.id, 999)
    with pytest.raises(ResourceNotFoundException):
        await memberships.add_member(seed.admin_7.actor, 999, seed.employee_7.id)


@pytest.mark.asyncio
async def test_removing_a_non_member_is_not_found(memberships, seed, project):
    with pytest.raises(ResourceNotFoundException):
        await memberships.remove_member(seed.admin_7.actor, project.id, seed.employee_7.id)


@pytest.mark.asyncio
async def test_list_members_per_role(memberships, seed, project):
    """
    GIVEN Alice is a member of the project and Bob is not
    WHEN each role lists the members
    THEN admins of the company and Alice see them; Bob and the other company are denied
    """
    await memberships.add_member(seed.admin_7.actor, project.id, seed.employee_7.id)

    for actor in (seed.super_admin.actor, seed.head_7.actor, seed.employee_7.actor):
        members = await memberships.list_members(actor, project.id)
        assert [m.user_id for m in members] == [seed.employee_7.id]

    for actor in (seed.other_employee_7.actor, seed.admin_9.actor):
        with pytest.raises(AuthorizationException):
            await memberships.list_members(actor, project.id)


@pytest.mark.asyncio
async def test_member_employee_still_cannot_add_members(memberships, seed, project):
    await memberships.add_member(seed.admin_7.actor, project.id, seed.employee_7.id)

    with pytest.raises(AuthorizationException):
        await memberships.add_member(seed.employee_7.actor, project.id, seed.other_employee_7.id)
