"""Tests for HierarchyLifecycle (linking on create, cascading soft delete, documents)"""

import io
from datetime import date
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from src.application.services.access_scope_resolver import AccessScopeResolver
from src.application.use_cases.hierarchy.hierarchy_lifecycle import \
    HierarchyLifecycle
from src.domain.enums import DocumentOwnerKind, ProjectStatus
from src.domain.exceptions import (AuthorizationException,
                                   ResourceNotFoundException,
                                   ValidationException)
from src.infrastructure.exceptions import TransactionError
from src.infrastructure.persistence.models import (Document, Project, Task,
                                                   TaskList)
from src.infrastructure.persistence.repositories import (CompanyRepository,
                                                         DocumentRepository,
                                                         ProjectRepository,
                                                         TaskListRepository,
                                                         TaskRepository,
                                                         UserRepository)
from src.presentation.api.v1.schemas.project import (ProjectCreate,
                                                     ProjectUpdate)
from src.presentation.api.v1.schemas.task import (SubTaskCreate, TaskCreate,
                                                  TaskListCreate,
                                                  TaskListUpdate, TaskUpdate)


@pytest.fixture
def hierarchy(test_db, storage):
    return HierarchyLifecycle(
        scope_resolver=AccessScopeResolver(),
        project_repo=ProjectRepository(test_db),
        task_list_repo=TaskListRepository(test_db),
        task_repo=TaskRepository(test_db),
        document_repo=DocumentRepository(test_db),
        user_repo=UserRepository(test_db),
        company_repo=CompanyRepository(test_db),
        storage=storage,
    )


@pytest.fixture
async def project(hierarchy, seed):
    """Project in company 7 with Alice (employee) as a member"""
    created = await hierarchy.create_project(seed.admin_7.actor, ProjectCreate(name="Apollo"))
    await hierarchy.project_repo.add_member(created.id, seed.employee_7.id, seed.admin_7.id)
    return created


@pytest.fixture
async def backlog(hierarchy, seed, project):
    return await hierarchy.create_task_list(
        seed.admin_7.actor, project.id, TaskListCreate(name="Backlog")
    )


async def fetch(test_db, model, row_id):
    result = await test_db.execute(
        select(model).where(model.id == row_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


def upload(content: bytes = b"%PDF-1.4 test"):
    return io.BytesIO(content)


class TestProjects:
    @pytest.mark.asyncio
    async def test_company_admin_creates_project_in_own_company(self, hierarchy, seed):
        project = await hierarchy.create_project(
            seed.admin_7.actor, ProjectCreate(name="Apollo", code="APL")
        )

        assert project.company_id == 7
        assert project.status == ProjectStatus.PLANNED.value
        assert project.created_by == seed.admin_7.id

    @pytest.mark.asyncio
    async def test_company_admin_cannot_create_in_other_company(self, hierarchy, seed):
        """
        GIVEN a CompanyAdmin of company 7
        WHEN creating a project for company 9
        THEN the request is forbidden
        """
        with pytest.raises(AuthorizationException):
            await hierarchy.create_project(
                seed.admin_7.actor, ProjectCreate(name="Gemini", company_id=9)
            )

    @pytest.mark.asyncio
    async def test_employee_cannot_create_project(self, hierarchy, seed):
        with pytest.raises(AuthorizationException):
            await hierarchy.create_project(seed.employee_7.actor, ProjectCreate(name="X"))

    @pytest.mark.asyncio
    async def test_super_admin_must_name_an_existing_company(self, hierarchy, seed):
        with pytest.raises(ValidationException):
            await hierarchy.create_project(seed.super_admin.actor, ProjectCreate(name="X"))
        with pytest.raises(ValidationException):
            await hierarchy.create_project(
                seed.super_admin.actor, ProjectCreate(name="X", company_id=404)
            )

        project = await hierarchy.create_project(
            seed.super_admin.actor, ProjectCreate(name="Gemini", company_id=9)
        )
        assert project.company_id == 9

    @pytest.mark.asyncio
    async def test_list_projects_per_role(self, hierarchy, seed, project):
        other = await hierarchy.create_project(seed.admin_9.actor, ProjectCreate(name="Gemini"))

        root = await hierarchy.list_projects(seed.super_admin.actor)
        root_filtered = await hierarchy.list_projects(seed.super_admin.actor, company_filter=9)
        admin = await hierarchy.list_projects(seed.admin_7.actor)
        alice = await hierarchy.list_projects(seed.employee_7.actor)
        bob = await hierarchy.list_projects(seed.other_employee_7.actor)

        assert {p.id for p in root} == {project.id, other.id}
        assert [p.id for p in root_filtered] == [other.id]
        assert [p.id for p in admin] == [project.id]
        assert [p.id for p in alice] == [project.id]
        assert bob == []

    @pytest.mark.asyncio
    async def test_employee_company_filter_excludes_foreign_memberships(
        self, hierarchy, seed, project
    ):
        """
        GIVEN Alice (company 7) is also a member of a company 9 project
        WHEN she lists projects filtered to company 7
        THEN only the company 7 project is returned
        """
        foreign = await hierarchy.create_project(seed.admin_9.actor, ProjectCreate(name="Gemini"))
        await hierarchy.project_repo.add_member(foreign.id, seed.employee_7.id, seed.super_admin.id)

        unfiltered = await hierarchy.list_projects(seed.employee_7.actor)
        filtered = await hierarchy.list_projects(seed.employee_7.actor, company_filter=7)

        assert {p.id for p in unfiltered} == {project.id, foreign.id}
        assert [p.id for p in filtered] == [project.id]

    @pytest.mark.asyncio
    async def test_company_filter_outside_own_company_is_forbidden(self, hierarchy, seed):
        with pytest.raises(AuthorizationException):
            await hierarchy.list_projects(seed.head_7.actor, company_filter=9)

    @pytest.mark.asyncio
    async def test_update_project(self, hierarchy, seed, project):
        updated = await hierarchy.update_project(
            seed.head_7.actor,
            project.id,
            ProjectUpdate(name="Apollo 11", status=ProjectStatus.IN_PROGRESS),
        )

        assert updated.name == "Apollo 11"
        assert updated.status == "InProgress"
        assert updated.updated_by == seed.head_7.id

    @pytest.mark.asyncio
    async def test_admin_of_other_company_cannot_update(self, hierarchy, seed, project):
        with pytest.raises(AuthorizationException):
            await hierarchy.update_project(
                seed.admin_9.actor, project.id, ProjectUpdate(name="Hijacked")
            )

    @pytest.mark.asyncio
    async def test_delete_project_keeps_children(self, hierarchy, test_db, seed, project, backlog):
        await hierarchy.delete_project(seed.admin_7.actor, project.id)

        assert (await fetch(test_db, Project, project.id)).is_deleted
        assert not (await fetch(test_db, TaskList, backlog.id)).is_deleted
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.update_project(seed.admin_7.actor, project.id, ProjectUpdate(name="Z"))

    @pytest.mark.asyncio
    async def test_children_of_deleted_project_are_unreachable(
        self, hierarchy, seed, project, backlog
    ):
        """
        GIVEN a project with a list, a task and a subtask
        WHEN the project is deleted
        THEN the surviving rows can no longer be read or written
        """
        admin = seed.admin_7.actor
        task = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="T"))
        subtask = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S"))

        await hierarchy.delete_project(admin, project.id)

        with pytest.raises(ResourceNotFoundException):
            await hierarchy.list_tasks(admin, backlog.id)
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.create_task(admin, backlog.id, TaskCreate(title="Late"))
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.update_task(admin, task.id, TaskUpdate(title="Late"))
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="Late"))
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.update_subtask(admin, task.id, subtask.id, TaskUpdate(title="Late"))
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.attach_task_document(admin, subtask.id, upload(), "late.pdf")
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.delete_task_list(admin, project.id, backlog.id)

    @pytest.mark.asyncio
    async def test_missing_project_is_not_found(self, hierarchy, seed):
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.delete_project(seed.super_admin.actor, 999)


class TestReads:
    @pytest.mark.asyncio
    async def test_get_project_per_role(self, hierarchy, seed, project):
        for actor in (seed.super_admin.actor, seed.head_7.actor, seed.employee_7.actor):
            assert (await hierarchy.get_project(actor, project.id)).id == project.id

        for actor in (seed.other_employee_7.actor, seed.admin_9.actor):
            with pytest.raises(AuthorizationException):
                await hierarchy.get_project(actor, project.id)

    @pytest.mark.asyncio
    async def test_get_task_list_must_match_the_project(self, hierarchy, seed, project, backlog):
        found = await hierarchy.get_task_list(seed.employee_7.actor, project.id, backlog.id)

        assert found.name == "Backlog"
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.get_task_list(seed.admin_7.actor, project.id + 1, backlog.id)
        with pytest.raises(AuthorizationException):
            await hierarchy.get_task_list(seed.other_employee_7.actor, project.id, backlog.id)

    @pytest.mark.asyncio
    async def test_update_task_list(self, hierarchy, seed, project, backlog):
        updated = await hierarchy.update_task_list(
            seed.head_7.actor, project.id, backlog.id, TaskListUpdate(name="Icebox", list_order=3)
        )

        assert updated.name == "Icebox"
        assert updated.list_order == 3
        assert updated.project_id == project.id
        assert updated.updated_by == seed.head_7.id

    @pytest.mark.asyncio
    async def test_employee_cannot_update_task_list(self, hierarchy, seed, project, backlog):
        with pytest.raises(AuthorizationException):
            await hierarchy.update_task_list(
                seed.employee_7.actor, project.id, backlog.id, TaskListUpdate(name="Mine")
            )

    @pytest.mark.asyncio
    async def test_get_task_and_subtask(self, hierarchy, seed, backlog):
        admin = seed.admin_7.actor
        task = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="T"))
        subtask = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S"))

        assert (await hierarchy.get_task(seed.employee_7.actor, task.id)).title == "T"
        assert (await hierarchy.get_subtask(seed.employee_7.actor, task.id, subtask.id)).title == "S"
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.get_task(admin, subtask.id)
        with pytest.raises(AuthorizationException):
            await hierarchy.get_task(seed.other_employee_7.actor, task.id)
        with pytest.raises(AuthorizationException):
            await hierarchy.get_task(seed.admin_9.actor, task.id)

    @pytest.mark.asyncio
    async def test_my_tasks_lists_assigned_top_level_tasks(self, hierarchy, seed, project, backlog):
        """
        GIVEN tasks assigned to Alice, to Bob, and a subtask assigned to Alice
        WHEN Alice lists her tasks
        THEN only her top-level tasks come back, latest due date first
        """
        admin = seed.admin_7.actor
        early = await hierarchy.create_task(
            admin, backlog.id, TaskCreate(title="Early", assigned_to=4, due_date=date(2026, 1, 5))
        )
        late = await hierarchy.create_task(
            admin, backlog.id, TaskCreate(title="Late", assigned_to=4, due_date=date(2026, 3, 1))
        )
        await hierarchy.create_task(admin, backlog.id, TaskCreate(title="Bob's", assigned_to=5))
        await hierarchy.create_subtask(admin, early.id, SubTaskCreate(title="S", assigned_to=4))

        mine = await hierarchy.my_tasks(seed.employee_7.actor)
        searched = await hierarchy.my_tasks(seed.employee_7.actor, search="ear")

        assert [t.id for t in mine] == [late.id, early.id]
        assert [t.id for t in searched] == [early.id]

        await hierarchy.delete_project(admin, project.id)
        assert await hierarchy.my_tasks(seed.employee_7.actor) == []


class TestTasks:
    @pytest.mark.asyncio
    async def test_task_copies_links_from_its_list(self, hierarchy, seed, project, backlog):
        task = await hierarchy.create_task(
            seed.employee_7.actor, backlog.id, TaskCreate(title="Write docs", assigned_to=5)
        )

        assert task.company_id == 7
        assert task.project_id == project.id
        assert task.task_list_id == backlog.id
        assert task.parent_task_id is None
        assert task.assigned_to == 5

    @pytest.mark.asyncio
    async def test_task_with_parent_id_is_rejected(self, hierarchy, seed, backlog):
        with pytest.raises(ValidationException):
            await hierarchy.create_task(
                seed.admin_7.actor, backlog.id, TaskCreate(title="X", parent_task_id=1)
            )

    @pytest.mark.asyncio
    async def test_mismatched_linking_ids_are_rejected(self, hierarchy, seed, project, backlog):
        with pytest.raises(ValidationException):
            await hierarchy.create_task(
                seed.admin_7.actor, backlog.id, TaskCreate(title="X", project_id=project.id + 1)
            )
        with pytest.raises(ValidationException):
            await hierarchy.create_task(
                seed.admin_7.actor, backlog.id, TaskCreate(title="X", task_list_id=backlog.id + 1)
            )

    @pytest.mark.asyncio
    async def test_assignee_must_be_in_the_company(self, hierarchy, seed, backlog):
        with pytest.raises(ValidationException):
            await hierarchy.create_task(
                seed.admin_7.actor,
                backlog.id,
                TaskCreate(title="X", assigned_to=seed.employee_9.id),
            )

    @pytest.mark.asyncio
    async def test_non_member_employee_cannot_create_tasks(self, hierarchy, seed, backlog):
        with pytest.raises(AuthorizationException):
            await hierarchy.create_task(seed.other_employee_7.actor, backlog.id, TaskCreate(title="X"))

    @pytest.mark.asyncio
    async def test_employee_updates_only_assigned_tasks(self, hierarchy, seed, backlog):
        mine = await hierarchy.create_task(
            seed.admin_7.actor, backlog.id, TaskCreate(title="Mine", assigned_to=4)
        )
        theirs = await hierarchy.create_task(
            seed.admin_7.actor, backlog.id, TaskCreate(title="Theirs", assigned_to=5)
        )

        updated = await hierarchy.update_task(
            seed.employee_7.actor, mine.id, TaskUpdate(title="Mine, edited")
        )
        assert updated.title == "Mine, edited"

        with pytest.raises(AuthorizationException):
            await hierarchy.update_task(seed.employee_7.actor, theirs.id, TaskUpdate(title="No"))

    @pytest.mark.asyncio
    async def test_task_cannot_move_between_lists(self, hierarchy, seed, project, backlog):
        sprint = await hierarchy.create_task_list(
            seed.admin_7.actor, project.id, TaskListCreate(name="Sprint")
        )
        task = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="T"))

        with pytest.raises(ValidationException):
            await hierarchy.update_task(
                seed.admin_7.actor, task.id, TaskUpdate(task_list_id=sprint.id)
            )

    @pytest.mark.asyncio
    async def test_employee_lists_tasks_of_member_projects_only(self, hierarchy, seed, backlog):
        await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="T"))

        assert len(await hierarchy.list_tasks(seed.employee_7.actor, backlog.id)) == 1
        with pytest.raises(AuthorizationException):
            await hierarchy.list_tasks(seed.other_employee_7.actor, backlog.id)


class TestSubtasks:
    @pytest.mark.asyncio
    async def test_subtask_copies_parent_links_and_defaults_assignee(
        self, hierarchy, seed, project, backlog
    ):
        parent = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="P"))

        subtask = await hierarchy.create_subtask(
            seed.employee_7.actor, parent.id, SubTaskCreate(title="S")
        )

        assert subtask.parent_task_id == parent.id
        assert subtask.task_list_id == backlog.id
        assert subtask.project_id == project.id
        assert subtask.company_id == 7
        assert subtask.assigned_to == seed.employee_7.id

    @pytest.mark.asyncio
    async def test_subtask_list_mismatch_is_rejected(self, hierarchy, seed, project, backlog):
        """
        GIVEN task T in list L1
        WHEN creating a subtask of T that names a different list L2
        THEN the request is a validation error and nothing is created
        """
        other_list = await hierarchy.create_task_list(
            seed.admin_7.actor, project.id, TaskListCreate(name="Other")
        )
        parent = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="P"))

        with pytest.raises(ValidationException):
            await hierarchy.create_subtask(
                seed.admin_7.actor,
                parent.id,
                SubTaskCreate(title="S", parent_task_id=parent.id, task_list_id=other_list.id),
            )
        assert await hierarchy.list_subtasks(seed.admin_7.actor, parent.id) == []

    @pytest.mark.asyncio
    async def test_route_and_body_parent_must_agree(self, hierarchy, seed, backlog):
        parent = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="P"))

        with pytest.raises(ValidationException):
            await hierarchy.create_subtask(
                seed.admin_7.actor, parent.id, SubTaskCreate(title="S", parent_task_id=parent.id + 1)
            )

    @pytest.mark.asyncio
    async def test_subtasks_do_not_nest(self, hierarchy, seed, backlog):
        parent = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="P"))
        subtask = await hierarchy.create_subtask(
            seed.admin_7.actor, parent.id, SubTaskCreate(title="S")
        )

        with pytest.raises(ResourceNotFoundException):
            await hierarchy.create_subtask(seed.admin_7.actor, subtask.id, SubTaskCreate(title="SS"))

    @pytest.mark.asyncio
    async def test_subtask_must_belong_to_the_route_parent(self, hierarchy, seed, backlog):
        first = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="1"))
        second = await hierarchy.create_task(seed.admin_7.actor, backlog.id, TaskCreate(title="2"))
        subtask = await hierarchy.create_subtask(
            seed.admin_7.actor, first.id, SubTaskCreate(title="S")
        )

        with pytest.raises(ResourceNotFoundException):
            await hierarchy.update_subtask(
                seed.admin_7.actor, second.id, subtask.id, TaskUpdate(title="X")
            )


class TestCascades:
    @pytest.mark.asyncio
    async def test_delete_task_cascades_to_subtasks_and_documents_only(
        self, hierarchy, test_db, seed, backlog
    ):
        """
        GIVEN task T with subtasks S1, S2, a sibling task U, and documents on T, S1 and U
        WHEN T is deleted
        THEN T, S1, S2 and their documents are soft-deleted; U and its document are not
        """
        admin = seed.admin_7.actor
        task = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="T"))
        sibling = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="U"))
        s1 = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S1"))
        s2 = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S2"))
        doc_t = await hierarchy.attach_task_document(admin, task.id, upload(), "t.pdf")
        doc_s1 = await hierarchy.attach_task_document(admin, s1.id, upload(), "s1.pdf")
        doc_u = await hierarchy.attach_task_document(admin, sibling.id, upload(), "u.pdf")

        await hierarchy.delete_task(admin, task.id)

        for row_id in (task.id, s1.id, s2.id):
            assert (await fetch(test_db, Task, row_id)).is_deleted
        for doc_id in (doc_t.id, doc_s1.id):
            assert (await fetch(test_db, Document, doc_id)).is_deleted
        assert not (await fetch(test_db, Task, sibling.id)).is_deleted
        assert not (await fetch(test_db, Document, doc_u.id)).is_deleted

    @pytest.mark.asyncio
    async def test_delete_task_list_cascades_but_keeps_project(
        self, hierarchy, test_db, seed, project, backlog
    ):
        admin = seed.admin_7.actor
        other_list = await hierarchy.create_task_list(admin, project.id, TaskListCreate(name="O"))
        task = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="T"))
        subtask = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S"))
        kept = await hierarchy.create_task(admin, other_list.id, TaskCreate(title="K"))
        doc = await hierarchy.attach_task_document(admin, subtask.id, upload(), "s.pdf")

        await hierarchy.delete_task_list(admin, project.id, backlog.id)

        assert (await fetch(test_db, TaskList, backlog.id)).is_deleted
        assert (await fetch(test_db, Task, task.id)).is_deleted
        assert (await fetch(test_db, Task, subtask.id)).is_deleted
        assert (await fetch(test_db, Document, doc.id)).is_deleted
        assert not (await fetch(test_db, Task, kept.id)).is_deleted
        assert not (await fetch(test_db, TaskList, other_list.id)).is_deleted
        assert not (await fetch(test_db, Project, project.id)).is_deleted

    @pytest.mark.asyncio
    async def test_failed_task_cascade_rolls_back_as_a_unit(
        self, hierarchy, test_db, seed, backlog
    ):
        """
        GIVEN task T with a subtask
        WHEN the document step of deleting T fails
        THEN a TransactionError is raised and, after rollback, T and its subtask are live
        """
        admin = seed.admin_7.actor
        task = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="T"))
        subtask = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S"))
        ids = (backlog.id, task.id, subtask.id)
        await test_db.commit()
        hierarchy.document_repo.soft_delete_for_owners = AsyncMock(
            side_effect=OperationalError("UPDATE documents", {}, Exception("disk I/O error"))
        )

        with pytest.raises(TransactionError):
            await hierarchy.delete_task(admin, task.id)
        await test_db.rollback()

        for row_id in ids[1:]:
            assert not (await fetch(test_db, Task, row_id)).is_deleted

    @pytest.mark.asyncio
    async def test_failed_task_list_cascade_rolls_back_as_a_unit(
        self, hierarchy, test_db, seed, project, backlog
    ):
        admin = seed.admin_7.actor
        task = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="T"))
        subtask = await hierarchy.create_subtask(admin, task.id, SubTaskCreate(title="S"))
        ids = (backlog.id, task.id, subtask.id)
        await test_db.commit()
        hierarchy.document_repo.soft_delete_for_owners = AsyncMock(
            side_effect=OperationalError("UPDATE documents", {}, Exception("disk I/O error"))
        )

        with pytest.raises(TransactionError) as exc_info:
            await hierarchy.delete_task_list(admin, project.id, backlog.id)
        await test_db.rollback()

        assert exc_info.value.status_code == 500
        assert not (await fetch(test_db, TaskList, ids[0])).is_deleted
        for row_id in ids[1:]:
            assert not (await fetch(test_db, Task, row_id)).is_deleted

    @pytest.mark.asyncio
    async def test_task_list_of_another_project_is_not_found(
        self, hierarchy, seed, project, backlog
    ):
        with pytest.raises(ResourceNotFoundException):
            await hierarchy.delete_task_list(seed.admin_7.actor, project.id + 1, backlog.id)

    @pytest.mark.asyncio
    async def test_employee_cannot_delete_task_list(self, hierarchy, seed, project, backlog):
        with pytest.raises(AuthorizationException):
            await hierarchy.delete_task_list(seed.employee_7.actor, project.id, backlog.id)

    @pytest.mark.asyncio
    async def test_delete_subtask_leaves_parent(self, hierarchy, test_db, seed, backlog):
        admin = seed.admin_7.actor
        parent = await hierarchy.create_task(admin, backlog.id, TaskCreate(title="P"))
        subtask = await hierarchy.create_subtask(admin, parent.id, SubTaskCreate(title="S"))

        await hierarchy.delete_subtask(admin, parent.id, subtask.id)

        assert (await fetch(test_db, Task, subtask.id)).is_deleted
        assert not (await fetch(test_db, Task, parent.id)).is_deleted
        assert await hierarchy.list_subtasks(admin, parent.id) == []


class TestDocuments:
    @pytest.mark.asyncio
    async def test_project_document_is_stored_and_recorded(
        self, hierarchy, seed, project, storage
    ):
        document = await hierarchy.attach_project_document(
            seed.employee_7.actor, project.id, upload(b"hello"), "notes.txt", "text/plain"
        )

        assert document.owner_kind == DocumentOwnerKind.PROJECT.value
        assert document.owner_id == project.id
        assert document.company_id == 7
        assert document.file_size == 5
        assert document.file_path.startswith("/uploads/projects/")
        assert document.file_path.endswith(".txt")
        assert await storage.read(document.file_path) == b"hello"

    @pytest.mark.asyncio
    async def test_empty_upload_is_rejected(self, hierarchy, seed, project):
        with pytest.raises(ValidationException):
            await hierarchy.attach_project_document(
                seed.admin_7.actor, project.id, upload(b""), "empty.txt"
            )

    @pytest.mark.asyncio
    async def test_non_member_cannot_upload_to_project(self, hierarchy, seed, project):
        with pytest.raises(AuthorizationException):
            await hierarchy.attach_project_document(
                seed.other_employee_7.actor, project.id, upload(), "x.pdf"
            )

    @pytest.mark.asyncio
    async def test_employee_uploads_only_to_assigned_tasks(self, hierarchy, seed, backlog):
        mine = await hierarchy.create_task(
            seed.admin_7.actor, backlog.id, TaskCreate(title="Mine", assigned_to=4)
        )
        theirs = await hierarchy.create_task(
            seed.admin_7.actor, backlog.id, TaskCreate(title="Theirs", assigned_to=5)
        )

        document = await hierarchy.attach_task_document(
            seed.employee_7.actor, mine.id, upload(), "report.pdf"
        )
        assert document.file_path.startswith("/uploads/tasks/")

        with pytest.raises(AuthorizationException):
            await hierarchy.attach_task_document(
                seed.employee_7.actor, theirs.id, upload(), "report.pdf"
            )
