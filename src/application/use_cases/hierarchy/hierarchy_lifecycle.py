"""
Hierarchy lifecycle use case.

Creates, updates and soft-deletes the Project > TaskList > Task > SubTask tree
and the Documents attached to projects and tasks.

Every operation loads the parent first (NotFound), then authorizes through the
AccessScopeResolver (AuthorizationException), and only then writes. Children
copy company_id/project_id (and task_list_id for subtasks) from their parent;
caller-supplied linking ids are only compared against the parent.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, BinaryIO

from sqlalchemy.exc import SQLAlchemyError

from src.domain.enums import (Action, DocumentOwnerKind, EntityKind,
                              ProjectStatus, RoleId)
from src.domain.exceptions import (ResourceNotFoundException,
                                   ValidationException)
from src.domain.value_objects.access_scope import ScopeTarget
from src.infrastructure.exceptions import TransactionError
from src.infrastructure.persistence.models.document import Document
from src.infrastructure.persistence.models.project import Project
from src.infrastructure.persistence.models.task import Task, TaskList
from src.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from src.application.interfaces.storage import IStorageService
    from src.application.services.access_scope_resolver import \
        AccessScopeResolver
    from src.domain.entities.actor import Actor
    from src.infrastructure.persistence.repositories import (
        CompanyRepository, DocumentRepository, ProjectRepository,
        TaskListRepository, TaskRepository, UserRepository)
    from src.presentation.api.v1.schemas.project import (ProjectCreate,
                                                         ProjectUpdate)
    from src.presentation.api.v1.schemas.task import (SubTaskCreate,
                                                      TaskCreate,
                                                      TaskListCreate,
                                                      TaskListUpdate,
                                                      TaskUpdate)

logger = get_logger(__name__)

PROJECTS_FOLDER = "projects"
TASKS_FOLDER = "tasks"

# Fields of TaskFields copied onto a Task row
_TASK_FIELDS = (
    "title",
    "description",
    "status_id",
    "priority_id",
    "assigned_to",
    "start_date",
    "due_date",
    "estimated_hours",
)


def _file_size(file_data: BinaryIO) -> int:
    position = file_data.tell()
    file_data.seek(0, 2)
    size = file_data.tell()
    file_data.seek(position)
    return size


class HierarchyLifecycle:
    """Link-on-create and cascading soft delete across the work hierarchy"""

    def __init__(
        self,
        scope_resolver: AccessScopeResolver,
        project_repo: ProjectRepository,
        task_list_repo: TaskListRepository,
        task_repo: TaskRepository,
        document_repo: DocumentRepository,
        user_repo: UserRepository,
        company_repo: CompanyRepository,
        storage: IStorageService | None = None,
    ) -> None:
        self.scope_resolver = scope_resolver
        self.project_repo = project_repo
        self.task_list_repo = task_list_repo
        self.task_repo = task_repo
        self.document_repo = document_repo
        self.user_repo = user_repo
        self.company_repo = company_repo
        self.storage = storage

    # Loading and authorization helpers

    async def _target(
        self,
        actor: Actor,
        kind: EntityKind,
        company_id: int,
        project_id: int | None,
        assigned_to: int | None = None,
    ) -> ScopeTarget:
        # Membership only narrows Employee scopes
        is_member = False
        if actor.role is RoleId.EMPLOYEE and project_id is not None:
            is_member = await self.project_repo.is_member(project_id, actor.user_id)
        return ScopeTarget(
            kind=kind,
            company_id=company_id,
            project_id=project_id,
            assigned_to=assigned_to,
            actor_is_member=is_member,
        )

    async def _authorize_task(self, actor: Actor, task: Task, action: Action) -> None:
        kind = EntityKind.SUBTASK if task.is_subtask else EntityKind.TASK
        target = await self._target(
            actor, kind, task.company_id, task.project_id, assigned_to=task.assigned_to
        )
        self.scope_resolver.authorize(actor, target, action)

    async def _load_project(self, project_id: int) -> Project:
        project = await self.project_repo.get_active_by_id(project_id)
        if project is None:
            raise ResourceNotFoundException("Project", project_id)
        return project

    async def _load_task_list(self, task_list_id: int) -> TaskList:
        task_list = await self.task_list_repo.get_active_by_id(task_list_id)
        if task_list is None:
            raise ResourceNotFoundException("TaskList", task_list_id)
        return task_list

    async def _load_project_task_list(self, project_id: int, task_list_id: int) -> TaskList:
        task_list = await self._load_task_list(task_list_id)
        if task_list.project_id != project_id:
            raise ResourceNotFoundException("TaskList", task_list_id)
        return task_list

    async def _load_task(self, task_id: int) -> Task:
        task = await self.task_repo.get_active_by_id(task_id)
        if task is None or task.is_subtask:
            raise ResourceNotFoundException("Task", task_id)
        return task

    async def _load_subtask(self, parent_task_id: int, subtask_id: int) -> Task:
        subtask = await self.task_repo.get_active_by_id(subtask_id)
        if subtask is None or subtask.parent_task_id != parent_task_id:
            raise ResourceNotFoundException("SubTask", subtask_id)
        return subtask

    async def _check_assignee(self, user_id: int | None, company_id: int) -> None:
        if user_id is None:
            return
        if await self.user_repo.get_in_company(user_id, company_id) is None:
            raise ValidationException(
                "Assigned user must belong to the same company.", field="assignedTo"
            )

    # Projects

    async def list_projects(
        self, actor: Actor, company_filter: int | None = None, skip: int = 0, limit: int = 100
    ) -> list[Project]:
        scope = self.scope_resolver.scope(actor, EntityKind.PROJECT, Action.READ, company_filter)
        return await self.project_repo.list_in_scope(scope, skip=skip, limit=limit)

    async def get_project(self, actor: Actor, project_id: int) -> Project:
        project = await self._load_project(project_id)
        target = await self._target(actor, EntityKind.PROJECT, project.company_id, project.id)
        self.scope_resolver.authorize(actor, target, Action.READ)
        return project

    async def create_project(self, actor: Actor, data: ProjectCreate) -> Project:
        """
        Create a project in the payload's company (or the caller's own).

        Raises:
            AuthorizationException: Employee, or a company other than the caller's
            ValidationException: no company given, or the company does not exist
        """
        company_id = data.company_id if data.company_id is not None else actor.company_id
        if company_id is None:
            raise ValidationException("CompanyId is required.", field="companyId")

        self.scope_resolver.authorize_project_creation(actor, company_id)

        if not await self.company_repo.exists(company_id):
            raise ValidationException(f"Company with ID {company_id} does not exist.", field="companyId")

        project = Project(
            company_id=company_id,
            name=data.name,
            code=data.code,
            description=data.description,
            status=(data.status or ProjectStatus.PLANNED).value,
            start_date=data.start_date,
            end_date=data.end_date,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        project = await self.project_repo.create(project)
        logger.info("Project %s created in company %s by user %s", project.id, company_id, actor.user_id)
        return project

    async def update_project(self, actor: Actor, project_id: int, data: ProjectUpdate) -> Project:
        project = await self._load_project(project_id)
        target = await self._target(actor, EntityKind.PROJECT, project.company_id, project.id)
        self.scope_resolver.authorize(actor, target, Action.UPDATE)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "status" in changes:
            changes["status"] = ProjectStatus(changes["status"]).value
        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_by = actor.user_id
        return await self.project_repo.update(project)

    async def delete_project(self, actor: Actor, project_id: int) -> None:
        """
        Soft delete the project row only.

        Its lists, tasks and documents keep their rows but can no longer be
        loaded: list and task lookups require an active project.
        """
        project = await self._load_project(project_id)
        target = await self._target(actor, EntityKind.PROJECT, project.company_id, project.id)
        self.scope_resolver.authorize(actor, target, Action.DELETE)
        await self.project_repo.soft_delete(project.id, actor.user_id)
        logger.info("Project %s soft-deleted by user %s", project.id, actor.user_id)

    # Task lists

    async def list_task_lists(self, actor: Actor, project_id: int) -> list[TaskList]:
        project = await self._load_project(project_id)
        target = await self._target(actor, EntityKind.TASK_LIST, project.company_id, project.id)
        scope = self.scope_resolver.authorize(actor, target, Action.READ)
        return await self.task_list_repo.list_for_project(project.id, scope)

    async def create_task_list(
        self, actor: Actor, project_id: int, data: TaskListCreate
    ) -> TaskList:
        project = await self._load_project(project_id)
        target = await self._target(actor, EntityKind.TASK_LIST, project.company_id, project.id)
        self.scope_resolver.authorize(actor, target, Action.CREATE)

        task_list = TaskList(
            company_id=project.company_id,
            project_id=project.id,
            name=data.name,
            description=data.description,
            list_order=data.list_order,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        return await self.task_list_repo.create(task_list)

    async def get_task_list(self, actor: Actor, project_id: int, task_list_id: int) -> TaskList:
        task_list = await self._load_project_task_list(project_id, task_list_id)
        target = await self._target(
            actor, EntityKind.TASK_LIST, task_list.company_id, task_list.project_id
        )
        self.scope_resolver.authorize(actor, target, Action.READ)
        return task_list

    async def update_task_list(
        self, actor: Actor, project_id: int, task_list_id: int, data: TaskListUpdate
    ) -> TaskList:
        """
        Rename or reorder a task list. The list stays in its project.

        Raises:
            ResourceNotFoundException: list missing, deleted, or not in the project
            AuthorizationException: Employee, or a project outside the caller's company
        """
        task_list = await self._load_project_task_list(project_id, task_list_id)
        target = await self._target(
            actor, EntityKind.TASK_LIST, task_list.company_id, task_list.project_id
        )
        self.scope_resolver.authorize(actor, target, Action.UPDATE)

        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(task_list, field, value)
        task_list.updated_by = actor.user_id
        return await self.task_list_repo.update(task_list)

    async def delete_task_list(self, actor: Actor, project_id: int, task_list_id: int) -> None:
        """
        Soft delete a task list, every task in it (top-level and subtasks) and
        their documents. The project is untouched.

        Raises:
            ResourceNotFoundException: list missing, deleted, or not in the project
            AuthorizationException: caller may not delete lists here
            TransactionError: a write failed; the caller's transaction rolls back
        """
        task_list = await self._load_project_task_list(project_id, task_list_id)
        target = await self._target(
            actor, EntityKind.TASK_LIST, task_list.company_id, task_list.project_id
        )
        self.scope_resolver.authorize(actor, target, Action.DELETE)

        try:
            task_ids = await self.task_repo.ids_in_task_list(task_list.id)
            tasks = await self.task_repo.soft_delete_many(task_ids, actor.user_id)
            documents = await self.document_repo.soft_delete_for_owners(
                DocumentOwnerKind.TASK, task_ids
            )
            await self.task_list_repo.soft_delete(task_list.id, actor.user_id)
        except SQLAlchemyError as e:
            logger.error("Cascade delete of task list %s failed: %s", task_list.id, e)
            raise TransactionError("delete task list", type(e).__name__) from e

        logger.info(
            "Task list %s soft-deleted by user %s (%d tasks, %d documents)",
            task_list.id,
            actor.user_id,
            tasks,
            documents,
        )

    # Tasks

    async def list_tasks(self, actor: Actor, task_list_id: int) -> list[Task]:
        task_list = await self._load_task_list(task_list_id)
        target = await self._target(
            actor, EntityKind.TASK, task_list.company_id, task_list.project_id
        )
        scope = self.scope_resolver.authorize(actor, target, Action.READ)
        return await self.task_repo.list_in_scope(task_list.id, scope)

    async def get_task(self, actor: Actor, task_id: int) -> Task:
        task = await self._load_task(task_id)
        await self._authorize_task(actor, task, Action.READ)
        return task

    async def my_tasks(
        self,
        actor: Actor,
        status_id: int | None = None,
        priority_id: int | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Task]:
        """Top-level tasks assigned to the caller that the caller can read"""
        scope = self.scope_resolver.scope(actor, EntityKind.TASK, Action.READ)
        return await self.task_repo.list_top_level(
            replace(scope, assignee_user_id=actor.user_id),
            status_id=status_id,
            priority_id=priority_id,
            search=search,
            skip=skip,
            limit=limit,
        )

    async def create_task(self, actor: Actor, task_list_id: int, data: TaskCreate) -> Task:
        """
        Create a top-level task in a task list.

        Raises:
            ValidationException: ParentTaskId given, linking ids disagree with
                the list, or assignee outside the company
            ResourceNotFoundException: list or its project missing or deleted
            AuthorizationException: caller may not create tasks in this project
        """
        if data.parent_task_id is not None:
            raise ValidationException(
                "A task created under a task list cannot have a ParentTaskId; "
                "use the subtask endpoint.",
                field="parentTaskId",
            )

        task_list = await self._load_task_list(task_list_id)
        if data.task_list_id is not None and data.task_list_id != task_list.id:
            raise ValidationException(
                "TaskListId in the body does not match the route.", field="taskListId"
            )
        if data.project_id is not None and data.project_id != task_list.project_id:
            raise ValidationException(
                "ProjectId does not match the task list's project.", field="projectId"
            )
        await self._load_project(task_list.project_id)

        target = await self._target(
            actor, EntityKind.TASK, task_list.company_id, task_list.project_id
        )
        self.scope_resolver.authorize(actor, target, Action.CREATE)
        await self._check_assignee(data.assigned_to, task_list.company_id)

        task = Task(
            company_id=task_list.company_id,
            project_id=task_list.project_id,
            task_list_id=task_list.id,
            parent_task_id=None,
            created_by=actor.user_id,
            updated_by=actor.user_id,
            **{field: getattr(data, field) for field in _TASK_FIELDS},
        )
        task = await self.task_repo.create(task)
        logger.info("Task %s created in list %s by user %s", task.id, task_list.id, actor.user_id)
        return task

    async def update_task(self, actor: Actor, task_id: int, data: TaskUpdate) -> Task:
        task = await self._load_task(task_id)
        return await self._update(actor, task, data)

    async def delete_task(self, actor: Actor, task_id: int) -> None:
        """
        Soft delete a task, its direct subtasks, and the documents of all of
        them. Sibling tasks are untouched.
        """
        task = await self._load_task(task_id)
        await self._authorize_task(actor, task, Action.DELETE)

        try:
            task_ids = await self.task_repo.ids_in_task_tree(task.id)
            tasks = await self.task_repo.soft_delete_many(task_ids, actor.user_id)
            documents = await self.document_repo.soft_delete_for_owners(
                DocumentOwnerKind.TASK, task_ids
            )
        except SQLAlchemyError as e:
            logger.error("Cascade delete of task %s failed: %s", task.id, e)
            raise TransactionError("delete task", type(e).__name__) from e

        logger.info(
            "Task %s soft-deleted by user %s (%d tasks, %d documents)",
            task.id,
            actor.user_id,
            tasks,
            documents,
        )

    # Subtasks

    async def list_subtasks(self, actor: Actor, parent_task_id: int) -> list[Task]:
        parent = await self._load_task(parent_task_id)
        await self._authorize_task(actor, parent, Action.READ)
        return await self.task_repo.list_subtasks(parent.id)

    async def get_subtask(self, actor: Actor, parent_task_id: int, subtask_id: int) -> Task:
        subtask = await self._load_subtask(parent_task_id, subtask_id)
        await self._authorize_task(actor, subtask, Action.READ)
        return subtask

    async def create_subtask(
        self, actor: Actor, parent_task_id: int, data: SubTaskCreate
    ) -> Task:
        """
        Create a subtask under a top-level task.

        company_id, project_id and task_list_id are copied from the parent and
        frozen. The assignee defaults to the caller.

        Raises:
            ValidationException: ParentTaskId/TaskListId disagree with the parent
            ResourceNotFoundException: parent missing, deleted, or itself a subtask
            AuthorizationException: caller may not create tasks in this project
        """
        if data.parent_task_id is not None and data.parent_task_id != parent_task_id:
            raise ValidationException(
                "ParentTaskId in the body does not match the route.", field="parentTaskId"
            )

        parent = await self._load_task(parent_task_id)
        if data.task_list_id is not None and data.task_list_id != parent.task_list_id:
            raise ValidationException(
                "TaskListId does not match the parent task's task list.", field="taskListId"
            )

        target = await self._target(actor, EntityKind.SUBTASK, parent.company_id, parent.project_id)
        self.scope_resolver.authorize(actor, target, Action.CREATE)
        await self._check_assignee(data.assigned_to, parent.company_id)

        values = {field: getattr(data, field) for field in _TASK_FIELDS}
        if values["assigned_to"] is None:
            values["assigned_to"] = actor.user_id

        subtask = Task(
            company_id=parent.company_id,
            project_id=parent.project_id,
            task_list_id=parent.task_list_id,
            parent_task_id=parent.id,
            created_by=actor.user_id,
            updated_by=actor.user_id,
            **values,
        )
        subtask = await self.task_repo.create(subtask)
        logger.info("Subtask %s created under task %s by user %s", subtask.id, parent.id, actor.user_id)
        return subtask

    async def update_subtask(
        self, actor: Actor, parent_task_id: int, subtask_id: int, data: TaskUpdate
    ) -> Task:
        subtask = await self._load_subtask(parent_task_id, subtask_id)
        return await self._update(actor, subtask, data)

    async def delete_subtask(self, actor: Actor, parent_task_id: int, subtask_id: int) -> None:
        """Soft delete one subtask and its documents"""
        subtask = await self._load_subtask(parent_task_id, subtask_id)
        await self._authorize_task(actor, subtask, Action.DELETE)

        try:
            await self.task_repo.soft_delete_many([subtask.id], actor.user_id)
            documents = await self.document_repo.soft_delete_for_owners(
                DocumentOwnerKind.TASK, [subtask.id]
            )
        except SQLAlchemyError as e:
            logger.error("Cascade delete of subtask %s failed: %s", subtask.id, e)
            raise TransactionError("delete subtask", type(e).__name__) from e

        logger.info(
            "Subtask %s soft-deleted by user %s (%d documents)", subtask.id, actor.user_id, documents
        )

    async def _update(self, actor: Actor, task: Task, data: TaskUpdate) -> Task:
        if data.parent_task_id is not None and data.parent_task_id != task.parent_task_id:
            raise ValidationException("ParentTaskId cannot be changed.", field="parentTaskId")
        if data.task_list_id is not None and data.task_list_id != task.task_list_id:
            raise ValidationException("TaskListId cannot be changed.", field="taskListId")

        await self._authorize_task(actor, task, Action.UPDATE)

        changes = data.model_dump(
            include=set(_TASK_FIELDS), exclude_unset=True, exclude_none=True
        )
        if changes.get("assigned_to", task.assigned_to) != task.assigned_to:
            await self._check_assignee(changes["assigned_to"], task.company_id)

        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_by = actor.user_id
        return await self.task_repo.update(task)

    # Documents

    async def attach_project_document(
        self,
        actor: Actor,
        project_id: int,
        file_data: BinaryIO,
        filename: str,
        content_type: str | None = None,
    ) -> Document:
        project = await self._load_project(project_id)
        target = await self._target(actor, EntityKind.PROJECT, project.company_id, project.id)
        self.scope_resolver.authorize(actor, target, Action.UPLOAD_DOCUMENT)
        return await self._store_document(
            actor,
            DocumentOwnerKind.PROJECT,
            project.id,
            project.company_id,
            PROJECTS_FOLDER,
            file_data,
            filename,
            content_type,
        )

    async def attach_task_document(
        self,
        actor: Actor,
        task_id: int,
        file_data: BinaryIO,
        filename: str,
        content_type: str | None = None,
    ) -> Document:
        """Attach a document to a task or subtask (Employees: assignee only)"""
        task = await self.task_repo.get_active_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("Task", task_id)
        await self._authorize_task(actor, task, Action.UPLOAD_DOCUMENT)
        return await self._store_document(
            actor,
            DocumentOwnerKind.TASK,
            task.id,
            task.company_id,
            TASKS_FOLDER,
            file_data,
            filename,
            content_type,
        )

    async def _store_document(
        self,
        actor: Actor,
        owner_kind: DocumentOwnerKind,
        owner_id: int,
        company_id: int,
        folder: str,
        file_data: BinaryIO,
        filename: str,
        content_type: str | None,
    ) -> Document:
        if self.storage is None:
            raise RuntimeError("No storage service configured for document uploads")
        if not filename:
            raise ValidationException("A file is required.", field="file")

        file_size = _file_size(file_data)
        if file_size == 0:
            raise ValidationException("The uploaded file is empty.", field="file")

        file_path = await self.storage.save(file_data, folder, filename)
        document = Document(
            owner_kind=owner_kind.value,
            owner_id=owner_id,
            company_id=company_id,
            document_name=filename,
            file_path=file_path,
            file_size=file_size,
            content_type=content_type,
            uploaded_by=actor.user_id,
        )
        document = await self.document_repo.create(document)
        logger.info(
            "Document %s attached to %s %s by user %s",
            document.id,
            owner_kind.value,
            owner_id,
            actor.user_id,
        )
        return document
