import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from src.application.use_cases.hierarchy.hierarchy_lifecycle import \
    HierarchyLifecycle
from src.domain.entities.actor import Actor
from src.presentation.api.dependencies import (get_current_actor,
                                               get_hierarchy,
                                               get_hierarchy_transactional)
from src.presentation.api.v1.schemas.base import ApiResponse
from src.presentation.api.v1.schemas.project import (DocumentDetailResponse,
                                                     DocumentResponse)
from src.presentation.api.v1.schemas.task import (SubTaskCreate,
                                                  TaskCollectionResponse,
                                                  TaskCreate,
                                                  TaskDetailResponse,
                                                  TaskResponse, TaskUpdate)

router = APIRouter()
logger = logging.getLogger(__name__)

CurrentActor = Annotated[Actor, Depends(get_current_actor)]
Reader = Annotated[HierarchyLifecycle, Depends(get_hierarchy)]
Writer = Annotated[HierarchyLifecycle, Depends(get_hierarchy_transactional)]


def _task_detail(message: str, task, status_code: int = status.HTTP_200_OK) -> TaskDetailResponse:
    return TaskDetailResponse(
        message=message, status_code=status_code, data=TaskResponse.model_validate(task)
    )


def _task_collection(message: str, tasks) -> TaskCollectionResponse:
    return TaskCollectionResponse(
        message=message, data=[TaskResponse.model_validate(t) for t in tasks]
    )


@router.get("/tasks/users/mytasks", response_model=TaskCollectionResponse)
async def my_tasks(
    actor: CurrentActor,
    hierarchy: Reader,
    status_id: Annotated[int | None, Query(alias="statusId")] = None,
    priority_id: Annotated[int | None, Query(alias="priorityId")] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """Top-level tasks assigned to the caller, latest due date first"""
    tasks = await hierarchy.my_tasks(
        actor,
        status_id=status_id,
        priority_id=priority_id,
        search=search,
        skip=skip,
        limit=limit,
    )
    return _task_collection("Tasks retrieved successfully.", tasks)


@router.get("/tasklists/{task_list_id}/tasks", response_model=TaskCollectionResponse)
async def list_tasks(task_list_id: int, actor: CurrentActor, hierarchy: Reader):
    """Top-level tasks of a list visible to the caller"""
    tasks = await hierarchy.list_tasks(actor, task_list_id)
    return _task_collection("Tasks retrieved successfully.", tasks)


@router.post(
    "/tasklists/{task_list_id}/tasks",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    task_list_id: int, data: TaskCreate, actor: CurrentActor, hierarchy: Writer
):
    task = await hierarchy.create_task(actor, task_list_id, data)
    return _task_detail("Task created successfully.", task, status.HTTP_201_CREATED)


@router.get("/tasks/{task_id}", response_model=TaskDetailResponse)
async def get_task(task_id: int, actor: CurrentActor, hierarchy: Reader):
    task = await hierarchy.get_task(actor, task_id)
    return _task_detail("Task retrieved successfully.", task)


@router.put("/tasks/{task_id}", response_model=TaskDetailResponse)
async def update_task(task_id: int, data: TaskUpdate, actor: CurrentActor, hierarchy: Writer):
    task = await hierarchy.update_task(actor, task_id, data)
    return _task_detail("Task updated successfully.", task)


@router.delete("/tasks/{task_id}", response_model=ApiResponse)
async def delete_task(task_id: int, actor: CurrentActor, hierarchy: Writer):
    """Soft delete the task, its subtasks and all their documents"""
    await hierarchy.delete_task(actor, task_id)
    return ApiResponse(message="Task and its subtasks soft-deleted successfully.")


@router.post(
    "/tasks/{task_id}/documents",
    response_model=DocumentDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_task_document(
    task_id: int,
    actor: CurrentActor,
    hierarchy: Writer,
    file: UploadFile = File(...),
):
    document = await hierarchy.attach_task_document(
        actor, task_id, file.file, file.filename or "", file.content_type
    )
    return DocumentDetailResponse(
        message="Document uploaded successfully.",
        status_code=status.HTTP_201_CREATED,
        data=DocumentResponse.model_validate(document),
    )


# Subtasks


@router.get("/tasks/{parent_task_id}/subtasks", response_model=TaskCollectionResponse)
async def list_subtasks(parent_task_id: int, actor: CurrentActor, hierarchy: Reader):
    subtasks = await hierarchy.list_subtasks(actor, parent_task_id)
    return _task_collection("Subtasks retrieved successfully.", subtasks)


@router.post(
    "/tasks/{parent_task_id}/subtasks",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subtask(
    parent_task_id: int, data: SubTaskCreate, actor: CurrentActor, hierarchy: Writer
):
    """Create a subtask; company, project and task list are inherited from the parent"""
    subtask = await hierarchy.create_subtask(actor, parent_task_id, data)
    return _task_detail("Subtask created successfully.", subtask, status.HTTP_201_CREATED)


@router.get("/tasks/{parent_task_id}/subtasks/{subtask_id}", response_model=TaskDetailResponse)
async def get_subtask(
    parent_task_id: int, subtask_id: int, actor: CurrentActor, hierarchy: Reader
):
    subtask = await hierarchy.get_subtask(actor, parent_task_id, subtask_id)
    return _task_detail("Subtask retrieved successfully.", subtask)


@router.put("/tasks/{parent_task_id}/subtasks/{subtask_id}", response_model=TaskDetailResponse)
async def update_subtask(
    parent_task_id: int,
    subtask_id: int,
    data: TaskUpdate,
    actor: CurrentActor,
    hierarchy: Writer,
):
    subtask = await hierarchy.update_subtask(actor, parent_task_id, subtask_id, data)
    return _task_detail("Subtask updated successfully.", subtask)


@router.delete("/tasks/{parent_task_id}/subtasks/{subtask_id}", response_model=ApiResponse)
async def delete_subtask(
    parent_task_id: int, subtask_id: int, actor: CurrentActor, hierarchy: Writer
):
    await hierarchy.delete_subtask(actor, parent_task_id, subtask_id)
    return ApiResponse(message="Subtask soft-deleted successfully.")
