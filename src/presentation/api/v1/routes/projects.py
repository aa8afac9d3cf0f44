import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from src.application.use_cases.hierarchy.hierarchy_lifecycle import \
    HierarchyLifecycle
from src.application.use_cases.hierarchy.project_membership import \
    ProjectMembershipService
from src.domain.entities.actor import Actor
from src.presentation.api.dependencies import (get_current_actor,
                                               get_hierarchy,
                                               get_hierarchy_transactional,
                                               get_membership_service)
from src.presentation.api.v1.schemas.base import ApiResponse
from src.presentation.api.v1.schemas.project import (
    DocumentDetailResponse, DocumentResponse, ProjectCreate,
    ProjectDetailResponse, ProjectListResponse, ProjectMemberCreate,
    ProjectMemberDetailResponse, ProjectMemberListResponse,
    ProjectMemberResponse, ProjectResponse, ProjectUpdate)
from src.presentation.api.v1.schemas.task import (TaskListCollectionResponse,
                                                  TaskListCreate,
                                                  TaskListDetailResponse,
                                                  TaskListResponse,
                                                  TaskListUpdate)

router = APIRouter()
logger = logging.getLogger(__name__)

CurrentActor = Annotated[Actor, Depends(get_current_actor)]
Reader = Annotated[HierarchyLifecycle, Depends(get_hierarchy)]
Writer = Annotated[HierarchyLifecycle, Depends(get_hierarchy_transactional)]
Memberships = Annotated[ProjectMembershipService, Depends(get_membership_service)]


@router.get("/", response_model=ProjectListResponse)
async def list_projects(
    actor: CurrentActor,
    hierarchy: Reader,
    company_id: Annotated[int | None, Query(alias="companyId")] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """
    Projects visible to the caller.

    SuperAdmins see every company (optionally filtered by companyId); company
    admins and department heads see their own company; employees see the
    projects they are members of.
    """
    projects = await hierarchy.list_projects(actor, company_id, skip=skip, limit=limit)
    return ProjectListResponse(
        message="Projects retrieved successfully.",
        data=[ProjectResponse.model_validate(p) for p in projects],
    )


@router.post("/", response_model=ProjectDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreate, actor: CurrentActor, hierarchy: Writer):
    project = await hierarchy.create_project(actor, data)
    return ProjectDetailResponse(
        message="Project created successfully.",
        status_code=status.HTTP_201_CREATED,
        data=ProjectResponse.model_validate(project),
    )


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(project_id: int, actor: CurrentActor, hierarchy: Reader):
    project = await hierarchy.get_project(actor, project_id)
    return ProjectDetailResponse(
        message="Project retrieved successfully.",
        data=ProjectResponse.model_validate(project),
    )


@router.put("/{project_id}", response_model=ProjectDetailResponse)
async def update_project(
    project_id: int, data: ProjectUpdate, actor: CurrentActor, hierarchy: Writer
):
    project = await hierarchy.update_project(actor, project_id, data)
    return ProjectDetailResponse(
        message="Project updated successfully.",
        data=ProjectResponse.model_validate(project),
    )


@router.delete("/{project_id}", response_model=ApiResponse)
async def delete_project(project_id: int, actor: CurrentActor, hierarchy: Writer):
    await hierarchy.delete_project(actor, project_id)
    return ApiResponse(message="Project soft-deleted successfully.")


# Members


@router.get("/{project_id}/members", response_model=ProjectMemberListResponse)
async def list_project_members(project_id: int, actor: CurrentActor, memberships: Memberships):
    members = await memberships.list_members(actor, project_id)
    return ProjectMemberListResponse(
        message="Members retrieved successfully.",
        data=[ProjectMemberResponse.model_validate(m) for m in members],
    )


@router.post(
    "/{project_id}/members",
    response_model=ProjectMemberDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_project_member(
    project_id: int,
    data: ProjectMemberCreate,
    actor: CurrentActor,
    memberships: Memberships,
):
    member = await memberships.add_member(actor, project_id, data.user_id)
    return ProjectMemberDetailResponse(
        message="Member added to project successfully.",
        status_code=status.HTTP_201_CREATED,
        data=ProjectMemberResponse.model_validate(member),
    )


@router.delete("/{project_id}/members/{user_id}", response_model=ApiResponse)
async def remove_project_member(
    project_id: int, user_id: int, actor: CurrentActor, memberships: Memberships
):
    await memberships.remove_member(actor, project_id, user_id)
    return ApiResponse(message="Member removed from project successfully.")


@router.post(
    "/{project_id}/documents",
    response_model=DocumentDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_project_document(
    project_id: int,
    actor: CurrentActor,
    hierarchy: Writer,
    file: UploadFile = File(...),
):
    document = await hierarchy.attach_project_document(
        actor, project_id, file.file, file.filename or "", file.content_type
    )
    return DocumentDetailResponse(
        message="Document uploaded successfully.",
        status_code=status.HTTP_201_CREATED,
        data=DocumentResponse.model_validate(document),
    )


# Task lists


@router.get("/{project_id}/tasklists", response_model=TaskListCollectionResponse)
async def list_task_lists(project_id: int, actor: CurrentActor, hierarchy: Reader):
    task_lists = await hierarchy.list_task_lists(actor, project_id)
    return TaskListCollectionResponse(
        message="Task lists retrieved successfully.",
        data=[TaskListResponse.model_validate(t) for t in task_lists],
    )


@router.post(
    "/{project_id}/tasklists",
    response_model=TaskListDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task_list(
    project_id: int, data: TaskListCreate, actor: CurrentActor, hierarchy: Writer
):
    task_list = await hierarchy.create_task_list(actor, project_id, data)
    return TaskListDetailResponse(
        message="Task list created successfully.",
        status_code=status.HTTP_201_CREATED,
        data=TaskListResponse.model_validate(task_list),
    )


@router.get("/{project_id}/tasklists/{task_list_id}", response_model=TaskListDetailResponse)
async def get_task_list(
    project_id: int, task_list_id: int, actor: CurrentActor, hierarchy: Reader
):
    task_list = await hierarchy.get_task_list(actor, project_id, task_list_id)
    return TaskListDetailResponse(
        message="Task list retrieved successfully.",
        data=TaskListResponse.model_validate(task_list),
    )


@router.put("/{project_id}/tasklists/{task_list_id}", response_model=TaskListDetailResponse)
async def update_task_list(
    project_id: int,
    task_list_id: int,
    data: TaskListUpdate,
    actor: CurrentActor,
    hierarchy: Writer,
):
    task_list = await hierarchy.update_task_list(actor, project_id, task_list_id, data)
    return TaskListDetailResponse(
        message="Task list updated successfully.",
        data=TaskListResponse.model_validate(task_list),
    )


@router.delete("/{project_id}/tasklists/{task_list_id}", response_model=ApiResponse)
async def delete_task_list(
    project_id: int, task_list_id: int, actor: CurrentActor, hierarchy: Writer
):
    """Soft delete the list together with its tasks, subtasks and their documents"""
    await hierarchy.delete_task_list(actor, project_id, task_list_id)
    return ApiResponse(message="Task list and its tasks soft-deleted successfully.")
