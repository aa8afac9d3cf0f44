from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from src.presentation.api.v1.schemas.base import ApiResponse, CamelModel


class TaskListCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    list_order: int | None = None


class TaskListUpdate(CamelModel):
    """Schema for updating a task list; omitted fields stay unchanged"""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    list_order: int | None = None


class TaskListResponse(CamelModel):
    id: int
    company_id: int
    project_id: int
    name: str
    description: str | None
    list_order: int | None
    created_at: datetime


class TaskListDetailResponse(ApiResponse):
    data: TaskListResponse


class TaskListCollectionResponse(ApiResponse):
    data: list[TaskListResponse]


class TaskFields(CamelModel):
    """Editable task fields shared by create and update"""

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    status_id: int | None = None
    priority_id: int | None = None
    assigned_to: int | None = None
    start_date: date | None = None
    due_date: date | None = None
    estimated_hours: Decimal | None = Field(None, ge=0)


class TaskCreate(TaskFields):
    """
    Schema for creating a task under a task list.

    Linking ids are taken from the route; when present in the body they must agree.
    """

    title: str = Field(..., min_length=1, max_length=300)
    task_list_id: int | None = None
    project_id: int | None = None
    parent_task_id: int | None = None


class SubTaskCreate(TaskFields):
    """Schema for creating a subtask; company, project and list come from the parent"""

    title: str = Field(..., min_length=1, max_length=300)
    task_list_id: int | None = None
    parent_task_id: int | None = None


class TaskUpdate(TaskFields):
    """
    Schema for updating a task or subtask.

    task_list_id and parent_task_id are immutable; sending a different value is rejected.
    """

    task_list_id: int | None = None
    parent_task_id: int | None = None


class TaskResponse(CamelModel):
    id: int
    company_id: int
    project_id: int
    task_list_id: int | None
    parent_task_id: int | None
    assigned_to: int | None
    title: str
    description: str | None
    status_id: int | None
    priority_id: int | None
    start_date: date | None
    due_date: date | None
    estimated_hours: Decimal | None
    created_at: datetime
    created_by: int | None


class TaskDetailResponse(ApiResponse):
    data: TaskResponse


class TaskCollectionResponse(ApiResponse):
    data: list[TaskResponse]
