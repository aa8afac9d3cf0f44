from datetime import date, datetime

from pydantic import Field

from src.domain.enums import ProjectStatus
from src.presentation.api.v1.schemas.base import ApiResponse, CamelModel


class ProjectCreate(CamelModel):
    """
    Schema for creating a project.

    company_id defaults to the caller's company; SuperAdmins must name one.
    """

    name: str = Field(..., min_length=1, max_length=200)
    code: str | None = Field(None, max_length=50)
    description: str | None = None
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    company_id: int | None = None


class ProjectUpdate(CamelModel):
    """Schema for updating a project; omitted fields stay unchanged"""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None


class ProjectResponse(CamelModel):
    id: int
    company_id: int
    name: str
    code: str | None
    description: str | None
    status: str
    start_date: date | None
    end_date: date | None
    is_active: bool
    created_at: datetime
    created_by: int | None


class ProjectDetailResponse(ApiResponse):
    data: ProjectResponse


class ProjectListResponse(ApiResponse):
    data: list[ProjectResponse]


class ProjectMemberCreate(CamelModel):
    user_id: int


class ProjectMemberResponse(CamelModel):
    id: int
    project_id: int
    user_id: int
    added_by: int | None
    joined_at: datetime


class ProjectMemberDetailResponse(ApiResponse):
    data: ProjectMemberResponse


class ProjectMemberListResponse(ApiResponse):
    data: list[ProjectMemberResponse]


class DocumentResponse(CamelModel):
    """Schema for an attached project or task document"""

    id: int
    owner_kind: str
    owner_id: int
    company_id: int
    document_name: str
    file_path: str
    file_size: int
    content_type: str | None
    uploaded_by: int | None
    uploaded_at: datetime


class DocumentDetailResponse(ApiResponse):
    data: DocumentResponse
