from datetime import date, datetime

from sqlalchemy import (Boolean, Date, DateTime, ForeignKey, Index, Integer,
                        String, Text)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.domain.enums import ProjectStatus
from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (AuditedCompanyModel,
                                                          IntIdMixin,
                                                          SoftDeleteMixin)


class Project(AuditedCompanyModel, Base):
    """
    Top of the work hierarchy inside a company.

    Inherits from AuditedCompanyModel:
        - id, company_id
        - created_at, updated_at, is_deleted
        - created_by, updated_by
    """

    __tablename__ = "project"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=ProjectStatus.PLANNED.value
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ProjectMember(IntIdMixin, SoftDeleteMixin, Base):
    """
    Membership of a user in a project.

    Active memberships decide what an Employee can see.
    """

    __tablename__ = "project_member"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    added_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_project_member_lookup", "project_id", "user_id"),
        Index("ix_project_member_user", "user_id"),
    )
