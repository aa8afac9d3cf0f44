from datetime import date
from decimal import Decimal

from sqlalchemy import (Boolean, Date, ForeignKey, Index, Integer, Numeric,
                        String, Text)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import AuditedCompanyModel


class TaskList(AuditedCompanyModel, Base):
    """Ordered bucket of tasks inside a project."""

    __tablename__ = "task_list"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    list_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Task(AuditedCompanyModel, Base):
    """
    Task or subtask.

    A row with parent_task_id set is a subtask. Subtasks copy company_id,
    project_id and task_list_id from their parent at creation and never
    nest further: the tree is at most two levels deep.
    """

    __tablename__ = "task"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False
    )
    task_list_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("task_list.id", ondelete="SET NULL"), nullable=True
    )
    parent_task_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("task.id", ondelete="CASCADE"), nullable=True
    )
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("task_status.id"), nullable=True
    )
    priority_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("task_priority.id"), nullable=True
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    estimated_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def is_subtask(self) -> bool:
        return self.parent_task_id is not None

    __table_args__ = (
        Index("ix_task_list_parent", "task_list_id", "parent_task_id"),
        Index("ix_task_parent", "parent_task_id"),
        Index("ix_task_project", "project_id"),
    )
