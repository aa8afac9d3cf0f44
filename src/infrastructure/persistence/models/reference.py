from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (IntIdMixin,
                                                          TimestampMixin)


class TaskStatus(IntIdMixin, TimestampMixin, Base):
    """Platform-wide task status. Hard-deletable only while no task uses it."""

    __tablename__ = "task_status"

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)


class TaskPriority(IntIdMixin, TimestampMixin, Base):
    """Platform-wide task priority. Hard-deletable only while no task uses it."""

    __tablename__ = "task_priority"

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
