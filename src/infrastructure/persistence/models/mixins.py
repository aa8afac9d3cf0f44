"""
SQLAlchemy mixins for common model patterns.

These mixins provide reusable column definitions to follow DRY principles
and ensure consistency across all models.

Audit Levels:
    - TimestampMixin: Just timestamps (created_at, updated_at)
    - SoftDeleteMixin: Adds the is_deleted tombstone flag
    - UserAuditMixin: Adds user tracking (created_by, updated_by)
"""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import expression, func


class IntIdMixin:
    """
    Mixin for models using an autoincrement integer primary key.

    Usage:
        class MyModel(IntIdMixin, Base):
            __tablename__ = "my_model"
    """

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class CompanyMixin:
    """
    Mixin for company-scoped (multi-tenant) models.

    Provides:
        - company_id: Foreign key to company table
    """

    @declared_attr
    def company_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer,
            ForeignKey("company.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class TimestampMixin:
    """
    Mixin for timestamp tracking.

    Provides:
        - created_at: Timestamp set on creation (server-side default)
        - updated_at: Timestamp updated on modification (server-side default + onupdate)
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class SoftDeleteMixin:
    """
    Soft delete support (tombstone pattern).

    Provides:
        - is_deleted: set instead of removing the row

    Usage:
        # Soft delete: update(Model).where(...).values(is_deleted=True)
        # Query active only: .where(Model.is_deleted.is_(False))
    """

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(
            Boolean,
            default=False,
            server_default=expression.false(),
            nullable=False,
            index=True,
        )


class UserAuditMixin(TimestampMixin, SoftDeleteMixin):
    """
    User audit tracking (who did what).

    Provides:
        - created_at, updated_at, is_deleted
        - created_by: User ID who created the record
        - updated_by: User ID who last updated the record

    Note: User IDs are nullable to support system-generated records (seed scripts)
    """

    @declared_attr
    def created_by(cls) -> Mapped[int | None]:
        return mapped_column(
            Integer,
            ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )

    @declared_attr
    def updated_by(cls) -> Mapped[int | None]:
        return mapped_column(
            Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
        )


class AuditedCompanyModel(IntIdMixin, CompanyMixin, UserAuditMixin):
    """
    Company-scoped model with full user audit tracking.

    Combines:
        - IntIdMixin: integer primary key
        - CompanyMixin: Company foreign key
        - UserAuditMixin: Timestamps + user tracking + soft delete

    This is the most common pattern for Workboard hierarchy models.
    """

    __abstract__ = True
