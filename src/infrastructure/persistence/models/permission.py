from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import CompanyMixin, IntIdMixin


class Permission(IntIdMixin, Base):
    """
    Named capability (e.g., 'project:create', 'task:read').

    Note: Permissions are rarely modified, so no timestamps needed.
    """

    __tablename__ = "permission"

    name: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    module_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )  # Feature module the permission belongs to
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class RolePermission(IntIdMixin, CompanyMixin, Base):
    """
    Many-to-many: roles ←→ permissions, per company.

    The same role can carry different permissions in different companies.
    """

    __tablename__ = "role_permission"

    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "role_id", "company_id", "permission_id", name="uq_role_permission"
        ),
        Index("ix_role_permission_lookup", "role_id", "company_id"),
    )
