from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (IntIdMixin,
                                                          TimestampMixin)


class Role(IntIdMixin, TimestampMixin, Base):
    """
    Roles referenced by user.role_id.

    Ids 1-4 are the platform roles the access matrix understands
    (SuperAdmin, CompanyAdmin, Employee, DepartmentHead). company_id is
    null for those platform roles.
    """

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(100), nullable=False)  # Display name, used as the role claim
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), nullable=True, index=True
    )
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
