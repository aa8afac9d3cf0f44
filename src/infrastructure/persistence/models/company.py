from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (IntIdMixin,
                                                          TimestampMixin)


class Company(IntIdMixin, TimestampMixin, Base):
    """
    Root tenant entity.

    Note: Company does not have a company_id since it is the root of the hierarchy.
    """

    __tablename__ = "company"

    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
