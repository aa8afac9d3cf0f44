from datetime import datetime

from sqlalchemy import (Boolean, DateTime, ForeignKey, Index, Integer, String,
                        func)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (IntIdMixin,
                                                          TimestampMixin)


class User(IntIdMixin, TimestampMixin, Base):
    """
    Login credential and session state for one person.

    refresh_token holds either the live refresh token or a pending
    password-reset token; writing one replaces the other.
    """

    __tablename__ = "user"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )

    role_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("role.id", ondelete="SET NULL"), nullable=True
    )
    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="SET NULL"), nullable=True, index=True
    )  # Null for platform-level accounts

    refresh_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    refresh_token_expiry_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


# Emails are unique regardless of case
Index("uq_user_email_lower", func.lower(User.email), unique=True)
