from datetime import datetime

from sqlalchemy import (BigInteger, CheckConstraint, DateTime, ForeignKey,
                        Index, Integer, String)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.domain.enums import DocumentOwnerKind
from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (CompanyMixin,
                                                          IntIdMixin,
                                                          SoftDeleteMixin)


class Document(IntIdMixin, CompanyMixin, SoftDeleteMixin, Base):
    """
    File attached to a project or a task.

    owner_kind + owner_id point at the owning row; company_id is always
    copied from that owner.
    """

    __tablename__ = "document"

    owner_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)

    document_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)  # Relative blob path
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    uploaded_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_document_owner", "owner_kind", "owner_id"),
        CheckConstraint(
            f"owner_kind IN {tuple(DocumentOwnerKind.values())}",
            name="document_owner_kind_check",
        ),
    )
