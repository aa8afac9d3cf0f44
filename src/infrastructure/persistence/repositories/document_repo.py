from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import DocumentOwnerKind
from src.infrastructure.persistence.models.document import Document
from src.infrastructure.persistence.repositories.base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for project and task documents"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Document)

    async def list_for_owner(
        self, owner_kind: DocumentOwnerKind, owner_id: int, include_deleted: bool = False
    ) -> list[Document]:
        """Get all documents attached to one project or task"""
        query = select(Document).where(
            Document.owner_kind == owner_kind.value, Document.owner_id == owner_id
        )

        if not include_deleted:
            query = query.where(Document.is_deleted.is_(False))

        result = await self.db.execute(query.order_by(Document.uploaded_at.desc(), Document.id))
        return list(result.scalars().all())

    async def soft_delete_for_owners(
        self, owner_kind: DocumentOwnerKind, owner_ids: list[int]
    ) -> int:
        """Soft delete every active document of the given owners; returns rows affected"""
        if not owner_ids:
            return 0
        result = await self.db.execute(
            update(Document)
            .where(
                Document.owner_kind == owner_kind.value,
                Document.owner_id.in_(owner_ids),
                Document.is_deleted.is_(False),
            )
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
