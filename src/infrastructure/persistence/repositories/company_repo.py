from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.company import Company
from src.infrastructure.persistence.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """Repository for Company lookups"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Company)

    async def get_by_name(self, name: str) -> Company | None:
        result = await self.db.execute(select(Company).where(Company.name == name))
        return result.scalar_one_or_none()

    async def exists(self, company_id: int) -> bool:
        result = await self.db.execute(select(Company.id).where(Company.id == company_id))
        return result.first() is not None
