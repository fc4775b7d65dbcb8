"""
Company Repository Implementation
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import Company
from application.repositories.interfaces import ICompanyRepository
from infrastructure.persistence.models.company import CompanyModel
from core.clock import ensure_utc, utc_now


class SQLAlchemyCompanyRepository(ICompanyRepository):
    """SQLAlchemy implementation of company profile repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, company_id: UUID) -> Optional[Company]:
        model = await self.session.get(CompanyModel, company_id)
        return self._to_entity(model) if model else None

    async def get_by_user_id(self, user_id: UUID) -> Optional[Company]:
        result = await self.session.execute(
            select(CompanyModel).where(CompanyModel.user_id == user_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, company: Company) -> Company:
        now = utc_now()
        model = CompanyModel(
            id=company.id,
            user_id=company.user_id,
            company_name=company.company_name,
            created_at=company.created_at or now,
            updated_at=company.updated_at or now,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: CompanyModel) -> Company:
        return Company(
            id=model.id,
            user_id=model.user_id,
            company_name=model.company_name,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
