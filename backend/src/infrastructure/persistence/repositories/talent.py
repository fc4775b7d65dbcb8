"""
Talent Repository Implementation
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import Talent
from application.repositories.interfaces import ITalentRepository
from infrastructure.persistence.models.talent import TalentModel
from core.clock import ensure_utc, utc_now
from core.exceptions import ResourceNotFoundException


class SQLAlchemyTalentRepository(ITalentRepository):
    """SQLAlchemy implementation of talent profile repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, talent_id: UUID) -> Optional[Talent]:
        model = await self.session.get(TalentModel, talent_id)
        return self._to_entity(model) if model else None

    async def get_by_user_id(self, user_id: UUID) -> Optional[Talent]:
        result = await self.session.execute(
            select(TalentModel).where(TalentModel.user_id == user_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, talent: Talent) -> Talent:
        now = utc_now()
        model = TalentModel(
            id=talent.id,
            user_id=talent.user_id,
            name=talent.name,
            phone=talent.phone,
            experience=talent.experience,
            skills=list(talent.skills),
            resume_url=talent.resume_url,
            created_at=talent.created_at or now,
            updated_at=talent.updated_at or now,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def update_profile(
        self,
        talent_id: UUID,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        experience: Optional[int] = None,
        skills: Optional[List[str]] = None,
    ) -> Talent:
        """Only supplied fields are written"""
        model = await self.session.get(TalentModel, talent_id)
        if not model:
            raise ResourceNotFoundException("Talent", str(talent_id))

        if name:
            model.name = name
        if phone:
            model.phone = phone
        if experience is not None:
            model.experience = experience
        if skills is not None:
            model.skills = list(skills)
        model.updated_at = utc_now()

        await self.session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: TalentModel) -> Talent:
        return Talent(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            phone=model.phone,
            experience=model.experience,
            skills=list(model.skills or []),
            resume_url=model.resume_url,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
