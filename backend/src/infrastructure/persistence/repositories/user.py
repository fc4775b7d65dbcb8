"""
User Repository Implementation
SQLAlchemy-based user repository
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import User
from domain.enums import UserRole
from domain.value_objects import Email
from application.repositories.interfaces import IUserRepository
from infrastructure.persistence.models.user import UserModel
from core.clock import ensure_utc, utc_now
from core.exceptions import RepositoryException


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.id == user_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.email == email.strip().lower())
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def create(self, user: User) -> User:
        """Create new user"""
        now = utc_now()
        model = UserModel(
            id=user.id,
            email=str(user.email),
            full_name=user.full_name,
            role=user.role.value,
            is_active=user.is_active,
            created_at=user.created_at or now,
            updated_at=user.updated_at or now,
        )
        self.session.add(model)
        await self.session.flush()
        logger.info(f"User created: {user.email} ({user.role.value})")
        return self._to_entity(model)

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=Email(model.email),
            full_name=model.full_name,
            role=UserRole(model.role),
            is_active=model.is_active,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
