"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from domain.entities import Application, Chat, Company, Job, Talent, User
from domain.value_objects import ApplicationStatus

from .projections import ApplicationView


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user"""
        pass


class ITalentRepository(ABC):
    """Talent profile repository interface"""

    @abstractmethod
    async def get_by_id(self, talent_id: UUID) -> Optional[Talent]:
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[Talent]:
        pass

    @abstractmethod
    async def create(self, talent: Talent) -> Talent:
        pass

    @abstractmethod
    async def update_profile(
        self,
        talent_id: UUID,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        experience: Optional[int] = None,
        skills: Optional[List[str]] = None,
    ) -> Talent:
        """Refresh the profile from the latest application form"""
        pass


class ICompanyRepository(ABC):
    """Company profile repository interface"""

    @abstractmethod
    async def get_by_id(self, company_id: UUID) -> Optional[Company]:
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[Company]:
        pass

    @abstractmethod
    async def create(self, company: Company) -> Company:
        pass


class IJobRepository(ABC):
    """Job posting repository interface"""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        pass

    @abstractmethod
    async def create(self, job: Job) -> Job:
        pass

    @abstractmethod
    async def adjust_applications_count(self, job_id: UUID, delta: int) -> None:
        """Atomically add delta to the counter, never below zero"""
        pass


class IApplicationRepository(ABC):
    """Application repository interface

    Write methods work on the Application entity. Query methods return
    read-side projections and never expose ORM rows.
    """

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Get application by ID"""
        pass

    @abstractmethod
    async def get_by_talent_and_job(self, talent_id: UUID, job_id: UUID) -> Optional[Application]:
        """Get the application a talent holds for a job, if any"""
        pass

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """Insert application with its history.

        Raises DuplicateResourceException when the (talent, job) pair exists.
        """
        pass

    @abstractmethod
    async def update(self, application: Application) -> Application:
        """Persist changes guarded by the version column.

        Raises ResourceNotFoundException when the row is gone and
        ConcurrencyConflictException when the version moved.
        """
        pass

    @abstractmethod
    async def delete(self, application_id: UUID) -> bool:
        """Delete by id. Returns False if it was already gone."""
        pass

    @abstractmethod
    async def count_resume_references(self, resume_url: str, exclude_id: Optional[UUID] = None) -> int:
        """Applications other than exclude_id whose resume_url is still live"""
        pass

    @abstractmethod
    async def find_older_than(
        self,
        statuses: Iterable[ApplicationStatus],
        timestamp_field: str,
        cutoff: datetime,
    ) -> List[Application]:
        """Applications in statuses whose timestamp_field is at or before cutoff"""
        pass

    @abstractmethod
    async def count_older_than(
        self,
        statuses: Iterable[ApplicationStatus],
        timestamp_field: str,
        cutoff: datetime,
    ) -> int:
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[ApplicationStatus, int]:
        pass

    @abstractmethod
    async def get_view(self, application_id: UUID) -> Optional[ApplicationView]:
        """Hydrated detail view"""
        pass

    @abstractmethod
    async def list_for_talent(
        self,
        talent_id: UUID,
        status: Optional[ApplicationStatus] = None,
    ) -> List[ApplicationView]:
        pass

    @abstractmethod
    async def list_for_company(
        self,
        company_id: UUID,
        status: Optional[ApplicationStatus] = None,
        job_id: Optional[UUID] = None,
    ) -> List[ApplicationView]:
        pass

    @abstractmethod
    async def count_by_status_for_talent(self, talent_id: UUID) -> Dict[ApplicationStatus, int]:
        pass

    @abstractmethod
    async def count_by_status_for_company(self, company_id: UUID) -> Dict[ApplicationStatus, int]:
        pass


class IChatRepository(ABC):
    """Chat repository interface"""

    @abstractmethod
    async def get_by_application_id(self, application_id: UUID) -> Optional[Chat]:
        pass

    @abstractmethod
    async def create_if_absent(self, chat: Chat) -> Chat:
        """Insert chat, or return the existing one for the same application"""
        pass
