"""
Seed Data Script
Populates database with demo users, profiles and jobs for local development

Run from backend/src:
    python ../../scripts/seed_data.py
"""
import asyncio
import os
import sys
from datetime import timedelta
from uuid import uuid4

# Add backend to path
sys.path.append(os.getcwd())

from core.clock import utc_now
from core.database import AsyncSessionLocal, close_db, init_db
from domain.entities import Company, Job, Talent, User
from domain.enums import UserRole
from domain.value_objects import Email
from infrastructure.persistence.repositories.company import SQLAlchemyCompanyRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.talent import SQLAlchemyTalentRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.jwt_service import JwtService


async def seed_database():
    """Seed database with test data"""
    await init_db()
    jwt_service = JwtService()

    async with AsyncSessionLocal() as session:
        users = SQLAlchemyUserRepository(session)

        if await users.get_by_email("talent@example.com"):
            print("Demo data already present, skipping.")
            return

        talent_user = await users.create(User(
            id=uuid4(), email=Email("talent@example.com"), full_name="Dewi Lestari", role=UserRole.TALENT
        ))
        company_user = await users.create(User(
            id=uuid4(), email=Email("hr@acme.example.com"), full_name="Acme HR", role=UserRole.COMPANY
        ))
        admin_user = await users.create(User(
            id=uuid4(), email=Email("admin@example.com"), full_name="Site Admin", role=UserRole.ADMIN
        ))

        talent = await SQLAlchemyTalentRepository(session).create(Talent(
            id=uuid4(),
            user_id=talent_user.id,
            name="Dewi Lestari",
            phone="+62811111111",
            experience=4,
            skills=["python", "postgresql", "fastapi"],
        ))
        company = await SQLAlchemyCompanyRepository(session).create(Company(
            id=uuid4(), user_id=company_user.id, company_name="Acme Indonesia"
        ))

        jobs = SQLAlchemyJobRepository(session)
        open_job = await jobs.create(Job(
            id=uuid4(),
            company_id=company.id,
            title="Backend Engineer",
            location="Jakarta",
            application_deadline=utc_now() + timedelta(days=30),
        ))
        closed_job = await jobs.create(Job(
            id=uuid4(),
            company_id=company.id,
            title="Data Analyst",
            location="Bandung",
            is_active=False,
        ))

        await session.commit()

    print("✅ Seeded demo data")
    print(f"   talent  {talent_user.email}  talent_id={talent.id}")
    print(f"   company {company_user.email}  company_id={company.id}")
    print(f"   admin   {admin_user.email}")
    print(f"   open job   {open_job.id} ({open_job.title})")
    print(f"   closed job {closed_job.id} ({closed_job.title})")
    print()
    print("Bearer tokens:")
    for label, user in (("talent", talent_user), ("company", company_user), ("admin", admin_user)):
        print(f"   {label}: {jwt_service.create_access_token(user.id)}")


async def main():
    try:
        await seed_database()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
