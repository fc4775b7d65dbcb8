"""
Create the PostgreSQL database named in DATABASE_URL, then its tables

Run from backend/src:
    python ../../scripts/create_db.py
"""
import asyncio
import os
import sys

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine

# Add backend to path
sys.path.append(os.getcwd())

from core.config import settings
from core.database import close_db, init_db


async def create_database():
    url = make_url(settings.DATABASE_URL)
    target_db = url.database
    # Connect to the maintenance database to create the target one
    base_url = url.set(database="postgres")

    print(f"Connecting to {base_url.render_as_string(hide_password=True)} to create {target_db}...")
    engine = create_async_engine(base_url, isolation_level="AUTOCOMMIT")

    try:
        async with engine.connect() as conn:
            result = await conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"), {"name": target_db}
            )
            if result.scalar():
                print(f"Database {target_db} already exists.")
            else:
                print(f"Creating database {target_db}...")
                await conn.execute(text(f'CREATE DATABASE "{target_db}"'))
                print(f"Database {target_db} created successfully!")
    finally:
        await engine.dispose()

    await init_db()
    await close_db()
    print("Tables created.")


if __name__ == "__main__":
    asyncio.run(create_database())
