"""
Async Database Configuration
SQLAlchemy 2.0 with async support
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from .config import settings


def build_engine(database_url: str, debug: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend"""
    engine_args = {
        "echo": debug,
        "pool_pre_ping": True,
    }

    is_sqlite = make_url(database_url).get_backend_name() == "sqlite"

    if debug or is_sqlite:
        engine_args["poolclass"] = NullPool
    else:
        # Production settings - use default async pool but configure it
        engine_args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
        })

    async_engine = create_async_engine(database_url, **engine_args)

    if is_sqlite:
        # SQLite only honours ON DELETE CASCADE with the pragma enabled
        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return async_engine


def build_session_factory(async_engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to an engine"""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# Create async engine
engine: AsyncEngine = build_engine(settings.DATABASE_URL, settings.DEBUG)

# Session factory
AsyncSessionLocal = build_session_factory(engine)

# Base class for ORM models
Base = declarative_base()


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions

    Usage:
        async with get_db_session() as session:
            result = await session.execute(query)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions

    Usage:
        @router.get("/applications")
        async def list_applications(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_db_session() as session:
        yield session


async def init_db():
    """Initialize database (create tables)"""
    # Register every ORM model on the metadata before create_all
    import infrastructure.persistence.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()


async def health_check() -> bool:
    """Database health check"""
    try:
        async with get_db_session() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
