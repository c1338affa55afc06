"""
Database configuration and session management.

This module contains SQLAlchemy engine, session configuration,
and database table creation utilities.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from vibelytics.config import settings

database_url = settings.DATABASE_URL

# SQLite gets a fresh connection per session; server databases are pinged before use.
engine = create_async_engine(
    database_url,
    echo=False,
    poolclass=NullPool if database_url.startswith("sqlite") else None,
    pool_pre_ping=not database_url.startswith("sqlite"),
)

# Create async session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for all database models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get database session.

    Yields an async database session and ensures proper cleanup.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables():
    """
    Create all database tables.

    Used for development runs; production schemas are managed by Alembic.
    """
    async with engine.begin() as conn:
        # Import all models to ensure they are registered with Base
        import vibelytics.models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)

