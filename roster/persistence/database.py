"""Database connection and session management.

Provides async database engine and session factory for PostgreSQL.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from roster.config import Settings
from roster.domain.error import ConflictError, PersistenceError


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return create_async_engine(
        settings.database.url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flushing for better control
    )


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Run a unit of work in its own short transaction.

    Commits on success. Driver errors are translated to domain errors:
    integrity violations become ConflictError, everything else
    PersistenceError.

    Args:
        session_factory: Factory for creating sessions

    Yields:
        Database session inside an open transaction
    """
    try:
        async with session_factory.begin() as session:
            yield session
    except IntegrityError as e:
        raise ConflictError(str(e.orig or e)) from e
    except SQLAlchemyError as e:
        raise PersistenceError(str(e)) from e

