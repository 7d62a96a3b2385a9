"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from roster.config import Settings
from roster.domain.repository import (
    InviteRepository,
    OrganizationRepository,
    ProfileRepository,
)
from roster.persistence.database import create_engine, create_session_factory
from roster.persistence.repository import (
    PostgresInviteRepository,
    PostgresOrganizationRepository,
    PostgresProfileRepository,
)
from roster.util.di.base import ProviderBase
from roster.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Repositories are APP-scoped and open a short transaction per call, so
    each step of a multi-step operation commits on its own.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_invite_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> InviteRepository:
        """Provide Invite repository."""
        return PostgresInviteRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_profile_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> ProfileRepository:
        """Provide Profile repository."""
        return PostgresProfileRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_organization_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> OrganizationRepository:
        """Provide Organization repository."""
        return PostgresOrganizationRepository(session_factory)
