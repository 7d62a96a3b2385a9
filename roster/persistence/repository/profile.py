"""PostgreSQL implementation of Profile repository."""

from collections.abc import Mapping
from typing import Any, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roster.domain.model import Profile
from roster.domain.repository import ProfileRepository
from roster.domain.value import OrganizationId, ProfileId, Role
from roster.persistence.database import transaction
from roster.persistence.mappers import (
    profile_fields_to_columns,
    profile_to_dict,
    row_to_profile,
)
from roster.persistence.tables import profiles_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a profile by its identity id."""
        stmt = select(profiles_table).where(profiles_table.c.id == profile_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def insert(self, profile: Profile) -> Profile:
        """Insert a new profile.

        Raises:
            ConflictError: If a profile already exists for this identity
        """
        async with transaction(self.session_factory) as session:
            await session.execute(
                insert(profiles_table).values(**profile_to_dict(profile))
            )
        return profile

    async def update(
        self, profile_id: ProfileId, fields: Mapping[str, Any]
    ) -> Optional[Profile]:
        """Update selected fields of a profile.

        Returns:
            The updated profile, None if no profile exists
        """
        stmt = (
            update(profiles_table)
            .where(profiles_table.c.id == profile_id)
            .values(**profile_fields_to_columns(dict(fields)))
            .returning(*profiles_table.c)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def list_by_organization(
        self,
        organization_id: OrganizationId,
        role: Role | None = None,
        email: str | None = None,
        is_active: bool | None = None,
    ) -> list[Profile]:
        """List profiles of an organization with optional filters."""
        stmt = select(profiles_table).where(
            profiles_table.c.organization_id == organization_id
        )
        if role is not None:
            stmt = stmt.where(profiles_table.c.role == role.value)
        if email is not None:
            stmt = stmt.where(func.lower(profiles_table.c.email) == email.lower())
        if is_active is not None:
            stmt = stmt.where(profiles_table.c.is_active.is_(is_active))
        stmt = stmt.order_by(profiles_table.c.created_at)

        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_profile(dict(row)) for row in rows]
