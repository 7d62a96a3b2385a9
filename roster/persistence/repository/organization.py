"""PostgreSQL implementation of Organization repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roster.domain.model import Organization
from roster.domain.repository import OrganizationRepository
from roster.domain.value import OrganizationId
from roster.persistence.database import transaction
from roster.persistence.mappers import organization_to_dict, row_to_organization
from roster.persistence.tables import organizations_table


class PostgresOrganizationRepository(OrganizationRepository):
    """PostgreSQL implementation of OrganizationRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def find_by_id(
        self, organization_id: OrganizationId
    ) -> Optional[Organization]:
        """Find an organization by ID."""
        stmt = select(organizations_table).where(
            organizations_table.c.id == organization_id
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_organization(dict(row)) if row else None

    async def save(self, organization: Organization) -> Organization:
        """Insert or rename an organization."""
        values = organization_to_dict(organization)
        stmt = (
            insert(organizations_table)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[organizations_table.c.id],
                set_={"name": values["name"]},
            )
        )
        async with transaction(self.session_factory) as session:
            await session.execute(stmt)
        return organization
