"""PostgreSQL implementation of Invite repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roster.domain.model import Invite
from roster.domain.repository import InviteRepository
from roster.domain.value import InviteId, InviteToken, OrganizationId
from roster.persistence.database import transaction
from roster.persistence.mappers import invite_to_dict, row_to_invite
from roster.persistence.tables import invites_table


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository.

    Every call runs in its own transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID.

        Args:
            invite_id: Invite ID to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.id == invite_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def find_by_token(self, token: InviteToken) -> Optional[Invite]:
        """Find an invite by its token.

        Args:
            token: Invite token to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.token == token.root)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def token_exists(self, token: InviteToken) -> bool:
        """Check whether any stored invite carries this token."""
        stmt = select(invites_table.c.id).where(invites_table.c.token == token.root)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            return result.first() is not None

    async def find_active_by_email(
        self, organization_id: OrganizationId, email: str, now: datetime
    ) -> list[Invite]:
        """Find unused, unexpired invites for an email in an organization."""
        stmt = select(invites_table).where(
            and_(
                invites_table.c.organization_id == organization_id,
                invites_table.c.email == email,
                invites_table.c.used.is_(False),
                invites_table.c.expires_at >= now,
            )
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invite(dict(row)) for row in rows]

    async def list_by_organization(
        self,
        organization_id: OrganizationId,
        used: bool | None = None,
        active_at: datetime | None = None,
    ) -> list[Invite]:
        """List invites of an organization, newest first.

        Args:
            organization_id: Owning organization
            used: Optional filter on the used flag
            active_at: If given, only invites not yet expired at this time

        Returns:
            List of invites
        """
        stmt = select(invites_table).where(
            invites_table.c.organization_id == organization_id
        )
        if used is not None:
            stmt = stmt.where(invites_table.c.used.is_(used))
        if active_at is not None:
            stmt = stmt.where(invites_table.c.expires_at >= active_at)
        stmt = stmt.order_by(invites_table.c.created_at.desc())

        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invite(dict(row)) for row in rows]

    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Args:
            invite: Invite to save

        Returns:
            Saved invite

        Raises:
            ConflictError: If another invite already holds the token
        """
        invite_dict = invite_to_dict(invite)

        async with transaction(self.session_factory) as session:
            existing = await session.execute(
                select(invites_table.c.id).where(invites_table.c.id == invite.id)
            )
            if existing.first():
                stmt = (
                    update(invites_table)
                    .where(invites_table.c.id == invite.id)
                    .values(**invite_dict)
                )
            else:
                stmt = insert(invites_table).values(**invite_dict)
            await session.execute(stmt)

        return invite

    async def mark_used(self, invite_id: InviteId, used_at: datetime) -> bool:
        """Set used=True and used_at on an unused invite.

        Returns:
            True if a row was updated
        """
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.id == invite_id,
                    invites_table.c.used.is_(False),
                )
            )
            .values(used=True, used_at=used_at)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            return result.rowcount > 0

    async def mark_used_by_token(self, token: InviteToken, used_at: datetime) -> bool:
        """Set used=True and used_at on the unused invite holding the token.

        Returns:
            True if a row was updated
        """
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.token == token.root,
                    invites_table.c.used.is_(False),
                )
            )
            .values(used=True, used_at=used_at)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            return result.rowcount > 0

    async def delete(self, invite_id: InviteId) -> bool:
        """Hard delete a pending invite. Used invites are never deleted.

        Returns:
            True if a row was deleted, False if nothing matched
        """
        stmt = delete(invites_table).where(
            invites_table.c.id == invite_id, invites_table.c.used.is_(False)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            return result.rowcount > 0
