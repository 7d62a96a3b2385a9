"""In-memory invite repository for testing."""

from datetime import datetime
from typing import Optional

from roster.domain.error import ConflictError
from roster.domain.model.invite import Invite
from roster.domain.repository.invite import InviteRepository
from roster.domain.value import InviteId, InviteToken, OrganizationId


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing.

    Remembers every token it has stored, including those of deleted invites.
    """

    def __init__(self) -> None:
        self._invites: dict[InviteId, Invite] = {}
        self._tokens: set[str] = set()

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID."""
        return self._invites.get(invite_id)

    async def find_by_token(self, token: InviteToken) -> Optional[Invite]:
        """Find an invite by its token."""
        for invite in self._invites.values():
            if invite.token == token:
                return invite
        return None

    async def token_exists(self, token: InviteToken) -> bool:
        return token.root in self._tokens

    async def find_active_by_email(
        self, organization_id: OrganizationId, email: str, now: datetime
    ) -> list[Invite]:
        return [
            invite
            for invite in self._invites.values()
            if invite.organization_id == organization_id
            and invite.email == email
            and invite.is_active(now)
        ]

    async def list_by_organization(
        self,
        organization_id: OrganizationId,
        used: bool | None = None,
        active_at: datetime | None = None,
    ) -> list[Invite]:
        """List invites of an organization, newest first."""
        matches = [
            invite
            for invite in self._invites.values()
            if invite.organization_id == organization_id
            and (used is None or invite.used == used)
            and (active_at is None or not invite.is_expired(active_at))
        ]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches

    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Raises:
            ConflictError: If another invite already holds the token
        """
        holder = await self.find_by_token(invite.token)
        if holder and holder.id != invite.id:
            raise ConflictError("Duplicate invite token")

        self._invites[invite.id] = invite
        self._tokens.add(invite.token.root)
        return invite

    async def mark_used(self, invite_id: InviteId, used_at: datetime) -> bool:
        invite = self._invites.get(invite_id)
        if not invite or invite.used:
            return False
        self._invites[invite_id] = invite.model_copy(
            update={"used": True, "used_at": used_at}
        )
        return True

    async def mark_used_by_token(self, token: InviteToken, used_at: datetime) -> bool:
        invite = await self.find_by_token(token)
        if not invite:
            return False
        return await self.mark_used(invite.id, used_at)

    async def delete(self, invite_id: InviteId) -> bool:
        invite = self._invites.get(invite_id)
        if not invite or invite.used:
            return False
        del self._invites[invite_id]
        return True
