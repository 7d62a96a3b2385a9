"""Invite repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from roster.domain.model.invite import Invite
from roster.domain.value import InviteId, InviteToken, OrganizationId


class InviteRepository(ABC):
    """Repository for Invite entity.

    Defines the contract for invite persistence operations.
    Implementations live in the infrastructure layer and must give
    read-after-write consistency for lookups by token.

    Raises:
        PersistenceError: From any method on a transient storage failure
    """

    @abstractmethod
    async def find_by_id(self, invite_id: InviteId) -> Invite | None:
        """Find an invite by ID.

        Args:
            invite_id: The invite's unique identifier

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InviteToken) -> Invite | None:
        """Find an invite by token.

        Used when the invitee opens the signup link and during redemption.

        Args:
            token: The invite token

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def token_exists(self, token: InviteToken) -> bool:
        """Check whether any stored invite carries this token."""
        pass

    @abstractmethod
    async def find_active_by_email(
        self, organization_id: OrganizationId, email: str, now: datetime
    ) -> list[Invite]:
        """Find unused, unexpired invites for an email in an organization.

        Args:
            organization_id: Owning organization
            email: Normalized invitee email
            now: Reference time for expiry

        Returns:
            Matching invites (normally zero or one)
        """
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Args:
            invite: The invite to save

        Returns:
            The saved invite

        Raises:
            ConflictError: If another invite already holds the token
        """
        pass

    @abstractmethod
    async def mark_used(self, invite_id: InviteId, used_at: datetime) -> bool:
        """Set used=True and used_at on an unused invite.

        Returns:
            True if a row was updated
        """
        pass

    @abstractmethod
    async def mark_used_by_token(self, token: InviteToken, used_at: datetime) -> bool:
        """Set used=True and used_at on the unused invite holding the token.

        Returns:
            True if a row was updated
        """
        pass

    @abstractmethod
    async def delete(self, invite_id: InviteId) -> bool:
        """Hard delete a pending invite. Used invites are never deleted.

        Returns:
            True if a row was deleted, False if nothing matched
        """
        pass
