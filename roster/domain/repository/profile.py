"""Profile repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from roster.domain.model.profile import Profile
from roster.domain.value import OrganizationId, ProfileId, Role


class ProfileRepository(ABC):
    """Repository for Profile entity.

    The identity provider may write to the same store concurrently, so
    callers must not assume they are the only writer.
    """

    @abstractmethod
    async def find_by_id(self, profile_id: ProfileId) -> Profile | None:
        """Find a profile by its identity id.

        Args:
            profile_id: Identity id assigned by the identity provider

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, profile: Profile) -> Profile:
        """Insert a new profile.

        Args:
            profile: Profile to insert

        Returns:
            The inserted profile

        Raises:
            ConflictError: If a profile already exists for this identity
        """
        pass

    @abstractmethod
    async def update(
        self, profile_id: ProfileId, fields: Mapping[str, Any]
    ) -> Profile | None:
        """Update selected fields of a profile.

        Args:
            profile_id: Identity id of the profile
            fields: Field names and new values

        Returns:
            The updated profile, None if no profile exists
        """
        pass

    @abstractmethod
    async def list_by_organization(
        self,
        organization_id: OrganizationId,
        role: Role | None = None,
        email: str | None = None,
        is_active: bool | None = None,
    ) -> list[Profile]:
        """List profiles of an organization with optional filters.

        Args:
            organization_id: Organization to list
            role: Optional role filter
            email: Optional email filter, matched case-insensitively
            is_active: Optional active filter

        Returns:
            Matching profiles
        """
        pass
