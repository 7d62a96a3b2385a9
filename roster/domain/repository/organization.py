"""Organization repository interface."""

from abc import ABC, abstractmethod

from roster.domain.model.organization import Organization
from roster.domain.value import OrganizationId


class OrganizationRepository(ABC):
    """Read access to organizations."""

    @abstractmethod
    async def find_by_id(self, organization_id: OrganizationId) -> Organization | None:
        """Find an organization by ID.

        Args:
            organization_id: The organization's unique identifier

        Returns:
            The organization if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, organization: Organization) -> Organization:
        """Save an organization (create or update)."""
        pass
