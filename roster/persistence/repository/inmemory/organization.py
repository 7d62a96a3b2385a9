"""In-memory organization repository for testing."""

from typing import Optional

from roster.domain.model.organization import Organization
from roster.domain.repository.organization import OrganizationRepository
from roster.domain.value import OrganizationId


class InMemoryOrganizationRepository(OrganizationRepository):
    """In-memory implementation of OrganizationRepository for testing."""

    def __init__(self) -> None:
        self._organizations: dict[OrganizationId, Organization] = {}

    async def find_by_id(
        self, organization_id: OrganizationId
    ) -> Optional[Organization]:
        return self._organizations.get(organization_id)

    async def save(self, organization: Organization) -> Organization:
        self._organizations[organization.id] = organization
        return organization
