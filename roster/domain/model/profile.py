"""Profile entity.

The organization-scoped membership record, linked 1:1 to an identity held by
the external identity provider. The identity provider may create a skeletal
profile (no organization, no role) on its own when an identity is created.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from roster.domain.model.common import DomainModel, utcnow
from roster.domain.value import OrganizationId, ProfileId, Role


class Profile(DomainModel):
    """Organization membership profile.

    ``id`` equals the identity id assigned by the identity provider.
    """

    id: ProfileId
    organization_id: Optional[OrganizationId] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_skeletal(self) -> bool:
        """Created by the identity provider and not yet linked to an organization."""
        return self.organization_id is None or self.role is None
