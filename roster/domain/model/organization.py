"""Organization entity."""

from datetime import datetime

from pydantic import Field

from roster.domain.model.common import DomainModel, utcnow
from roster.domain.value import OrganizationId


class Organization(DomainModel):
    """Organization that owns invites and profiles."""

    id: OrganizationId
    name: str
    created_at: datetime = Field(default_factory=utcnow)
