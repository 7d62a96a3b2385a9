"""PostgreSQL repository implementations."""

from roster.persistence.repository.invite import PostgresInviteRepository
from roster.persistence.repository.organization import PostgresOrganizationRepository
from roster.persistence.repository.profile import PostgresProfileRepository

__all__ = [
    "PostgresInviteRepository",
    "PostgresOrganizationRepository",
    "PostgresProfileRepository",
]
