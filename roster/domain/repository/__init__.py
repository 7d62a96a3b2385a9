"""Repository interfaces for Roster domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from roster.domain.repository.invite import InviteRepository
from roster.domain.repository.organization import OrganizationRepository
from roster.domain.repository.profile import ProfileRepository

__all__ = [
    "InviteRepository",
    "OrganizationRepository",
    "ProfileRepository",
]
