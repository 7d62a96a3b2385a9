"""In-memory repository implementations for testing."""

from .invite import InMemoryInviteRepository
from .organization import InMemoryOrganizationRepository
from .profile import InMemoryProfileRepository

__all__ = [
    "InMemoryInviteRepository",
    "InMemoryOrganizationRepository",
    "InMemoryProfileRepository",
]
