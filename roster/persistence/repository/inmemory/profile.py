"""In-memory profile repository for testing."""

from collections.abc import Mapping
from typing import Any, Optional

from roster.domain.error import ConflictError
from roster.domain.model.profile import Profile
from roster.domain.repository.profile import ProfileRepository
from roster.domain.value import OrganizationId, ProfileId, Role


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing."""

    def __init__(self) -> None:
        self._profiles: dict[ProfileId, Profile] = {}

    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a profile by its identity id."""
        return self._profiles.get(profile_id)

    async def insert(self, profile: Profile) -> Profile:
        """Insert a new profile.

        Raises:
            ConflictError: If a profile already exists for this identity
        """
        if profile.id in self._profiles:
            raise ConflictError(f"Profile {profile.id} already exists")
        self._profiles[profile.id] = profile
        return profile

    async def update(
        self, profile_id: ProfileId, fields: Mapping[str, Any]
    ) -> Optional[Profile]:
        existing = self._profiles.get(profile_id)
        if not existing:
            return None
        updated = existing.model_copy(update=dict(fields))
        self._profiles[profile_id] = updated
        return updated

    async def list_by_organization(
        self,
        organization_id: OrganizationId,
        role: Role | None = None,
        email: str | None = None,
        is_active: bool | None = None,
    ) -> list[Profile]:
        """List profiles of an organization with optional filters."""
        return [
            profile
            for profile in self._profiles.values()
            if profile.organization_id == organization_id
            and (role is None or profile.role == role)
            and (email is None or (profile.email or "").lower() == email.lower())
            and (is_active is None or profile.is_active == is_active)
        ]
