"""Profile domain service."""

import logfire

from roster.domain.error import AuthorizationError, NotFoundError
from roster.domain.model.profile import Profile
from roster.domain.repository import ProfileRepository
from roster.domain.value import OrganizationId, ProfileId, Requester

from .base import Service


class ProfileService(Service):
    """Domain service for profile lookups."""

    def __init__(self, profile_repository: ProfileRepository) -> None:
        """Initialize profile service.

        Args:
            profile_repository: Profile repository
        """
        self.profile_repository = profile_repository

    async def get_by_id(self, profile_id: ProfileId) -> Profile:
        """Get profile by ID.

        Args:
            profile_id: Profile (identity) ID

        Returns:
            The profile

        Raises:
            NotFoundError: If no profile exists
        """
        profile = await self.profile_repository.find_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile", str(profile_id))
        return profile

    async def resolve_requester(self, profile_id: ProfileId) -> Requester:
        """Resolve the caller of a lifecycle operation.

        Args:
            profile_id: Identity id of the caller

        Returns:
            Requester with organization and role

        Raises:
            AuthorizationError: If the caller has no usable profile
        """
        with logfire.span(
            "profile_service.resolve_requester", profile_id=str(profile_id)
        ):
            profile = await self.profile_repository.find_by_id(profile_id)
            if not profile:
                logfire.warn("Requester has no profile", profile_id=str(profile_id))
                raise AuthorizationError("Not authenticated. Please sign in again.")
            if not profile.is_active:
                logfire.warn("Requester is inactive", profile_id=str(profile_id))
                raise AuthorizationError("Your account has been deactivated")
            if profile.organization_id is None or profile.role is None:
                logfire.warn(
                    "Requester not assigned to an organization",
                    profile_id=str(profile_id),
                )
                raise AuthorizationError("User not assigned to an organization")

            return Requester(
                profile_id=profile.id,
                organization_id=profile.organization_id,
                role=profile.role,
            )

    async def find_member(
        self, organization_id: OrganizationId, email: str
    ) -> Profile | None:
        """Find the organization's profile for an email, if any.

        Args:
            organization_id: Organization
            email: Normalized email

        Returns:
            The profile if one exists, None otherwise
        """
        members = await self.profile_repository.list_by_organization(
            organization_id, email=email
        )
        return members[0] if members else None

    async def member_emails(self, organization_id: OrganizationId) -> set[str]:
        """Normalized emails of every profile in the organization."""
        members = await self.profile_repository.list_by_organization(organization_id)
        return {m.email.strip().lower() for m in members if m.email}

    async def get_display_name(self, profile_id: ProfileId, default: str) -> str:
        """Display name for a profile, falling back to ``default``.

        Never raises; used only to decorate notifications.
        """
        try:
            profile = await self.profile_repository.find_by_id(profile_id)
        except Exception as e:
            logfire.warn(
                "Error fetching profile display name",
                profile_id=str(profile_id),
                error=str(e),
            )
            return default
        if profile and profile.name:
            return profile.name
        return default
