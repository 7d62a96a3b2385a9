"""Create invite use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from roster.application.usecase.base import BaseUseCase
from roster.application.usecase.invite.common import InviteDeliveryResponse
from roster.domain.service import InviteService, ProfileService
from roster.domain.value import ProfileId


class CreateInviteRequest(BaseModel):
    """Request to invite someone into the requester's organization."""

    requester_id: str  # Profile ID from auth
    email: str
    role: str  # Validated by the domain so the error names the allowed roles


class CreateInviteResponse(InviteDeliveryResponse):
    """Response after creating an invite."""

    pass


class CreateInviteUseCase(BaseUseCase):
    """Use case for creating an organization invite."""

    def __init__(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
            profile_service: Profile domain service
        """
        self.invite_service = invite_service
        self.profile_service = profile_service

    async def execute(self, request: CreateInviteRequest) -> CreateInviteResponse:
        """Execute create invite use case.

        Args:
            request: Create invite request

        Returns:
            Created invite, invite URL and delivery outcome

        Raises:
            AuthorizationError: If requester is not an admin of an organization
            ValidationError: If email or role is invalid
            ConflictError: If the email already belongs to a member
        """
        with logfire.span("create_invite.execute", requester_id=request.requester_id):
            requester = await self.profile_service.resolve_requester(
                ProfileId(UUID(request.requester_id))
            )
            delivery = await self.invite_service.create_invite(
                requester, request.email, request.role
            )
            return CreateInviteResponse.from_delivery(delivery)
