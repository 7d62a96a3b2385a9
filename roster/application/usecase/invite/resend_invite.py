"""Resend invite use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from roster.application.usecase.base import BaseUseCase
from roster.application.usecase.invite.common import InviteDeliveryResponse
from roster.domain.service import InviteService, ProfileService
from roster.domain.value import InviteId, ProfileId


class ResendInviteRequest(BaseModel):
    """Resend invite request."""

    requester_id: str  # Profile ID from auth
    invite_id: str


class ResendInviteResponse(InviteDeliveryResponse):
    """Response after resending an invite, with the new link."""

    pass


class ResendInviteUseCase(BaseUseCase):
    """Use case for rotating an invite's token and sending it again."""

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

    async def execute(self, request: ResendInviteRequest) -> ResendInviteResponse:
        """Execute resend invite use case.

        Raises:
            AuthorizationError: If requester is not an admin
            NotFoundError: If the invite does not exist
            PermissionDeniedError: If the invite belongs to another organization
            AlreadyUsedError: If the invite was already used
        """
        with logfire.span(
            "resend_invite.execute",
            requester_id=request.requester_id,
            invite_id=request.invite_id,
        ):
            requester = await self.profile_service.resolve_requester(
                ProfileId(UUID(request.requester_id))
            )
            delivery = await self.invite_service.resend_invite(
                requester, InviteId(UUID(request.invite_id))
            )
            return ResendInviteResponse.from_delivery(delivery)
