"""List invites use case."""

from uuid import UUID

from pydantic import BaseModel

from roster.application.usecase.invite.common import InviteListResponse
from roster.domain.service import InviteService, ProfileService
from roster.domain.value import ProfileId


class ListInvitesRequest(BaseModel):
    """List invites request."""

    requester_id: str  # Profile ID from auth


class ListInvitesResponse(InviteListResponse):
    """Every invite of the requester's organization, newest first."""

    pass


class ListInvitesUseCase:
    """Use case for listing all invites, whatever their state."""

    def __init__(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> None:
        self.invite_service = invite_service
        self.profile_service = profile_service

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        requester = await self.profile_service.resolve_requester(
            ProfileId(UUID(request.requester_id))
        )
        invites = await self.invite_service.list_invites(requester.organization_id)
        return ListInvitesResponse.from_invites(invites)
