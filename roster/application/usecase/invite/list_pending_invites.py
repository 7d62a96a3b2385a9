"""List pending invites use case."""

from uuid import UUID

from pydantic import BaseModel

from roster.application.usecase.invite.common import InviteListResponse
from roster.domain.service import InviteService, ProfileService
from roster.domain.value import ProfileId


class ListPendingInvitesRequest(BaseModel):
    """List pending invites request."""

    requester_id: str  # Profile ID from auth


class ListPendingInvitesResponse(InviteListResponse):
    """Pending (unused, unexpired) invites of the requester's organization."""

    pass


class ListPendingInvitesUseCase:
    """Use case for listing pending invites.

    Invites whose invitee already has a profile are left out and marked
    used in the background.
    """

    def __init__(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> None:
        self.invite_service = invite_service
        self.profile_service = profile_service

    async def execute(
        self, request: ListPendingInvitesRequest
    ) -> ListPendingInvitesResponse:
        """List pending invites of the requester's organization.

        Raises:
            AuthorizationError: If requester is not a member of an organization
        """
        requester = await self.profile_service.resolve_requester(
            ProfileId(UUID(request.requester_id))
        )
        invites = await self.invite_service.list_pending(requester.organization_id)
        return ListPendingInvitesResponse.from_invites(invites)
