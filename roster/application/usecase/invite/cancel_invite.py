"""Cancel invite use case."""

from uuid import UUID

from pydantic import BaseModel

from roster.application.usecase.base import BaseUseCase
from roster.domain.service import InviteService, ProfileService
from roster.domain.value import InviteId, ProfileId


class CancelInviteRequest(BaseModel):
    """Cancel invite request."""

    requester_id: str  # Profile ID from auth
    invite_id: str


class CancelInviteResponse(BaseModel):
    """Cancel invite response."""

    success: bool


class CancelInviteUseCase(BaseUseCase):
    """Use case for canceling (deleting) a pending invite.

    Canceling an invite that no longer exists succeeds.
    """

    def __init__(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> None:
        self.invite_service = invite_service
        self.profile_service = profile_service

    async def execute(self, request: CancelInviteRequest) -> CancelInviteResponse:
        requester = await self.profile_service.resolve_requester(
            ProfileId(UUID(request.requester_id))
        )
        success = await self.invite_service.cancel_invite(
            requester, InviteId(UUID(request.invite_id))
        )
        return CancelInviteResponse(success=success)
