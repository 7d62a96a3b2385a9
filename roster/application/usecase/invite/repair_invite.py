"""Repair invite use case."""

from uuid import UUID

from pydantic import BaseModel

from roster.application.usecase.base import BaseUseCase
from roster.domain.service import InviteService, ProfileService
from roster.domain.value import InviteId, ProfileId, RepairAction


class RepairInviteRequest(BaseModel):
    """Repair invite request."""

    requester_id: str  # Profile ID from auth
    invite_id: str


class RepairInviteResponse(BaseModel):
    """Repair outcome with an operator-facing message."""

    success: bool
    action: RepairAction
    message: str


class RepairInviteUseCase(BaseUseCase):
    """Use case for marking a stuck pending invite as used."""

    def __init__(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> None:
        self.invite_service = invite_service
        self.profile_service = profile_service

    async def execute(self, request: RepairInviteRequest) -> RepairInviteResponse:
        """Execute repair invite use case.

        Raises:
            AuthorizationError: If requester is not an admin
            NotFoundError: If the invite is not in the requester's organization
            PersistenceError: If the invite could not be marked used
        """
        requester = await self.profile_service.resolve_requester(
            ProfileId(UUID(request.requester_id))
        )
        outcome = await self.invite_service.repair_invite(
            requester, InviteId(UUID(request.invite_id))
        )
        return RepairInviteResponse(
            success=outcome.success, action=outcome.action, message=outcome.message
        )
