"""Verify invite use case."""

from datetime import datetime

from pydantic import BaseModel

from roster.application.usecase.invite.common import parse_token
from roster.domain.service import InviteService
from roster.domain.value import Role


class VerifyInviteRequest(BaseModel):
    """Verify invite request."""

    token: str


class VerifyInviteResponse(BaseModel):
    """Summary of a redeemable invite, used to render the signup form."""

    invite_id: str
    email: str
    role: Role
    organization_id: str
    expires_at: datetime


class VerifyInviteUseCase:
    """Use case for checking an invite token before signup.

    Safe to call repeatedly; has no side effects.
    """

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize verify invite use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: VerifyInviteRequest) -> VerifyInviteResponse:
        """Verify an invite token.

        Raises:
            NotFoundError: If no invite carries the token
            ExpiredError: If the invite expired
            AlreadyUsedError: If the invite was used
        """
        invite = await self.invite_service.verify_invite(parse_token(request.token))
        return VerifyInviteResponse(
            invite_id=str(invite.id),
            email=invite.email,
            role=invite.role,
            organization_id=str(invite.organization_id),
            expires_at=invite.expires_at,
        )
