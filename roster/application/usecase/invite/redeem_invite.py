"""Redeem invite use case."""

from pydantic import BaseModel, Field

from roster.application.usecase.base import BaseUseCase
from roster.application.usecase.invite.common import parse_token
from roster.domain.value import Role
from roster.domain.service import ProvisioningService


class RedeemInviteRequest(BaseModel):
    """Signup through an invite link."""

    token: str
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=6)


class RedeemInviteResponse(BaseModel):
    """The provisioned profile."""

    profile_id: str
    organization_id: str | None
    email: str | None
    name: str | None
    role: Role | None


class RedeemInviteUseCase(BaseUseCase):
    """Use case for redeeming an invite into an identity and a profile."""

    def __init__(self, provisioning_service: ProvisioningService) -> None:
        """Initialize use case.

        Args:
            provisioning_service: Provisioning saga
        """
        self.provisioning_service = provisioning_service

    async def execute(self, request: RedeemInviteRequest) -> RedeemInviteResponse:
        """Redeem an invite.

        Args:
            request: Token, display name and password

        Returns:
            The provisioned profile

        Raises:
            NotFoundError, ExpiredError, AlreadyUsedError: Invite not redeemable
            ConflictError: Identity exists or profile did not converge
            ProviderError: Identity provider failure
        """
        profile = await self.provisioning_service.redeem_invite(
            parse_token(request.token), request.name.strip(), request.password
        )
        return RedeemInviteResponse(
            profile_id=str(profile.id),
            organization_id=str(profile.organization_id)
            if profile.organization_id
            else None,
            email=profile.email,
            name=profile.name,
            role=profile.role,
        )
