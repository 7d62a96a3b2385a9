"""Application layer DI providers."""

from dishka import Scope, provide

from roster.application.usecase.invite import (
    CancelInviteUseCase,
    CreateInviteUseCase,
    ListInvitesUseCase,
    ListPendingInvitesUseCase,
    RedeemInviteUseCase,
    RepairInviteUseCase,
    ResendInviteUseCase,
    VerifyInviteUseCase,
)
from roster.domain.service import InviteService, ProfileService, ProvisioningService
from roster.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Lifecycle use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invite_use_case(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> CreateInviteUseCase:
        """Provide create invite use case."""
        return CreateInviteUseCase(
            invite_service=invite_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_verify_invite_use_case(
        self, invite_service: InviteService
    ) -> VerifyInviteUseCase:
        """Provide verify invite use case."""
        return VerifyInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_list_pending_invites_use_case(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> ListPendingInvitesUseCase:
        """Provide list pending invites use case."""
        return ListPendingInvitesUseCase(
            invite_service=invite_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_invites_use_case(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> ListInvitesUseCase:
        """Provide list invites use case."""
        return ListInvitesUseCase(
            invite_service=invite_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_resend_invite_use_case(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> ResendInviteUseCase:
        """Provide resend invite use case."""
        return ResendInviteUseCase(
            invite_service=invite_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_cancel_invite_use_case(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> CancelInviteUseCase:
        """Provide cancel invite use case."""
        return CancelInviteUseCase(
            invite_service=invite_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_repair_invite_use_case(
        self, invite_service: InviteService, profile_service: ProfileService
    ) -> RepairInviteUseCase:
        """Provide repair invite use case."""
        return RepairInviteUseCase(
            invite_service=invite_service, profile_service=profile_service
        )

    # Provisioning use cases
    @provide(scope=Scope.REQUEST)
    def get_redeem_invite_use_case(
        self, provisioning_service: ProvisioningService
    ) -> RedeemInviteUseCase:
        """Provide redeem invite use case."""
        return RedeemInviteUseCase(provisioning_service=provisioning_service)
