"""Domain layer DI providers."""

from dishka import Scope, provide

from roster.config import (
    AuthSettings,
    InvitationSettings,
    ProvisioningSettings,
    Settings,
)
from roster.domain.repository import (
    InviteRepository,
    OrganizationRepository,
    ProfileRepository,
)
from roster.domain.service import (
    IdentityProvider,
    InviteService,
    NotificationDispatcher,
    ProfileService,
    ProvisioningService,
    TokenService,
)
from roster.domain.service.jwt_service import JWTService
from roster.util.background import BackgroundTaskGroup
from roster.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped. Repositories open their own
    transaction per call, so services hold no session state.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT verification service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_token_service(self, invite_repository: InviteRepository) -> TokenService:
        """Provide invite token issuer."""
        return TokenService(invite_repository=invite_repository)

    @provide
    def get_profile_service(
        self, profile_repository: ProfileRepository
    ) -> ProfileService:
        """Provide profile domain service."""
        return ProfileService(profile_repository=profile_repository)

    @provide
    def get_invite_service(
        self,
        invite_repository: InviteRepository,
        organization_repository: OrganizationRepository,
        profile_service: ProfileService,
        token_service: TokenService,
        notification_dispatcher: NotificationDispatcher,
        background_tasks: BackgroundTaskGroup,
        invitation_settings: InvitationSettings,
        settings: Settings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            invite_repository=invite_repository,
            organization_repository=organization_repository,
            profile_service=profile_service,
            token_service=token_service,
            notification_dispatcher=notification_dispatcher,
            background_tasks=background_tasks,
            frontend_url=settings.api.frontend_url,
            expiry_days=invitation_settings.expiry_days,
        )

    @provide
    def get_provisioning_service(
        self,
        invite_service: InviteService,
        identity_provider: IdentityProvider,
        profile_repository: ProfileRepository,
        provisioning_settings: ProvisioningSettings,
    ) -> ProvisioningService:
        """Provide invite redemption saga."""
        return ProvisioningService(
            invite_service=invite_service,
            identity_provider=identity_provider,
            profile_repository=profile_repository,
            consume_attempts=provisioning_settings.consume_attempts,
            reconcile_attempts=provisioning_settings.reconcile_attempts,
            retry_delay=provisioning_settings.retry_delay_seconds,
            settle_delay=provisioning_settings.settle_delay_seconds,
        )
