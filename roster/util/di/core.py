"""Core DI providers (non-mockable)."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from roster.config import (
    AuthSettings,
    InvitationSettings,
    ProvisioningSettings,
    Settings,
)
from roster.util.background import BackgroundTaskGroup
from roster.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        """Provide invitation settings."""
        return settings.invitations

    @provide(scope=Scope.APP)
    def provide_provisioning_settings(
        self, settings: Settings
    ) -> ProvisioningSettings:
        """Provide provisioning retry settings."""
        return settings.provisioning

    @provide(scope=Scope.APP)
    async def provide_background_tasks(self) -> AsyncIterator[BackgroundTaskGroup]:
        """Provide the background task group; drained when the container closes."""
        tasks = BackgroundTaskGroup()
        yield tasks
        await tasks.drain()
