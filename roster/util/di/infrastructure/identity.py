"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from roster.adapter.identity.client import GoTrueIdentityProvider
from roster.config import Settings
from roster.domain.service import IdentityProvider
from roster.util.di.base import ProviderBase
from roster.util.error import ConfigurationError


class IdentityComponentProvider(ProviderBase):
    """Identity component base.

    The real provider writes skeletal profiles into the real database, so
    it only makes sense together with real persistence.
    """

    __mock_component__ = "identity"
    __depends_on__ = {"persistence"}


class ProdIdentityComponentProvider(IdentityComponentProvider):
    """Production identity provider (GoTrue admin API)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider(self, settings: Settings) -> IdentityProvider:
        """Provide GoTrue identity provider.

        Raises:
            ConfigurationError: If the service key is not configured
        """
        config = settings.identity_provider
        if settings.environment == "production" and (
            not config.service_key or config.service_key == "CHANGE_ME_IN_PRODUCTION"
        ):
            raise ConfigurationError("Identity provider service key must be set")

        return GoTrueIdentityProvider(
            url=config.url,
            service_key=config.service_key,
            timeout=config.timeout_seconds,
        )
