"""Mock identity providers for testing."""

from dishka import Scope, provide

from roster.adapter.identity.client import InMemoryIdentityProvider
from roster.domain.repository import ProfileRepository
from roster.domain.service import IdentityProvider
from roster.util.di.infrastructure.identity import IdentityComponentProvider


class MockIdentityComponentProvider(IdentityComponentProvider):
    """Mock identity provider with a simulated signup trigger."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_in_memory_identity_provider(
        self, profile_repository: ProfileRepository
    ) -> InMemoryIdentityProvider:
        """Provide the in-memory provider (tests poke at its state)."""
        return InMemoryIdentityProvider(profile_repository=profile_repository)

    @provide(scope=Scope.APP)
    def get_identity_provider(
        self, provider: InMemoryIdentityProvider
    ) -> IdentityProvider:
        """Expose the in-memory provider through the domain port."""
        return provider
