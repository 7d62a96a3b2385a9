"""Identity provider adapter."""

from .client import GoTrueIdentityProvider, InMemoryIdentityProvider

__all__ = ["GoTrueIdentityProvider", "InMemoryIdentityProvider"]
