"""Dependency injection module.

Core providers are concrete. Infrastructure components declare a
``__mock_component__`` name and get one production and one mock subclass;
which one is used is decided when the container is built.
"""

from typing import Type, get_args

from roster.util.di.application import ProdApplicationProvider
from roster.util.di.base import Component, ProviderBase
from roster.util.di.core import ProdConfigProvider
from roster.util.di.domain import ProdDomainProvider
from roster.util.di.infrastructure import (
    IdentityComponentProvider,
    NotificationProvider,
    PersistenceProvider,
    ProdIdentityComponentProvider,
    ProdNotificationProvider,
    ProdPersistenceProvider,
)
from roster.util.error import ConfigurationError

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
    IdentityComponentProvider,
    NotificationProvider,
]

COMPONENTS: frozenset[Component] = frozenset(get_args(Component))


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider entry of PROVIDERS to the class to instantiate.

    Args:
        base: Entry of PROVIDERS
        use_mock: Pick the mock implementation of a component

    Returns:
        ``base`` itself for core providers, otherwise the matching subclass

    Raises:
        ConfigurationError: If the component has no such implementation
            (mock implementations only exist once ``tests.di`` is imported)
    """
    if base.__mock_component__ is None:
        return base

    candidates = [
        impl for impl in base.__subclasses__() if impl.__is_mock__ == use_mock
    ]
    if len(candidates) != 1:
        kind = "mock" if use_mock else "production"
        raise ConfigurationError(
            f"Expected one {kind} implementation for component "
            f"'{base.__mock_component__}', found {len(candidates)}"
        )
    return candidates[0]


def build_providers(mock: set[Component] | frozenset[Component] = frozenset()):
    """Instantiate every provider, using mocks for the named components."""
    return [
        get_provider(base, use_mock=base.__mock_component__ in mock)()
        for base in PROVIDERS
    ]


__all__ = [
    "COMPONENTS",
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "build_providers",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "IdentityComponentProvider",
    "NotificationProvider",
    "PersistenceProvider",
    "ProdIdentityComponentProvider",
    "ProdNotificationProvider",
    "ProdPersistenceProvider",
]
