"""Mock providers for testing."""

from .identity import MockIdentityComponentProvider
from .notification import MockNotificationProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockIdentityComponentProvider",
    "MockNotificationProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
