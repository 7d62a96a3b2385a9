"""Infrastructure providers."""

# Import bases
from .identity import IdentityComponentProvider
from .notification import NotificationProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .identity import ProdIdentityComponentProvider  # noqa: F401
from .notification import ProdNotificationProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "IdentityComponentProvider",
    "NotificationProvider",
    "PersistenceProvider",
    "ProdIdentityComponentProvider",
    "ProdNotificationProvider",
    "ProdPersistenceProvider",
]
