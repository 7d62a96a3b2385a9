"""Domain services."""

from .base import Service
from .identity import IdentityProvider
from .invite_service import InviteService
from .notification import DeliveryResult, InviteNotification, NotificationDispatcher
from .profile_service import ProfileService
from .provisioning_service import ProvisioningService
from .token_service import TokenService

__all__ = [
    "DeliveryResult",
    "IdentityProvider",
    "InviteNotification",
    "InviteService",
    "NotificationDispatcher",
    "ProfileService",
    "ProvisioningService",
    "Service",
    "TokenService",
]
