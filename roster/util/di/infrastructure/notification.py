"""Notification infrastructure providers."""

from dishka import Scope, provide

from roster.adapter.email.client import ResendNotificationDispatcher
from roster.config import Settings
from roster.domain.service import NotificationDispatcher
from roster.util.di.base import ProviderBase


class NotificationProvider(ProviderBase):
    """Notification component base."""

    __mock_component__ = "notification"


class ProdNotificationProvider(NotificationProvider):
    """Production email dispatcher (Resend)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notification_dispatcher(self, settings: Settings) -> NotificationDispatcher:
        """Provide email dispatcher. Without an API key links are shared manually."""
        return ResendNotificationDispatcher(
            api_url=settings.email.api_url,
            api_key=settings.email.api_key,
            from_address=settings.email.from_address,
            expiry_days=settings.invitations.expiry_days,
            timeout=settings.email.timeout_seconds,
        )
