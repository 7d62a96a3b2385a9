"""Notification dispatcher interface."""

from roster.domain.value import DeliveryMethod, Role
from roster.domain.value.common import ValueObject


class InviteNotification(ValueObject):
    """Everything needed to render an invitation email."""

    email: str
    invite_url: str
    role: Role
    organization_name: str
    inviter_name: str


class DeliveryResult(ValueObject):
    """Outcome of a dispatch attempt. Failures are values, not exceptions."""

    delivered: bool
    method: DeliveryMethod
    message_id: str | None = None
    error: str | None = None


class NotificationDispatcher:
    """Best-effort sender of invitation emails."""

    async def send_invite(self, notification: InviteNotification) -> DeliveryResult:
        """Send an invitation email.

        Implementations must never raise; failures come back as
        ``DeliveryResult(delivered=False, method=DeliveryMethod.MANUAL)``.

        Args:
            notification: Invitation details

        Returns:
            Delivery result
        """
        raise NotImplementedError
