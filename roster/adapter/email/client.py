"""Invitation email dispatchers.

Delivery is best effort: every failure is returned as a manual-sharing
result instead of raised.
"""

import httpx
import logfire

from roster.domain.service.notification import (
    DeliveryResult,
    InviteNotification,
    NotificationDispatcher,
)
from roster.domain.value import DeliveryMethod

from .template import invite_subject, render_invite_email


def _manual(error: str) -> DeliveryResult:
    return DeliveryResult(delivered=False, method=DeliveryMethod.MANUAL, error=error)


class ResendNotificationDispatcher(NotificationDispatcher):
    """Sends invitation emails through the Resend HTTP API."""

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        from_address: str,
        expiry_days: int = 7,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            api_url: Resend API base URL
            api_key: Resend API key; without one nothing is sent
            from_address: Sender address
            expiry_days: Invite lifetime quoted in the email
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.from_address = from_address
        self.expiry_days = expiry_days
        self.timeout = timeout
        self._transport = transport

    async def send_invite(self, notification: InviteNotification) -> DeliveryResult:
        """Send an invitation email. Never raises."""
        if not self.api_key:
            logfire.warn("Email API key not configured, skipping invite email")
            return _manual("Email delivery is not configured")

        payload = {
            "from": self.from_address,
            "to": [notification.email],
            "subject": invite_subject(notification),
            "html": render_invite_email(notification, self.expiry_days),
        }

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    f"{self.api_url}/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logfire.error("Invite email HTTP error", error=str(e))
            return _manual(f"HTTP error sending email: {e}")

        if not response.is_success:
            logfire.error(
                "Invite email rejected",
                status_code=response.status_code,
                error=response.text,
            )
            return _manual(f"Email API returned {response.status_code}")

        message_id = response.json().get("id")
        logfire.info("Invite email sent", message_id=message_id)
        return DeliveryResult(
            delivered=True, method=DeliveryMethod.EMAIL, message_id=message_id
        )


class RecordingNotificationDispatcher(NotificationDispatcher):
    """Mock dispatcher for testing.

    Records every notification; set ``fail`` to simulate an outage.
    """

    def __init__(self) -> None:
        self.sent: list[InviteNotification] = []
        self.fail = False

    async def send_invite(self, notification: InviteNotification) -> DeliveryResult:
        if self.fail:
            return _manual("Simulated email outage")
        self.sent.append(notification)
        return DeliveryResult(
            delivered=True,
            method=DeliveryMethod.EMAIL,
            message_id=f"mock-{len(self.sent)}",
        )
