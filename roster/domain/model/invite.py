"""Invite entity.

An invite grants the bearer of its token a one-time right to provision a
profile with a specific role in a specific organization.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from roster.domain.model.common import DomainModel, utcnow
from roster.domain.value import (
    DeliveryMethod,
    InviteId,
    InviteToken,
    OrganizationId,
    ProfileId,
    RepairAction,
    Role,
)


class Invite(DomainModel):
    """Organization invitation.

    Business rules:
    - At most one active (unused, unexpired) invite per organization/email
    - Invites expire 7 days after creation or the last resend
    - ``used`` only ever moves from False to True
    - Tokens are never reused, even after the invite is deleted
    """

    id: InviteId
    organization_id: OrganizationId
    email: str  # Normalized (trimmed, lower-cased)
    role: Role
    token: InviteToken
    invited_by: ProfileId
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    used: bool = False
    used_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_active(self, now: datetime) -> bool:
        """Unused and unexpired."""
        return not self.used and not self.is_expired(now)


class InviteDelivery(DomainModel):
    """Result of creating or resending an invite."""

    invite: Invite
    invite_url: str
    delivered: bool
    delivery_method: DeliveryMethod


class RepairOutcome(DomainModel):
    """Result of repairing a stuck invite."""

    success: bool
    action: RepairAction
    message: str
