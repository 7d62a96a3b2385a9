"""Shared invite request parsing and response items."""

from datetime import datetime

import pydantic
from pydantic import BaseModel

from roster.domain.error import NotFoundError
from roster.domain.model import Invite, InviteDelivery
from roster.domain.value import DeliveryMethod, InviteToken, Role


def parse_token(raw: str) -> InviteToken:
    """Parse a token from a link. A malformed token resolves to no invite.

    Raises:
        NotFoundError: If the token is empty or too long
    """
    try:
        return InviteToken(root=raw)
    except pydantic.ValidationError:
        raise NotFoundError("Invite", raw[:8] + "...") from None


class InviteItem(BaseModel):
    """Invite item in response. Never carries the token."""

    invite_id: str
    organization_id: str
    email: str
    role: Role
    invited_by: str
    created_at: datetime
    expires_at: datetime
    used: bool
    used_at: datetime | None = None

    @classmethod
    def from_invite(cls, invite: Invite) -> "InviteItem":
        return cls(
            invite_id=str(invite.id),
            organization_id=str(invite.organization_id),
            email=invite.email,
            role=invite.role,
            invited_by=str(invite.invited_by),
            created_at=invite.created_at,
            expires_at=invite.expires_at,
            used=invite.used,
            used_at=invite.used_at,
        )


class InviteDeliveryResponse(BaseModel):
    """Created or resent invite plus its link and delivery outcome.

    When ``delivered`` is False the link must be shared manually.
    """

    invite: InviteItem
    invite_url: str
    delivered: bool
    delivery_method: DeliveryMethod

    @classmethod
    def from_delivery(cls, delivery: InviteDelivery) -> "InviteDeliveryResponse":
        return cls(
            invite=InviteItem.from_invite(delivery.invite),
            invite_url=delivery.invite_url,
            delivered=delivery.delivered,
            delivery_method=delivery.delivery_method,
        )


class InviteListResponse(BaseModel):
    """List of invites."""

    invites: list[InviteItem]
    total: int

    @classmethod
    def from_invites(cls, invites: list[Invite]) -> "InviteListResponse":
        return cls(
            invites=[InviteItem.from_invite(invite) for invite in invites],
            total=len(invites),
        )
