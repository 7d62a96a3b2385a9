"""Domain value objects for Roster."""

from roster.domain.value.identifiers import InviteId, OrganizationId, ProfileId
from roster.domain.value.types import (
    DeliveryMethod,
    EmailAddress,
    InviteToken,
    RepairAction,
    Requester,
    Role,
)

__all__ = [
    # Identifiers
    "InviteId",
    "OrganizationId",
    "ProfileId",
    # Types
    "DeliveryMethod",
    "EmailAddress",
    "InviteToken",
    "RepairAction",
    "Requester",
    "Role",
]
