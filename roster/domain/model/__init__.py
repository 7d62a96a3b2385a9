"""Domain model entities for Roster."""

from roster.domain.model.invite import Invite, InviteDelivery, RepairOutcome
from roster.domain.model.organization import Organization
from roster.domain.model.profile import Profile

__all__ = [
    "Invite",
    "InviteDelivery",
    "Organization",
    "Profile",
    "RepairOutcome",
]
