"""Strongly typed identifiers for Roster domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Core domain entity identifiers
OrganizationId = NewType("OrganizationId", UUID)
InviteId = NewType("InviteId", UUID)

# Profile ids are the identity ids handed out by the identity provider (1:1)
ProfileId = NewType("ProfileId", UUID)
