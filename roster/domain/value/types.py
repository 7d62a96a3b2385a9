"""Domain value objects for Roster.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from roster.domain.value.common import RootValueObject, ValueObject
from roster.domain.value.identifiers import OrganizationId, ProfileId

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Role(str, Enum):
    """Membership role within an organization.

    Only administrators may create, resend, cancel or repair invitations.
    """

    ADMIN = "admin"
    MEMBER = "member"
    MARKETER = "marketer"

    @property
    def display_name(self) -> str:
        """Human readable role name used in invitation emails."""
        return {
            Role.ADMIN: "Administrator",
            Role.MEMBER: "Member",
            Role.MARKETER: "Marketer",
        }[self]


class DeliveryMethod(str, Enum):
    """How an invitation link reached (or should reach) the invitee."""

    EMAIL = "email"
    MANUAL = "manual"  # Dispatch failed, admin shares the link by hand


class RepairAction(str, Enum):
    """Outcome of an invite repair."""

    MARKED_USED = "marked_used"
    MARKED_USED_NO_PROFILE = "marked_used_no_profile"


class EmailAddress(RootValueObject[str]):
    """Normalized (trimmed, lower-cased) email address."""

    @field_validator("root", mode="before")
    @classmethod
    def normalize(cls, v: object) -> object:
        """Trim and lower-case before validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("root")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate basic address shape and length."""
        if not v:
            raise ValueError("Email is required")
        if len(v) > 255:
            raise ValueError("Email must be at most 255 characters")
        if not _EMAIL_PATTERN.match(v):
            raise ValueError(f"Invalid email address: {v}")
        return v


class InviteToken(RootValueObject[str]):
    """URL-safe invite token."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        return v

    @property
    def redacted(self) -> str:
        """Token prefix safe to put in logs."""
        return self.root[:8] + "..."


class Requester(ValueObject):
    """The caller of a lifecycle operation.

    Resolved once from the requester's profile by the use case layer and
    passed explicitly into every service call.
    """

    profile_id: ProfileId
    organization_id: OrganizationId
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
