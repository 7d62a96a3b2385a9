"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from roster.domain.model import Invite, Organization, Profile
from roster.domain.value import (
    InviteId,
    InviteToken,
    OrganizationId,
    ProfileId,
    Role,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_organization(row: Dict[str, Any]) -> Organization:
    """Convert database row to Organization domain model."""
    return Organization(
        id=OrganizationId(_uuid(row["id"])),
        name=row["name"],
        created_at=row["created_at"],
    )


def organization_to_dict(organization: Organization) -> Dict[str, Any]:
    """Convert Organization domain model to database dict."""
    return organization.model_dump()


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model.

    Skeletal rows written by the identity provider have no organization or role.

    Args:
        row: Database row as dict

    Returns:
        Profile domain model
    """
    return Profile(
        id=ProfileId(_uuid(row["id"])),
        organization_id=OrganizationId(_uuid(row["organization_id"]))
        if row.get("organization_id")
        else None,
        email=row.get("email"),
        name=row.get("name"),
        role=Role(row["role"]) if row.get("role") else None,
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict."""
    data = profile.model_dump()
    data["role"] = profile.role.value if profile.role else None
    return data


def profile_fields_to_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a partial profile update to column values."""
    columns = dict(fields)
    if isinstance(columns.get("role"), Role):
        columns["role"] = columns["role"].value
    return columns


def row_to_invite(row: Dict[str, Any]) -> Invite:
    """Convert database row to Invite domain model.

    Args:
        row: Database row as dict

    Returns:
        Invite domain model
    """
    return Invite(
        id=InviteId(_uuid(row["id"])),
        organization_id=OrganizationId(_uuid(row["organization_id"])),
        email=row["email"],
        role=Role(row["role"]),
        token=InviteToken(root=row["token"]),
        invited_by=ProfileId(_uuid(row["invited_by"])),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        used=row["used"],
        used_at=row.get("used_at"),
    )


def invite_to_dict(invite: Invite) -> Dict[str, Any]:
    """Convert Invite domain model to database dict.

    Args:
        invite: Invite domain model

    Returns:
        Dict suitable for database insertion/update
    """
    # InviteToken serializes to its root string via model_dump()
    data = invite.model_dump()
    data["role"] = invite.role.value
    return data
