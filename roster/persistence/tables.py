"""SQLAlchemy table definitions for Roster.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

role_enum = Enum("admin", "member", "marketer", name="member_role", create_type=False)

# ============================================================================
# ORGANIZATIONS TABLE
# ============================================================================
organizations_table = Table(
    "organizations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("name", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# PROFILES TABLE
# ============================================================================
# id equals the identity id at the identity provider. The provider's signup
# trigger may insert a row with only id and email set.
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", UUID, primary_key=True),
    Column(
        "organization_id",
        UUID,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("email", String(255), nullable=True),
    Column("name", String(255), nullable=True),
    Column("role", role_enum, nullable=True),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_profiles_organization_email",
    profiles_table.c.organization_id,
    profiles_table.c.email,
)

# ============================================================================
# INVITES TABLE
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "organization_id",
        UUID,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("email", String(255), nullable=False),  # Normalized
    Column("role", role_enum, nullable=False),
    Column("token", String(255), nullable=False),
    Column(
        "invited_by", UUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("used", Boolean, nullable=False, server_default="false"),
    Column("used_at", TIMESTAMP(timezone=True), nullable=True),
)

Index("idx_invites_token", invites_table.c.token, unique=True)
Index(
    "idx_invites_organization_email",
    invites_table.c.organization_id,
    invites_table.c.email,
)
Index(
    "idx_invites_organization_used",
    invites_table.c.organization_id,
    invites_table.c.used,
)
