"""initial_schema

Create the schema for Roster:
- Organizations
- Profiles (1:1 with identity provider users; may be inserted skeletal by
  the provider's signup trigger)
- Invites (single-use, expiring, organization scoped)

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:44.310512

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE member_role AS ENUM ('admin', 'member', 'marketer');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    role = postgresql.ENUM(
        "admin", "member", "marketer", name="member_role", create_type=False
    )

    op.create_table(
        "organizations",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(), nullable=False),
        sa.Column("organization_id", postgresql.UUID(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role", role, nullable=True),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_profiles_organization_email",
        "profiles",
        ["organization_id", "email"],
        unique=False,
    )

    op.create_table(
        "invites",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("organization_id", postgresql.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", role, nullable=False),
        sa.Column("token", sa.String(length=255), nullable=False),
        sa.Column("invited_by", postgresql.UUID(), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("used_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["invited_by"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_invites_token", "invites", ["token"], unique=True)
    op.create_index(
        "idx_invites_organization_email",
        "invites",
        ["organization_id", "email"],
        unique=False,
    )
    op.create_index(
        "idx_invites_organization_used",
        "invites",
        ["organization_id", "used"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_invites_organization_used", table_name="invites")
    op.drop_index("idx_invites_organization_email", table_name="invites")
    op.drop_index("idx_invites_token", table_name="invites")
    op.drop_table("invites")
    op.drop_index("idx_profiles_organization_email", table_name="profiles")
    op.drop_table("profiles")
    op.drop_table("organizations")
    op.execute("DROP TYPE IF EXISTS member_role")
