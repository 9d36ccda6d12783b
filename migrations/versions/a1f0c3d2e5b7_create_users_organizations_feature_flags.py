"""Create users, organizations, members, feature flags and revisions.

Revision ID: a1f0c3d2e5b7
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1f0c3d2e5b7"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("email", sa.String(length=320), nullable=False),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column("first_name", sa.String(length=128), nullable=False),
            sa.Column("last_name", sa.String(length=128), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("deleted_at", sa.DateTime(timezone=False), nullable=True),
            sa.UniqueConstraint("email", name="uq_users_email"),
        )

    if not insp.has_table("organizations"):
        op.create_table(
            "organizations",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("deleted_at", sa.DateTime(timezone=False), nullable=True),
        )

    if not insp.has_table("organization_members"):
        op.create_table(
            "organization_members",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("permission", sa.String(length=32), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
            sa.UniqueConstraint("organization_id", "user_id", name="uq_organization_member"),
        )

    if not insp.has_table("feature_flags"):
        op.create_table(
            "feature_flags",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("type", sa.String(length=16), nullable=False),
            sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
            sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("deleted_at", sa.DateTime(timezone=False), nullable=True),
        )
        op.create_index("ix_feature_flags_organization_id", "feature_flags", ["organization_id"])

    if not insp.has_table("feature_flag_revisions"):
        op.create_table(
            "feature_flag_revisions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("feature_flag_id", sa.Integer(), sa.ForeignKey("feature_flags.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False),
            sa.Column("default_value", sa.String(), nullable=False),
            sa.Column("rules", sa.JSON(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
        )
        op.create_index("ix_feature_flag_revisions_feature_flag_id", "feature_flag_revisions", ["feature_flag_id"])


def downgrade() -> None:
    op.drop_index("ix_feature_flag_revisions_feature_flag_id", table_name="feature_flag_revisions")
    op.drop_table("feature_flag_revisions")
    op.drop_index("ix_feature_flags_organization_id", table_name="feature_flags")
    op.drop_table("feature_flags")
    op.drop_table("organization_members")
    op.drop_table("organizations")
    op.drop_table("users")
