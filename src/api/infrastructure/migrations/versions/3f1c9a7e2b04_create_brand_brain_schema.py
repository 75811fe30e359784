"""create brand brain schema

Revision ID: 3f1c9a7e2b04
Revises:
Create Date: 2026-10-12 09:41:07.118342

Creates users, brand_workspaces, brand_brains and evidence. Brains and
evidence cascade with their workspace; workspaces cascade with their owner.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create the four tables and their indexes.

    Key constraints:
    - users.email unique (stored lowercased)
    - brand_workspaces.slug unique across all owners
    - brand_brains.brand_workspace_id unique; brand_slug is a plain index
    """
    op.create_table(
        "users",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column(
            "onboarding_completed",
            sa.Boolean,
            nullable=False,
            server_default=sa.false(),
        ),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "brand_workspaces",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "owner_user_id",
            sa.String(26),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(64), nullable=False),
        sa.Column("ai_thread_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("onboarding_step", sa.Integer, nullable=False, server_default="1"),
        sa.Column("brain_id", sa.String(26), nullable=True),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_brand_workspaces_slug"),
    )
    # Listing by owner in creation order
    op.create_index(
        "idx_brand_workspaces_owner",
        "brand_workspaces",
        ["owner_user_id", "created_at"],
    )

    op.create_table(
        "brand_brains",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "brand_workspace_id",
            sa.String(26),
            sa.ForeignKey("brand_workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("brand_slug", sa.String(64), nullable=False),
        sa.Column("summary", sa.Text, nullable=False, server_default=""),
        sa.Column("audience", sa.Text, nullable=False, server_default=""),
        sa.Column("tone", sa.Text, nullable=False, server_default=""),
        sa.Column("offers", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "pillars", postgresql.JSONB, nullable=False, server_default="[]"
        ),
        sa.Column(
            "recommendations", postgresql.JSONB, nullable=False, server_default="[]"
        ),
        sa.Column(
            "competitors", postgresql.JSONB, nullable=False, server_default="[]"
        ),
        sa.Column(
            "channels", postgresql.JSONB, nullable=False, server_default="[]"
        ),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("onboarding_step", sa.Integer, nullable=False, server_default="1"),
        sa.Column(
            "is_activated", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("analysis_method", sa.String(32), nullable=True),
        sa.Column("analysis_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("analysis_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_analyzed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("analysis_duration_ms", sa.Integer, nullable=True),
        sa.Column("evidence_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text, nullable=True),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "brand_workspace_id", name="uq_brand_brains_workspace"
        ),
    )
    op.create_index(
        op.f("ix_brand_brains_brand_slug"), "brand_brains", ["brand_slug"]
    )

    op.create_table(
        "evidence",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "brand_workspace_id",
            sa.String(26),
            sa.ForeignKey("brand_workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("brand_slug", sa.String(64), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("analyzed_content", sa.Text, nullable=True),
        sa.Column("analysis_summary", sa.Text, nullable=True),
        sa.Column(
            "metadata", postgresql.JSONB, nullable=False, server_default="{}"
        ),
        sa.Column("last_error", sa.Text, nullable=True),
        *_timestamps(),
    )
    # Listing by brand and status, newest first
    op.create_index(
        "idx_evidence_brand_status",
        "evidence",
        ["brand_workspace_id", "status", "created_at"],
    )
    # Single-item access is always scoped by brand slug
    op.create_index("idx_evidence_slug_id", "evidence", ["brand_slug", "id"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index("idx_evidence_slug_id", table_name="evidence")
    op.drop_index("idx_evidence_brand_status", table_name="evidence")
    op.drop_table("evidence")
    op.drop_index(op.f("ix_brand_brains_brand_slug"), table_name="brand_brains")
    op.drop_table("brand_brains")
    op.drop_index("idx_brand_workspaces_owner", table_name="brand_workspaces")
    op.drop_table("brand_workspaces")
    op.drop_table("users")
