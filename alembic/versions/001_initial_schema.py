"""initial schema

Revision ID: 001
Revises:
Create Date: 2025-01-01 00:00:00.000000
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── profiles ──
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("chat_id", sa.BigInteger, nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column("height", sa.Integer, nullable=True),
        sa.Column("weight", sa.Integer, nullable=True),
        sa.Column("measurements", sa.String(255), nullable=True),
        sa.Column("about", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("raw_text", sa.Text, nullable=False, server_default=""),
    )
    op.create_index("ix_profiles_date", "profiles", ["date"])

    # ── media_items ──
    op.create_table(
        "media_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("profile_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("url", sa.Text, nullable=False),
    )
    op.create_index("ix_media_items_profile_id", "media_items", ["profile_id"])


def downgrade() -> None:
    for table in ["media_items", "profiles"]:
        op.drop_table(table)
