"""initial schema

Revision ID: 5c1e2b7a9d40
Revises:
Create Date: 2026-10-16 23:58:12.402113

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2b7a9d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, groups, swipes, tonight picks and subscriptions."""
    op.create_table(
        "profile",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "watch_group",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("invite_code", sa.String(length=16), nullable=False),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["created_by"], ["profile.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invite_code"),
    )
    op.create_table(
        "group_member",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role IN ('owner', 'member')", name="ck_group_member_role"),
        sa.ForeignKeyConstraint(["group_id"], ["watch_group.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "group_id", name="uq_group_member_user_group"),
    )
    op.create_index("ix_group_member_group_id", "group_member", ["group_id"])
    op.create_table(
        "swipe",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("movie_id", sa.String(length=32), nullable=False),
        sa.Column("media_type", sa.String(length=8), nullable=False),
        sa.Column("score", sa.SmallInteger(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("score >= 0 AND score <= 3", name="ck_swipe_score"),
        sa.CheckConstraint("media_type IN ('movie', 'tv')", name="ck_swipe_media_type"),
        sa.CheckConstraint(
            "status IN ('swiped', 'watching', 'watched')", name="ck_swipe_status"
        ),
        sa.ForeignKeyConstraint(["group_id"], ["watch_group.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "movie_id", "media_type", "group_id", name="uq_swipe_user_title_group"
        ),
    )
    op.create_index("ix_swipe_group_title", "swipe", ["group_id", "movie_id", "media_type"])
    op.create_table(
        "tonight_pick",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("movie_id", sa.String(length=32), nullable=False),
        sa.Column("media_type", sa.String(length=8), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("media_type IN ('movie', 'tv')", name="ck_tonight_pick_media_type"),
        sa.ForeignKeyConstraint(["group_id"], ["watch_group.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "movie_id", "media_type", name="uq_tonight_pick_user_title"
        ),
    )
    op.create_index(
        "ix_tonight_pick_group_created", "tonight_pick", ["group_id", "created_at"]
    )
    op.create_table(
        "user_provider",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("provider_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "provider_id"),
    )


def downgrade() -> None:
    """Drop all application tables."""
    op.drop_table("user_provider")
    op.drop_index("ix_tonight_pick_group_created", table_name="tonight_pick")
    op.drop_table("tonight_pick")
    op.drop_index("ix_swipe_group_title", table_name="swipe")
    op.drop_table("swipe")
    op.drop_index("ix_group_member_group_id", table_name="group_member")
    op.drop_table("group_member")
    op.drop_table("watch_group")
    op.drop_table("profile")
