"""initial schema: links, captcha sessions, link votes

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.220517

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the link, session and vote tables."""
    op.create_table(
        "links",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.CheckConstraint("status IN ('approved', 'pending')", name="ck_links_status"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_links_status", "links", ["status"])

    op.create_table(
        "captcha_sessions",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=False),
        sa.Column("ua_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "link_vote",
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("link_id", sa.Integer(), nullable=False),
        sa.Column("direction", sa.SmallInteger(), nullable=False),
        sa.CheckConstraint("direction IN (1, -1)", name="ck_link_vote_direction"),
        sa.ForeignKeyConstraint(["session_id"], ["captcha_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["link_id"], ["links.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("session_id", "link_id"),
    )
    op.create_index("ix_link_vote_link_id", "link_vote", ["link_id"])


def downgrade() -> None:
    """Drop everything created by upgrade()."""
    op.drop_index("ix_link_vote_link_id", table_name="link_vote")
    op.drop_table("link_vote")
    op.drop_table("captcha_sessions")
    op.drop_index("ix_links_status", table_name="links")
    op.drop_table("links")
