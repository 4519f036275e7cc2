"""Create publisher_updates table"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "publisher_updates",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("publisher", sa.String(length=128), nullable=False),
        sa.Column("publisher_slug", sa.String(length=64), nullable=False),
        sa.Column("source_feed_url", sa.String(length=2048), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("summary", sa.String(length=500), nullable=True),
        sa.Column("link", sa.String(length=2048), nullable=False),
        sa.Column("image_url", sa.String(length=2048), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.UniqueConstraint("link", name="uq_publisher_updates_link"),
    )
    op.create_index(
        "ix_publisher_updates_published_at",
        "publisher_updates",
        ["published_at"],
        unique=False,
    )
    op.create_index(
        "ix_publisher_updates_slug_published",
        "publisher_updates",
        ["publisher_slug", "published_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_publisher_updates_slug_published", table_name="publisher_updates")
    op.drop_index("ix_publisher_updates_published_at", table_name="publisher_updates")
    op.drop_table("publisher_updates")
