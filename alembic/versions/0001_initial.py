"""events, sources and scrape_runs tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-03-02 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("hash", sa.String(length=16), nullable=False, comment="sha256(title|day|source)[:16]"),
        sa.Column("content_hash", sa.String(length=16), nullable=True, comment="sha256(title-key|day)[:16]"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("source", sa.String(length=100), nullable=False),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("categories", sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql"), nullable=False),
        sa.Column("cost", sa.String(length=200), nullable=True),
        sa.Column("access", sa.String(length=100), nullable=True),
        sa.Column("time", sa.String(length=100), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("first_seen_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("hash"),
    )
    op.create_index("ix_events_content_hash", "events", ["content_hash"])
    op.create_index("ix_events_date", "events", ["date"])
    op.create_index("ix_events_source", "events", ["source"])

    op.create_table(
        "sources",
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("last_scraped_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=10), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("event_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("slug"),
    )

    op.create_table(
        "scrape_runs",
        sa.Column("run_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("source_name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("records_processed", sa.Integer(), nullable=False),
        sa.Column("records_rejected", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("run_id"),
    )
    op.create_index("ix_scrape_runs_source_name", "scrape_runs", ["source_name"])


def downgrade() -> None:
    op.drop_index("ix_scrape_runs_source_name", table_name="scrape_runs")
    op.drop_table("scrape_runs")
    op.drop_table("sources")
    op.drop_index("ix_events_source", table_name="events")
    op.drop_index("ix_events_date", table_name="events")
    op.drop_index("ix_events_content_hash", table_name="events")
    op.drop_table("events")
