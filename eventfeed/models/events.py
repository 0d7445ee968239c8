"""Canonical event table - one row per (title, day, source), keyed by hash."""

import datetime as dt

from sqlalchemy import JSON, Date, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from eventfeed.models.base import Base


class Event(Base):
    """Latest-known state of an event as scraped from one source.

    ``hash`` is the per-source identity and the upsert key. ``content_hash``
    ignores the source so that the same real-world event reported by two
    sources lands in the same group for cross-source reconciliation.
    """

    __tablename__ = "events"

    hash: Mapped[str] = mapped_column(String(16), primary_key=True, comment="sha256(title|day|source)[:16]")

    content_hash: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True, comment="sha256(title-key|day)[:16]")

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

    source: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    source_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(Text, nullable=False, default="")

    categories: Mapped[list] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)

    cost: Mapped[str | None] = mapped_column(String(200), nullable=True)
    access: Mapped[str | None] = mapped_column(String(100), nullable=True)
    time: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    scraped_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    # Set on first insert only; upserts never touch it.
    first_seen_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
