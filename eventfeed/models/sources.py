"""Registered sources and the outcome of their latest scrape."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eventfeed.models.base import Base


class Source(Base):
    __tablename__ = "sources"

    slug: Mapped[str] = mapped_column(String(100), primary_key=True)

    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    last_scraped_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    status: Mapped[str | None] = mapped_column(
        String(10),
        nullable=True,  # ok | error
    )

    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    event_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
