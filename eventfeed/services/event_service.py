"""Event Service - Read-side queries for the event feed and source status."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventfeed.core.logging import get_logger
from eventfeed.models.events import Event
from eventfeed.models.runs import ScrapeRun
from eventfeed.models.sources import Source

log = get_logger("event_service")


class EventService:
    """Handles all read operations - reads from DB only, no writes."""

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------
    def list_events(self, source: Optional[str] = None) -> List[Event]:
        """All persisted events ordered by date, then title."""
        stmt = select(Event)
        if source:
            stmt = stmt.where(Event.source == source)
        stmt = stmt.order_by(Event.date.asc(), Event.title.asc())
        return list(self.db.execute(stmt).scalars().all())

    # -------------------------------------------------------------------------
    # Sources & runs
    # -------------------------------------------------------------------------
    def list_sources(self) -> List[Source]:
        stmt = select(Source).order_by(Source.slug)
        return list(self.db.execute(stmt).scalars().all())

    def get_scrape_runs(
        self,
        source: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 10,
    ) -> List[ScrapeRun]:
        """Get recent scrape runs with optional filtering."""
        stmt = select(ScrapeRun)

        if source:
            stmt = stmt.where(ScrapeRun.source_name == source)
        if status:
            stmt = stmt.where(ScrapeRun.status == status)

        stmt = stmt.order_by(ScrapeRun.started_at.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_latest_run(self) -> Optional[ScrapeRun]:
        stmt = select(ScrapeRun).order_by(ScrapeRun.started_at.desc()).limit(1)
        return self.db.execute(stmt).scalar_one_or_none()
