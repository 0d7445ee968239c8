"""End-to-end scrape service: fetch, normalize, persist, clean up."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Sequence, Union

from dateutil.relativedelta import relativedelta
from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from eventfeed.core.config import settings
from eventfeed.core.logging import get_logger
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.registry import SOURCES, build_registry, registered_sources, sources_for_batch
from eventfeed.ingestion.runner import FetchedSource, IngestionRunner, SourceFailed, SourceState
from eventfeed.models.events import Event
from eventfeed.models.runs import ScrapeRun
from eventfeed.models.sources import Source
from eventfeed.pipeline.dedup import losers
from eventfeed.schemas.events import CanonicalEvent

log = get_logger("scrape_service")

# Columns refreshed when a record is re-scraped; first_seen_at is never touched.
UPDATABLE_COLUMNS = (
    "content_hash",
    "title",
    "description",
    "date",
    "end_date",
    "source",
    "source_url",
    "location",
    "categories",
    "cost",
    "access",
    "time",
    "image_url",
    "scraped_at",
)


@dataclass(frozen=True)
class SourceOk:
    source: str
    count: int
    rejected: int = 0


SourceResult = Union[SourceOk, SourceFailed]


@dataclass
class ScrapeSummary:
    sources: List[str]
    results: Dict[str, SourceResult]
    expired: int = 0
    deregistered: int = 0
    duplicates: int = 0

    @property
    def failed(self) -> List[str]:
        return [slug for slug, r in self.results.items() if isinstance(r, SourceFailed)]

    def as_response(self) -> Dict[str, Any]:
        """``{"sources": n, "results": {slug: {...}}}`` as returned by the trigger."""
        results: Dict[str, Dict[str, Any]] = {}
        for slug, result in self.results.items():
            if isinstance(result, SourceOk):
                results[slug] = {"status": "ok", "events": result.count}
            else:
                results[slug] = {"status": "error", "error": result.reason}
        return {"sources": len(self.sources), "results": results}


def retention_cutoff(today: Optional[dt.date] = None, months: Optional[int] = None) -> dt.date:
    today = today or dt.date.today()
    return today - relativedelta(months=months if months is not None else settings.RETENTION_MONTHS)


class ScrapeService:
    """Runs a scrape batch against the database.

    Responsibilities:
    - Fetch and normalize each source concurrently (via ``IngestionRunner``)
    - Replace each successful source's rows: stale delete, then upsert by hash
    - Record per-source status in ``sources`` and ``scrape_runs``
    - Expire old events, drop deregistered sources, reconcile duplicates
    """

    def __init__(
        self,
        db: Session,
        registry: Optional[Dict[str, BaseCollector]] = None,
        banned_locations: Optional[Sequence[Pattern[str]]] = None,
    ):
        self.db = db
        self.registry = registry if registry is not None else build_registry()
        self.banned_locations = banned_locations

    async def run(self, batch: Optional[int] = None) -> ScrapeSummary:
        sources = sources_for_batch(batch)
        log.info(f"Starting scrape | batch={batch} sources={len(sources)}")

        runs = {slug: self._start_run(slug) for slug in sources}

        runner = IngestionRunner(self.registry, banned_locations=self.banned_locations)
        outcomes = await runner.run(sources)

        results: Dict[str, SourceResult] = {}
        for slug in sources:
            outcome = outcomes[slug]
            if isinstance(outcome, FetchedSource):
                runner.transition(slug, SourceState.UPSERTING)
                outcome = self._persist_source(outcome)
                if isinstance(outcome, SourceOk):
                    runner.transition(slug, SourceState.DONE)
                else:
                    runner.transition(slug, SourceState.FAILED)
            results[slug] = outcome
            self._finish_run(runs[slug], outcome)

        summary = ScrapeSummary(sources=sources, results=results)
        summary.expired = self.purge_expired()
        summary.deregistered = self.purge_deregistered()
        summary.duplicates = self.reconcile_duplicates()

        log.info(
            f"Scrape finished | batch={batch} ok={len(sources) - len(summary.failed)} "
            f"failed={len(summary.failed)} expired={summary.expired} "
            f"deregistered={summary.deregistered} duplicates={summary.duplicates}"
        )
        return summary

    # -------------------------------------------------------------------------
    # Per-source persistence
    # -------------------------------------------------------------------------
    def _persist_source(self, fetched: FetchedSource) -> SourceResult:
        slug = fetched.source
        now = dt.datetime.now(dt.timezone.utc)
        try:
            rows = self._dedup_batch(fetched.events)
            self._delete_stale(slug, list(rows))
            self._upsert_events(list(rows.values()))
            self._touch_source(slug, now, status="ok", event_count=len(rows))
            self.db.commit()
        except Exception as exc:  # noqa: BLE001
            self.db.rollback()
            log.bind(source=slug).error(f"Persist failed: {exc}")
            failed = SourceFailed(source=slug, reason=str(exc), kind="storage")
            self._record_failure(slug, now, failed)
            return failed

        log.bind(source=slug).info(f"Persisted | events={len(rows)} rejected={len(fetched.rejected)}")
        return SourceOk(source=slug, count=len(rows), rejected=len(fetched.rejected))

    @staticmethod
    def _dedup_batch(events: List[CanonicalEvent]) -> Dict[str, Dict[str, Any]]:
        # Same hash twice in one listing: the later record wins
        rows: Dict[str, Dict[str, Any]] = {}
        for event in events:
            rows[event.hash] = event.to_row()
        return rows

    def _delete_stale(self, slug: str, fresh_hashes: List[str]) -> int:
        stmt = delete(Event).where(Event.source == slug)
        if fresh_hashes:
            stmt = stmt.where(Event.hash.not_in(fresh_hashes))
        deleted = self.db.execute(stmt).rowcount or 0
        if deleted:
            log.bind(source=slug).info(f"Removed stale events | count={deleted}")
        return deleted

    def _insert(self):
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite_insert
        return pg_insert

    def _upsert_events(self, rows: List[Dict[str, Any]]) -> None:
        """Upsert canonical rows by hash (idempotent write)."""
        if not rows:
            return

        stmt = self._insert()(Event).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Event.hash],
            set_={col: stmt.excluded[col] for col in UPDATABLE_COLUMNS},
        )
        self.db.execute(stmt)

    def _touch_source(
        self,
        slug: str,
        now: dt.datetime,
        status: str,
        event_count: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        row = self.db.get(Source, slug)
        if row is None:
            row = Source(slug=slug, event_count=0)
            self.db.add(row)

        meta = SOURCES.get(slug)
        if meta is not None:
            row.name = meta.name
            row.url = meta.url
            row.description = meta.description
        row.last_scraped_at = now
        row.status = status
        row.last_error = error
        if event_count is not None:
            row.event_count = event_count

    def _record_failure(self, slug: str, now: dt.datetime, failed: SourceFailed) -> None:
        self._touch_source(slug, now, status="error", error=failed.reason)
        self.db.commit()

    # -------------------------------------------------------------------------
    # Run tracking
    # -------------------------------------------------------------------------
    def _start_run(self, slug: str) -> ScrapeRun:
        run = ScrapeRun(source_name=slug, status="running", records_processed=0, records_rejected=0)
        self.db.add(run)
        self.db.commit()
        return run

    def _finish_run(self, run: ScrapeRun, result: SourceResult) -> None:
        now = dt.datetime.now(dt.timezone.utc)
        if isinstance(result, SourceOk):
            run.status = "success"
            run.records_processed = result.count
            run.records_rejected = result.rejected
        else:
            run.status = "failure"
            run.error_message = f"[{result.kind}] {result.reason}"
            # Storage failures already marked the source in _persist_source
            if result.kind != "storage":
                self._touch_source(result.source, now, status="error", error=result.reason)
        run.ended_at = now
        self.db.add(run)
        self.db.commit()

    # -------------------------------------------------------------------------
    # Global cleanup
    # -------------------------------------------------------------------------
    def purge_expired(self, today: Optional[dt.date] = None) -> int:
        cutoff = retention_cutoff(today)
        deleted = self.db.execute(delete(Event).where(Event.date < cutoff)).rowcount or 0
        self.db.commit()
        if deleted:
            log.info(f"Expired events removed | before={cutoff.isoformat()} count={deleted}")
        return deleted

    def purge_deregistered(self) -> int:
        registered = registered_sources()
        deleted = self.db.execute(delete(Event).where(Event.source.not_in(registered))).rowcount or 0
        self.db.commit()
        if deleted:
            log.info(f"Events from deregistered sources removed | count={deleted}")
        return deleted

    def reconcile_duplicates(self) -> int:
        """Collapse every content-hash group to a single survivor."""
        dup_keys = (
            select(Event.content_hash)
            .where(Event.content_hash.is_not(None))
            .group_by(Event.content_hash)
            .having(func.count() > 1)
        )
        keys = list(self.db.execute(dup_keys).scalars())
        if not keys:
            return 0

        stmt = select(Event).where(Event.content_hash.in_(keys)).execution_options(populate_existing=True)
        rows = self.db.execute(stmt).scalars().all()
        groups: Dict[str, List[Event]] = {}
        for row in rows:
            groups.setdefault(row.content_hash, []).append(row)

        removed = 0
        for content_hash, group in groups.items():
            doomed = losers(group)
            for row in doomed:
                log.bind(source=row.source).debug(f"Duplicate removed | content_hash={content_hash} hash={row.hash}")
                self.db.delete(row)
            removed += len(doomed)

        self.db.commit()
        if removed:
            log.info(f"Cross-source duplicates removed | groups={len(groups)} rows={removed}")
        return removed
