"""Orchestration logic for data ingestion."""

from __future__ import annotations

import asyncio
import datetime as dt
import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Sequence, Union

from eventfeed.core.config import settings
from eventfeed.core.errors import IngestionError
from eventfeed.core.logging import get_logger
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.registry import get_collector
from eventfeed.pipeline.normalizer import Rejection, normalize
from eventfeed.schemas.events import CanonicalEvent

log = get_logger("ingestion.runner")


class SourceState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    UPSERTING = "upserting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FetchedSource:
    """A source whose listing was fetched and normalized, not yet persisted."""

    source: str
    events: List[CanonicalEvent] = field(default_factory=list)
    rejected: List[Rejection] = field(default_factory=list)


@dataclass(frozen=True)
class SourceFailed:
    source: str
    reason: str
    kind: str


class IngestionRunner:
    """Fetches and normalizes several sources concurrently.

    A failing source is reported as ``SourceFailed`` and never cancels the
    others.
    """

    def __init__(
        self,
        registry: Dict[str, BaseCollector],
        concurrency: Optional[int] = None,
        banned_locations: Optional[Sequence[Pattern[str]]] = None,
    ):
        self.registry = registry
        self.concurrency = concurrency or settings.SOURCE_CONCURRENCY
        self.banned_locations = banned_locations
        self.states: Dict[str, SourceState] = {}

    def transition(self, source: str, state: SourceState) -> None:
        self.states[source] = state
        log.bind(source=source).debug(f"state={state.value}")

    async def run(self, sources: Sequence[str]) -> Dict[str, Union[FetchedSource, SourceFailed]]:
        semaphore = asyncio.Semaphore(self.concurrency)
        for source in sources:
            self.transition(source, SourceState.IDLE)

        async def _bounded(source: str) -> Union[FetchedSource, SourceFailed]:
            async with semaphore:
                return await self._run_one(source)

        outcomes = await asyncio.gather(*(_bounded(s) for s in sources))
        return dict(zip(sources, outcomes))

    async def _run_one(self, source: str) -> Union[FetchedSource, SourceFailed]:
        try:
            collector = get_collector(self.registry, source)
            self.transition(source, SourceState.FETCHING)
            raw = await collector.fetch()
        except IngestionError as exc:
            return self._fail(source, str(exc), exc.kind)
        except Exception as exc:  # noqa: BLE001
            # Collector bugs must not take down the rest of the batch
            return self._fail(source, str(exc) or exc.__class__.__name__, "error")

        self.transition(source, SourceState.NORMALIZING)
        scraped_at = dt.datetime.now(dt.timezone.utc)
        fetched = FetchedSource(source=source)
        for record in raw:
            if record is None:
                continue
            result = normalize(record, source, scraped_at=scraped_at, banned_locations=self.banned_locations)
            if isinstance(result, Rejection):
                fetched.rejected.append(result)
            else:
                fetched.events.append(result)

        log.bind(source=source).info(
            f"Fetched | raw={len(raw)} valid={len(fetched.events)} rejected={len(fetched.rejected)}"
        )
        return fetched

    def _fail(self, source: str, reason: str, kind: str) -> SourceFailed:
        self.transition(source, SourceState.FAILED)
        log.bind(source=source).error(f"Source failed | kind={kind} reason={reason}")
        return SourceFailed(source=source, reason=reason, kind=kind)
