"""Failure handling and isolation tests"""

import datetime as dt

import pytest

from eventfeed.core.errors import FetchError, SourceShapeError
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.runner import FetchedSource, IngestionRunner, SourceFailed, SourceState
from eventfeed.schemas.events import RawRecord


def upcoming(days=7):
    return (dt.date.today() + dt.timedelta(days=days)).isoformat()


class StaticCollector(BaseCollector):
    """Mock collector returning fixed records"""

    def __init__(self, name, records):
        super().__init__()
        self.name = name
        self.records = records

    async def fetch(self):
        return list(self.records)


class FailingCollector(BaseCollector):
    """Mock collector that raises"""

    def __init__(self, name, exc):
        super().__init__()
        self.name = name
        self.exc = exc

    async def fetch(self):
        raise self.exc


class TestIngestionRunner:
    """One source failing never affects the others"""

    @pytest.mark.asyncio
    async def test_network_failure_isolated(self):
        registry = {
            "allia": FailingCollector("allia", FetchError("https://www.allia.org.uk/events", "503", status_code=503)),
            "venture-cafe": StaticCollector(
                "venture-cafe", [RawRecord(title="Venture Cafe", date=upcoming(), source="venture-cafe")]
            ),
        }
        runner = IngestionRunner(registry)
        outcomes = await runner.run(["allia", "venture-cafe"])

        failed = outcomes["allia"]
        assert isinstance(failed, SourceFailed)
        assert failed.kind == "network"
        assert "503" in failed.reason

        ok = outcomes["venture-cafe"]
        assert isinstance(ok, FetchedSource)
        assert len(ok.events) == 1
        assert runner.states == {"allia": SourceState.FAILED, "venture-cafe": SourceState.NORMALIZING}

    @pytest.mark.asyncio
    async def test_shape_change_distinguished_from_transient(self):
        registry = {"luma-cue": FailingCollector("luma-cue", SourceShapeError("luma-cue", "entries missing"))}
        outcome = (await IngestionRunner(registry).run(["luma-cue"]))["luma-cue"]
        assert outcome.kind == "shape"
        assert "shape changed" in outcome.reason

    @pytest.mark.asyncio
    async def test_unexpected_exception_caught(self):
        registry = {"luma-cue": FailingCollector("luma-cue", RuntimeError("boom"))}
        outcome = (await IngestionRunner(registry).run(["luma-cue"]))["luma-cue"]
        assert isinstance(outcome, SourceFailed)
        assert outcome.reason == "boom"

    @pytest.mark.asyncio
    async def test_missing_collector(self):
        outcome = (await IngestionRunner({}).run(["luma-cue"]))["luma-cue"]
        assert isinstance(outcome, SourceFailed)
        assert outcome.kind == "config"
        assert outcome.reason == "No scraper found"

    @pytest.mark.asyncio
    async def test_invalid_records_rejected_not_fatal(self):
        records = [
            RawRecord(title="Good", date=upcoming(), source="allia"),
            RawRecord(title=None, date=upcoming(), source="allia"),
            RawRecord(title="Bad date", date="someday", source="allia"),
        ]
        outcome = (await IngestionRunner({"allia": StaticCollector("allia", records)}).run(["allia"]))["allia"]
        assert [e.title for e in outcome.events] == ["Good"]
        assert len(outcome.rejected) == 2

    @pytest.mark.asyncio
    async def test_results_keep_requested_order(self):
        registry = {slug: StaticCollector(slug, []) for slug in ("b", "a", "c")}
        outcomes = await IngestionRunner(registry, concurrency=1).run(["b", "a", "c"])
        assert list(outcomes) == ["b", "a", "c"]
