"""Raw collector record -> CanonicalEvent."""

from __future__ import annotations

import datetime as dt
import html
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Pattern, Sequence, Union

from pydantic import ValidationError

from eventfeed.classification import classify, extract_cost, infer_access
from eventfeed.classification.categories import MAX_CATEGORIES
from eventfeed.core.logging import get_logger
from eventfeed.pipeline.identity import content_hash_event, hash_event
from eventfeed.pipeline.text import clean_text, normalize_time, to_day
from eventfeed.pipeline.validation import validate
from eventfeed.schemas.events import CanonicalEvent, RawRecord

log = get_logger("pipeline.normalizer")


@dataclass(frozen=True)
class Rejection:
    """A raw record that could not become a CanonicalEvent."""

    source: Optional[str]
    title: Optional[str]
    reason: str


NormalizeResult = Union[CanonicalEvent, Rejection]


def _as_raw(raw: Union[RawRecord, Mapping[str, Any]]) -> RawRecord:
    if isinstance(raw, RawRecord):
        return raw
    return RawRecord.model_validate(dict(raw))


def normalize(
    raw: Union[RawRecord, Mapping[str, Any]],
    source_id: Optional[str] = None,
    *,
    scraped_at: Optional[dt.datetime] = None,
    banned_locations: Optional[Sequence[Pattern[str]]] = None,
) -> NormalizeResult:
    """Validate, clean and classify one raw record.

    Categories come from the classifier unless the collector supplied its own
    list. Access and cost fall back to what the description says.
    """
    try:
        record = _as_raw(raw)
    except ValidationError as exc:
        title = raw.get("title") if isinstance(raw, Mapping) else None
        return Rejection(source=source_id, title=title, reason=f"malformed record: {exc.error_count()} field error(s)")

    result = validate(record, source_id, banned_locations=banned_locations)
    if result.rejected:
        return Rejection(source=record.source or source_id, title=record.title, reason=result.reason or "rejected")

    title = record.title.strip()
    source = record.source.strip()

    day = to_day(record.date)
    if day is None:
        log.bind(source=source).warning(f"Rejected event: unparseable date {record.date!r} | title={title}")
        return Rejection(source=source, title=title, reason=f"unparseable date {record.date!r}")

    end_day = to_day(record.end_date)
    if record.end_date and end_day is None:
        log.bind(source=source).warning(f"Ignoring unparseable endDate {record.end_date!r} | title={title}")

    description = html.unescape(record.description or "").strip()

    if record.categories is not None:
        categories = [c for c in record.categories if c][:MAX_CATEGORIES]
    else:
        categories = classify(title, description)

    return CanonicalEvent(
        title=title,
        description=description,
        date=day,
        end_date=end_day,
        source=source,
        source_url=record.source_url or None,
        location=clean_text(record.location),
        categories=categories,
        cost=record.cost or extract_cost(description),
        access=record.access or infer_access(description),
        time=normalize_time(record.time),
        image_url=record.image_url or None,
        scraped_at=scraped_at or dt.datetime.now(dt.timezone.utc),
        hash=hash_event(title, day, source),
        content_hash=content_hash_event(title, day),
    )
