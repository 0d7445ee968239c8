"""Cross-source duplicate resolution.

When several records share a ``content_hash`` only one survives. Ticketing
and registration platforms (Meetup, Luma, Eventbrite, ...) carry the booking
link, so their copy beats a venue or organizer page. Between two platforms,
or two venues, the record seen first wins.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

PLATFORM_SOURCES = frozenset(
    {
        "meetup-cambridge",
        "makespace",
        "luma-cffn",
        "luma-cue",
        "luma-cament",
        "eventbrite-cambridge",
        "eagle-labs",
    }
)

T = TypeVar("T")


def is_platform(source: Optional[str]) -> bool:
    return source in PLATFORM_SOURCES


def choose_survivor(records: Sequence[T], source_of: Callable[[T], Optional[str]]) -> T:
    """First platform record if any, else the first record. ``records`` must be in first-seen order."""
    if not records:
        raise ValueError("choose_survivor() needs at least one record")
    for record in records:
        if is_platform(source_of(record)):
            return record
    return records[0]


def _first_seen_order(row: Any) -> tuple:
    seen = getattr(row, "first_seen_at", None) or getattr(row, "scraped_at", None)
    if isinstance(seen, dt.datetime) and seen.tzinfo is not None:
        seen = seen.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return (seen or dt.datetime.max, getattr(row, "hash", ""))


def losers(group: Iterable[Any]) -> List[Any]:
    """Rows of one content-hash group that should be deleted."""
    ordered = sorted(group, key=_first_seen_order)
    if len(ordered) < 2:
        return []
    keep = choose_survivor(ordered, lambda row: row.source)
    return [row for row in ordered if row is not keep]
