"""Text, date and time-of-day canonicalization used by the normalizer."""

from __future__ import annotations

import datetime as dt
import html
import re
from typing import Any, Optional

from eventfeed.ingestion.dates import parse_natural_date

_ISO_DAY = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ]|$)")
_RANGE_SEPARATOR = re.compile(r"\s*[-–]\s*")
_CLOCK = re.compile(r"^(\d{1,2})[:.](\d{2})$")
_MERIDIEM = re.compile(r"^(\d{1,2})(?:[.:](\d{2}))?\s*([ap])\.?m\.?$", re.IGNORECASE)


def clean_text(value: Optional[str]) -> str:
    """Decode HTML entities and collapse all whitespace runs to one space."""
    if not value:
        return ""
    return " ".join(html.unescape(value).split())


def to_day(value: Any) -> Optional[dt.date]:
    """Truncate a date-like value to its calendar day; None if unparseable.

    Free-form text must name a day, month and four-digit year; "2026" or
    "Monday" is None rather than a day borrowed from today.

    ISO strings keep the day as written (no timezone shift), matching how
    collectors report local dates.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    text = str(value).strip()
    if not text:
        return None

    iso = _ISO_DAY.match(text)
    if iso:
        try:
            return dt.date.fromisoformat(iso.group(1))
        except ValueError:
            return None

    natural = parse_natural_date(text, dayfirst=True)
    return dt.date.fromisoformat(natural) if natural else None


def _convert_token(token: str) -> str:
    t = token.strip()

    clock = _CLOCK.match(t)
    if clock:
        hour, minute = int(clock.group(1)), int(clock.group(2))
        if hour > 23 or minute > 59:
            return t
        return f"{hour:02d}:{minute:02d}"

    m = _MERIDIEM.match(t)
    if not m:
        return t

    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    if not 1 <= hour <= 12 or minute > 59:
        return t
    period = m.group(3).lower()
    if period == "p" and hour != 12:
        hour += 12
    if period == "a" and hour == 12:
        hour = 0
    return f"{hour:02d}:{minute:02d}"


def normalize_time(value: Optional[str]) -> Optional[str]:
    """``"6pm - 8.30pm"`` -> ``"18:00 - 20:30"``; each side converted on its own.

    Tokens that are not recognisable times (including out-of-range ones such
    as ``"13pm"`` or ``"25:99"``) are returned trimmed and unchanged. A range
    with a missing side collapses to the side that is present.
    """
    if not value or not value.strip():
        return None
    parts = [p for p in _RANGE_SEPARATOR.split(value.strip()) if p]
    if len(parts) == 2:
        return f"{_convert_token(parts[0])} - {_convert_token(parts[1])}"
    if len(parts) == 1:
        return _convert_token(parts[0])
    return value.strip()
