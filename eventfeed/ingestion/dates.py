"""Date parsing helpers shared by collectors.

All parsers return ``YYYY-MM-DD`` strings (or None) so collectors can hand
them straight to the normalizer.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil import parser as dtparser

from eventfeed.core.config import settings

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Day+month without a year more than this far in the past is taken as next year.
PAST_TOLERANCE_DAYS = 30

_ORDINAL = re.compile(r"(\d+)(st|nd|rd|th)\b", re.IGNORECASE)
_DAY_MONTH_YEAR = re.compile(r"(\d{1,2})\s+([A-Za-z]+)\s+(\d{4})")
_DD_MM_YYYY = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_DAY_MONTH = re.compile(r"(\d{1,2})\s+([A-Za-z]+)")
_MONTH_DAY = re.compile(r"([A-Za-z]+)\s+(\d{1,2})\b")
_YEAR = re.compile(r"\b\d{4}\b")

# Differ in year, month and day so any field dateutil fills in shows up.
_FILL_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))


def _iso(year: int, month: int, day: int) -> Optional[str]:
    try:
        return dt.date(year, month, day).isoformat()
    except ValueError:
        return None


def strip_ordinals(text: str) -> str:
    return _ORDINAL.sub(r"\1", text)


def parse_day_month_year(text: str) -> Optional[str]:
    """``"Thursday 16 April 2026"`` / ``"24th February 2026"`` -> ``"2026-04-16"``."""
    match = _DAY_MONTH_YEAR.search(strip_ordinals(text.strip()))
    if not match:
        return None
    month = MONTHS.get(match.group(2).lower())
    if month is None:
        return None
    return _iso(int(match.group(3)), month, int(match.group(1)))


def parse_dd_mm_yyyy(text: str) -> Optional[str]:
    match = _DD_MM_YYYY.match(text.strip())
    if not match:
        return None
    return _iso(int(match.group(3)), int(match.group(2)), int(match.group(1)))


def parse_natural_date(text: str, dayfirst: bool = False) -> Optional[str]:
    """Anything dateutil understands that names a full day: ``"Feb 16, 2026"``.

    dateutil fills missing fields from a default datetime, so the text is
    parsed against two defaults that differ in every field; a result that
    moves with the default was partly invented and is rejected.
    """
    text = text.strip()
    if not _YEAR.search(text):
        return None
    try:
        first, second = (dtparser.parse(text, dayfirst=dayfirst, default=d) for d in _FILL_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date().isoformat()


def parse_day_month_infer(text: str, today: Optional[dt.date] = None) -> Optional[str]:
    """``"16 April"`` or ``"February 12"`` with the year inferred from ``today``."""
    cleaned = strip_ordinals(text.strip())
    match = _DAY_MONTH.search(cleaned)
    if match:
        day_str, month_str = match.group(1), match.group(2)
    else:
        match = _MONTH_DAY.search(cleaned)
        if not match:
            return None
        month_str, day_str = match.group(1), match.group(2)

    month = MONTHS.get(month_str.lower()[:3]) or MONTHS.get(month_str.lower())
    if month is None:
        return None
    day = int(day_str)

    today = today or dt.date.today()
    year = today.year
    try:
        candidate = dt.date(year, month, day)
    except ValueError:
        return None
    if candidate < today - dt.timedelta(days=PAST_TOLERANCE_DAYS):
        year += 1
    return _iso(year, month, day)


def parse_listing_date(text: str, today: Optional[dt.date] = None) -> Optional[str]:
    """Day from a listing's visible date label, most specific format first.

    ``"05/03/2026"``, ``"Thursday 16 April 2026"``, ``"April 16, 2026"`` and,
    when the site leaves the year out, ``"April 16"``. Anything after an ``@``
    (the time part of "April 16 @ 6:00 pm") is ignored.
    """
    label = text.split("@")[0].strip()
    if not label:
        return None
    return (
        parse_dd_mm_yyyy(label)
        or parse_day_month_year(label)
        or parse_natural_date(label, dayfirst=True)
        or parse_day_month_infer(label, today=today)
    )


def to_local(value: dt.datetime) -> dt.datetime:
    """Aware datetimes converted to the feed's local timezone; naive ones are assumed local."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.LOCAL_TIMEZONE))


def format_time(value: dt.datetime) -> str:
    return to_local(value).strftime("%H:%M")


def format_time_range(start: dt.datetime, end: Optional[dt.datetime] = None) -> str:
    if end is None:
        return format_time(start)
    return f"{format_time(start)} - {format_time(end)}"


def parse_datetime(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    try:
        return dtparser.isoparse(value)
    except (ValueError, OverflowError):
        pass
    try:
        return dtparser.parse(value)
    except (ValueError, OverflowError):
        return None


def local_day(value: dt.datetime) -> str:
    return to_local(value).date().isoformat()
