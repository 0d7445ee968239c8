"""Deterministic event fingerprints.

``hash_event`` identifies an event within one source and is the upsert key:
re-scraping the same listing always lands on the same row. ``content_hash_event``
leaves the source out (and ignores case, punctuation and a trailing speaker
suffix in the title) so the same event listed by two sources collides.
"""

from __future__ import annotations

import datetime as dt
import hashlib
import re
import unicodedata
from typing import Union

DIGEST_LENGTH = 16

# "What is Digital Identity? - Professor Jon Crowcroft" -> base title, but only
# when the base is long enough that "AI - Ethics" / "AI - Workshop" stay apart.
MIN_BASE_TITLE_WORDS = 4

_SPEAKER_SEPARATOR = re.compile(r"\s+[-–]\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")

DayLike = Union[dt.date, str]


def _nfc(value: str) -> str:
    return unicodedata.normalize("NFC", value)


def day_key(day: DayLike) -> str:
    """``YYYY-MM-DD`` for a date, datetime or ISO-ish string."""
    if isinstance(day, dt.datetime):
        return day.date().isoformat()
    if isinstance(day, dt.date):
        return day.isoformat()
    return str(day).split("T")[0].strip()


def _escape(part: str) -> str:
    # Literal "|" inside a part must not read as a separator
    return _nfc(part).replace("\\", "\\\\").replace("|", "\\|")


def _digest(*parts: str) -> str:
    seed = "|".join(_escape(p) for p in parts)
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:DIGEST_LENGTH]


def hash_event(title: str, day: DayLike, source: str) -> str:
    """Per-source identity: sha256(title|day|source), first 16 hex chars."""
    return _digest(title, day_key(day), source)


def title_key(title: str) -> str:
    """Comparison form of a title for cross-source matching."""
    text = _nfc(title).strip()
    parts = _SPEAKER_SEPARATOR.split(text, maxsplit=1)
    if len(parts) == 2 and len(parts[0].split()) >= MIN_BASE_TITLE_WORDS:
        text = parts[0]
    text = _PUNCTUATION.sub("", text.casefold())
    return " ".join(text.split())


def content_hash_event(title: str, day: DayLike) -> str:
    """Cross-source identity: sha256(title_key|day), first 16 hex chars."""
    return _digest(title_key(title), day_key(day))
