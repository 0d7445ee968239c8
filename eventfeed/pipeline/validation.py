"""Gatekeeping for raw collector records.

Records without a title, date or source cannot be identified and are dropped.
Missing recommended fields only produce warnings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Sequence

from eventfeed.core.config import settings
from eventfeed.core.logging import get_logger
from eventfeed.schemas.events import RawRecord

log = get_logger("pipeline.validation")

REQUIRED_FIELDS = ("title", "date", "source")
RECOMMENDED_FIELDS = ("location", "description", "time", "image_url", "source_url")


@dataclass(frozen=True)
class ValidationResult:
    record: Optional[RawRecord]
    reason: Optional[str] = None
    missing_recommended: List[str] = field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return self.record is None


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def compile_banned_locations(patterns: Sequence[str]) -> List[Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def validate(
    raw: RawRecord,
    source_id: Optional[str] = None,
    banned_locations: Optional[Sequence[Pattern[str]]] = None,
) -> ValidationResult:
    """Return the record with any warnings, or a rejection with its reason. Never raises."""
    source_id = source_id or raw.source or "unknown"
    title = raw.title if not _is_blank(raw.title) else "(no title)"
    slog = log.bind(source=source_id)

    for name in REQUIRED_FIELDS:
        if _is_blank(getattr(raw, name)):
            reason = f'missing required field "{name}"'
            slog.warning(f"Rejected event: {reason} | title={title}")
            return ValidationResult(record=None, reason=reason)

    if banned_locations is None:
        banned_locations = compile_banned_locations(settings.BANNED_LOCATION_PATTERNS)
    if raw.location:
        for pattern in banned_locations:
            if pattern.search(raw.location):
                reason = f"banned location matched {pattern.pattern!r}"
                slog.warning(f"Rejected event: {reason} | title={title} location={raw.location}")
                return ValidationResult(record=None, reason=reason)

    missing = [name for name in RECOMMENDED_FIELDS if _is_blank(getattr(raw, name))]
    for name in missing:
        slog.warning(f"Missing recommended field: {name} | title={title}")

    return ValidationResult(record=raw, missing_recommended=missing)
