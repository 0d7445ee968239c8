"""Ingestion error taxonomy.

Validation failures are not exceptions: the validator returns a rejection and
the record is dropped. Everything below is raised inside a source's pipeline
and caught at the source boundary by the scrape service.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for failures that abort a single source's run."""

    kind = "error"


class FetchError(IngestionError):
    """Network failure: timeout, connection error or non-2xx status."""

    kind = "network"

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class SourceShapeError(IngestionError):
    """An upstream API or page no longer looks the way the collector expects."""

    kind = "shape"

    def __init__(self, source: str, detail: str):
        self.source = source
        super().__init__(f"response shape changed for {source}: {detail}")


class ParseError(IngestionError):
    """Malformed payload (invalid JSON/XML/HTML fragment)."""

    kind = "parse"


class CollectorNotFoundError(IngestionError):
    kind = "config"

    def __init__(self, source: str):
        self.source = source
        super().__init__("No scraper found")
