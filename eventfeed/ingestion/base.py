"""Abstract collector interface for ingestion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

import httpx

from eventfeed.schemas.events import RawRecord


class BaseCollector(ABC):
    """Translates one website's listings into raw records.

    Collectors only fetch and extract; validation, classification and
    hashing happen in the normalizer. A collector raises for failures that
    make the whole listing unusable and degrades individual records for
    anything smaller.
    """

    name: str

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        # Injected clients are owned by the caller and never closed here.
        self.client = client

    @abstractmethod
    async def fetch(self) -> List[RawRecord]:
        """Fetch raw records for this source."""
