"""Source registry: metadata, batches and the slug -> collector table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Type

import httpx

from eventfeed.core.errors import CollectorNotFoundError
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.luma import LumaCollector
from eventfeed.ingestion.tribe_events import TribeEventsApiCollector, TribeEventsListCollector


@dataclass(frozen=True)
class SourceMeta:
    name: str
    url: str
    description: str
    collector: Type[BaseCollector]
    # Where the collector reads from, when that differs from the public url
    endpoint: Optional[str] = None


SOURCES: Dict[str, SourceMeta] = {
    "venture-cafe": SourceMeta(
        name="Venture Cafe Cambridge Connect",
        url="https://venturecafecambridgeconnect.org",
        description="Monthly open networking for founders, hosted by Innovate Cambridge",
        collector=TribeEventsApiCollector,
        endpoint="https://venturecafecambridgeconnect.org/wp-json/tribe/events/v1/events",
    ),
    "allia": SourceMeta(
        name="Allia Future Business Centre",
        url="https://www.allia.org.uk/future-business-centres/cambridge",
        description="Social impact, sustainability, and purpose-led events",
        collector=TribeEventsListCollector,
        endpoint="https://www.allia.org.uk/events",
    ),
    "luma-cffn": SourceMeta(
        name="Cambridge Female Founders Network",
        url="https://luma.com/cffn",
        description="Events for female founders and women in tech",
        collector=LumaCollector,
    ),
    "luma-cue": SourceMeta(
        name="CUE",
        url="https://luma.com/calendar/cal-MzlTbMD9szD8luR",
        description="Cambridge University Entrepreneurs events and workshops",
        collector=LumaCollector,
    ),
    "luma-cament": SourceMeta(
        name="CAMentrepreneurs",
        url="https://luma.com/calendar/cal-l9LcwWCujMeozTm",
        description="Cambridge alumni entrepreneurship network events",
        collector=LumaCollector,
    ),
}

# Each batch runs on its own cron tick to spread load across invocations.
BATCHES: Dict[int, List[str]] = {
    0: ["venture-cafe", "allia"],
    1: ["luma-cffn", "luma-cue", "luma-cament"],
}


def registered_sources() -> List[str]:
    """Every slug that appears in some batch, in batch order."""
    return [slug for batch in BATCHES.values() for slug in batch]


def sources_for_batch(batch: Optional[int]) -> List[str]:
    """Slugs for ``batch``; an absent or unknown batch means every registered source."""
    if batch is not None and batch in BATCHES:
        return list(BATCHES[batch])
    return registered_sources()


def build_registry(client: Optional[httpx.AsyncClient] = None) -> Dict[str, BaseCollector]:
    return {
        slug: meta.collector(name=slug, url=meta.endpoint or meta.url, client=client)
        for slug, meta in SOURCES.items()
    }


def get_collector(registry: Dict[str, BaseCollector], slug: str) -> BaseCollector:
    try:
        return registry[slug]
    except KeyError:
        raise CollectorNotFoundError(slug) from None
