"""Luma calendar collector.

The calendar API lists events but not their descriptions; those live in the
``description_mirror`` ProseMirror document embedded in each event page. One
detail fetch per event, bounded, and a failed detail fetch only costs that
event its description.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import httpx

from eventfeed.core.errors import FetchError, ParseError, SourceShapeError
from eventfeed.core.logging import get_logger
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.dates import format_time_range, local_day, parse_datetime
from eventfeed.ingestion.http import fetch_json, fetch_soup, gather_bounded, next_data, open_client
from eventfeed.schemas.events import RawRecord

log = get_logger("ingestion.luma")

LUMA_API = "https://api.lu.ma"
LUMA_WEB = "https://luma.com"
DESCRIPTION_LIMIT = 500

_CALENDAR_ID = re.compile(r"calendar/(cal-[A-Za-z0-9]+)")


def mirror_text(node: Any) -> str:
    """Plain text of a ProseMirror document."""
    if not isinstance(node, dict):
        return ""
    parts: List[str] = []
    if node.get("type") == "text":
        parts.append(node.get("text") or "")
    for child in node.get("content") or []:
        parts.append(mirror_text(child))
    return " ".join(" ".join(parts).split())


def _dig(data: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


class LumaCollector(BaseCollector):
    """Collects a Luma calendar, given either a ``/calendar/cal-...`` URL or an org page."""

    def __init__(self, name: str, url: str, client: Optional[httpx.AsyncClient] = None):
        super().__init__(client)
        self.name = name
        self.url = url

    async def fetch(self) -> List[RawRecord]:
        log.bind(source=self.name).info(f"Starting scrape | url={self.url}")
        async with open_client(self.client) as client:
            entries = await self._entries(client)
            records = await gather_bounded(entries, lambda entry: self._parse_entry(client, entry))

        results = [r for r in records if r is not None]
        log.bind(source=self.name).info(f"Scrape complete | events={len(results)}")
        return results

    async def _entries(self, client: httpx.AsyncClient) -> List[Dict[str, Any]]:
        cal_match = _CALENDAR_ID.search(self.url)
        if cal_match:
            return await self._calendar_entries(client, cal_match.group(1))

        # Org page: calendar id (or featured items) from the embedded page state
        state = next_data(await fetch_soup(client, self.url))
        if state is None:
            raise SourceShapeError(self.name, "org page has no __NEXT_DATA__")

        data = _dig(state, "props", "pageProps", "initialData", "data") or {}
        calendar_id = _dig(data, "calendar", "api_id")
        if calendar_id:
            entries = await self._calendar_entries(client, calendar_id)
            if entries:
                return entries

        featured = data.get("featured_items")
        if isinstance(featured, list):
            return featured
        if calendar_id:
            return []
        raise SourceShapeError(self.name, "org page state has neither calendar.api_id nor featured_items")

    async def _calendar_entries(self, client: httpx.AsyncClient, calendar_id: str) -> List[Dict[str, Any]]:
        data = await fetch_json(client, f"{LUMA_API}/calendar/get-items", params={"calendar_api_id": calendar_id})
        if not isinstance(data, dict) or not isinstance(data.get("entries", []), list):
            raise SourceShapeError(self.name, "calendar/get-items no longer returns an entries list")
        return data.get("entries", [])

    async def _description(self, client: httpx.AsyncClient, slug: str) -> str:
        state = next_data(await fetch_soup(client, f"{LUMA_WEB}/{slug}"))
        mirror = _dig(state, "props", "pageProps", "initialData", "data", "description_mirror")
        return mirror_text(mirror)[:DESCRIPTION_LIMIT]

    async def _parse_entry(self, client: httpx.AsyncClient, entry: Dict[str, Any]) -> Optional[RawRecord]:
        evt = entry.get("event") if isinstance(entry, dict) else None
        if not isinstance(evt, dict) or not evt.get("name") or not evt.get("start_at"):
            return None

        start = parse_datetime(evt.get("start_at"))
        if start is None:
            return None
        end = parse_datetime(evt.get("end_at"))

        geo = evt.get("geo_address_info") or {}
        location = geo.get("description") or geo.get("address") or geo.get("city") or ""
        if not location and evt.get("location_type") == "zoom":
            location = "Online (Zoom)"

        slug = evt.get("url")
        description = ""
        if slug:
            try:
                description = await self._description(client, slug)
            except (FetchError, ParseError) as exc:
                log.bind(source=self.name).warning(f"Description fetch failed | event={evt['name']} error={exc}")

        return RawRecord(
            title=evt["name"],
            description=description,
            date=local_day(start),
            source=self.name,
            source_url=f"{LUMA_WEB}/{slug}" if slug else self.url,
            location=location,
            time=format_time_range(start, end) if end else None,
            image_url=evt.get("cover_url") or None,
        )
