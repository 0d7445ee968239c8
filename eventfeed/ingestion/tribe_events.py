"""Collectors for WordPress sites running The Events Calendar ("tribe events").

Some sites expose the plugin's REST API, others only the rendered list view.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

import httpx
from bs4 import Tag

from eventfeed.core.errors import SourceShapeError
from eventfeed.core.logging import get_logger
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.dates import format_time_range, parse_datetime, parse_day_month_year, parse_listing_date
from eventfeed.ingestion.http import absolute_url, fetch_json, fetch_soup, open_client, strip_tags
from eventfeed.schemas.events import RawRecord

log = get_logger("ingestion.tribe_events")

PER_PAGE = 50


class TribeEventsApiCollector(BaseCollector):
    """Reads ``/wp-json/tribe/events/v1/events``."""

    def __init__(self, name: str, url: str, client: Optional[httpx.AsyncClient] = None):
        super().__init__(client)
        self.name = name
        self.url = url

    async def fetch(self) -> List[RawRecord]:
        log.bind(source=self.name).info(f"Starting scrape | url={self.url}")
        async with open_client(self.client) as client:
            data = await fetch_json(client, self.url, params={"per_page": PER_PAGE})

        if not isinstance(data, dict) or not isinstance(data.get("events"), list):
            raise SourceShapeError(self.name, "tribe API response has no events list")

        records = [r for r in (self._parse(evt) for evt in data["events"]) if r is not None]
        log.bind(source=self.name).info(f"Scrape complete | events={len(records)}")
        return records

    def _parse(self, evt: Dict[str, Any]) -> Optional[RawRecord]:
        if not isinstance(evt, dict) or not evt.get("title") or not evt.get("start_date"):
            return None

        start = parse_datetime(evt["start_date"])
        end = parse_datetime(evt.get("end_date"))
        if start is None:
            return None

        venue = evt.get("venue") or {}
        if not isinstance(venue, dict):
            venue = {}
        location = ", ".join(p for p in (venue.get("venue"), venue.get("city")) if p)

        image = evt.get("image") or {}

        return RawRecord(
            title=strip_tags(evt["title"]),
            description=strip_tags(evt.get("description")),
            date=start.date().isoformat(),
            end_date=end.date().isoformat() if end and end.date() != start.date() else None,
            source=self.name,
            source_url=evt.get("url") or self.url,
            location=location,
            cost=evt.get("cost") or None,
            time=format_time_range(start, end if end and end.date() == start.date() else None),
            image_url=image.get("url") if isinstance(image, dict) else None,
        )


class TribeEventsListCollector(BaseCollector):
    """Scrapes the rendered tribe-events list view."""

    def __init__(
        self,
        name: str,
        url: str,
        client: Optional[httpx.AsyncClient] = None,
        today: Optional[dt.date] = None,
    ):
        super().__init__(client)
        self.name = name
        self.url = url
        # Year for labels that omit it; None means the day of the scrape
        self.today = today

    async def fetch(self) -> List[RawRecord]:
        log.bind(source=self.name).info(f"Starting scrape | url={self.url}")
        async with open_client(self.client) as client:
            soup = await fetch_soup(client, self.url)

        cards = soup.select("article.tribe_events, div.tribe-events-calendar-list__event")
        records = [r for r in (self._parse(card) for card in cards) if r is not None]
        log.bind(source=self.name).info(f"Scrape complete | cards={len(cards)} events={len(records)}")
        return records

    def _parse(self, card: Tag) -> Optional[RawRecord]:
        title_el = card.select_one(".tribe-events-calendar-list__event-title a, h3 a, h2 a")
        if title_el is None:
            return None
        title = title_el.get_text(" ", strip=True)

        date = None
        start = None
        time_el = card.select_one("time[datetime]")
        if time_el is not None:
            start = parse_datetime(time_el.get("datetime"))
            if start is not None:
                date = start.date().isoformat()
        if date is None:
            # Visible label: "April 16 @ 6:00 pm", "16 April 2026", ...
            label_el = card.select_one(".tribe-event-date-start, .tribe-event-schedule-details")
            if label_el is not None:
                date = parse_listing_date(label_el.get_text(" ", strip=True), today=self.today)
        if date is None:
            date = parse_day_month_year(card.get_text(" ", strip=True))
        if not title or not date:
            return None

        desc_el = card.select_one(".tribe-events-calendar-list__event-description p")
        venue_el = card.select_one(".tribe-events-calendar-list__event-venue")
        cost_el = card.select_one(".tribe-events-cost, .tribe-events-c-small-cta__price")
        img_el = card.select_one("img")

        return RawRecord(
            title=title,
            description=desc_el.get_text(" ", strip=True) if desc_el else "",
            date=date,
            source=self.name,
            source_url=absolute_url(title_el.get("href"), self.url) or self.url,
            location=" ".join(venue_el.get_text(" ", strip=True).split()) if venue_el else "",
            cost=cost_el.get_text(strip=True) if cost_el else None,
            time=start.strftime("%H:%M") if start is not None and "T" in (time_el.get("datetime") or "") else None,
            image_url=absolute_url(img_el.get("src"), self.url) if img_el else None,
        )
