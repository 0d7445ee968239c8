import datetime as dt
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EventOut(BaseModel):
    """Persisted event as served to the presentation layer (no ``hash``)."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str
    date: dt.date
    end_date: Optional[dt.date] = None
    source: str
    source_url: Optional[str] = None
    location: str
    categories: list[str]
    cost: Optional[str] = None
    access: Optional[str] = None
    time: Optional[str] = None
    image_url: Optional[str] = None
    scraped_at: dt.datetime
    content_hash: Optional[str] = None


class EventsResponse(BaseModel):
    events: list[EventOut]


class SourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    slug: str
    name: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    last_scraped_at: Optional[dt.datetime] = None
    status: Optional[str] = None
    event_count: int = 0


class SourcesResponse(BaseModel):
    sources: list[SourceOut]


class SourceRunOk(BaseModel):
    status: str = "ok"
    events: int


class SourceRunError(BaseModel):
    status: str = "error"
    error: str


class ScrapeResponse(BaseModel):
    sources: int
    results: Dict[str, Union[SourceRunOk, SourceRunError]]


class HealthResponse(BaseModel):
    database: str
    last_scrape_status: str | None


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    run_id: str
    source_name: str
    status: str
    records_processed: int
    records_rejected: int
    error_message: str | None = None
    started_at: dt.datetime
    ended_at: dt.datetime | None
