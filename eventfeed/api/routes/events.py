"""Event routes - Read-only feed for the presentation layer."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from eventfeed.api.deps import get_db
from eventfeed.schemas.api import EventOut, EventsResponse, SourceOut, SourcesResponse
from eventfeed.services.event_service import EventService

router = APIRouter(prefix="/api", tags=["events"])

CACHE_CONTROL = "s-maxage=300, stale-while-revalidate=60"


@router.get("/events", response_model=EventsResponse, response_model_by_alias=True)
def list_events(
    response: Response,
    source: Optional[str] = Query(None, description="Filter by source slug"),
    db: Session = Depends(get_db),
):
    """All persisted events sorted by date. The internal ``hash`` is never exposed."""
    response.headers["Cache-Control"] = CACHE_CONTROL
    service = EventService(db)
    return EventsResponse(events=[EventOut.model_validate(e) for e in service.list_events(source=source)])


@router.get("/sources", response_model=SourcesResponse, response_model_by_alias=True)
def list_sources(response: Response, db: Session = Depends(get_db)):
    """Registered sources with their latest scrape status."""
    response.headers["Cache-Control"] = CACHE_CONTROL
    service = EventService(db)
    return SourcesResponse(sources=[SourceOut.model_validate(s) for s in service.list_sources()])
