"""Scrape routes - Cron-triggered batch scrape."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from eventfeed.api.deps import get_db, get_registry
from eventfeed.core.config import settings
from eventfeed.core.logging import get_logger
from eventfeed.ingestion.base import BaseCollector
from eventfeed.schemas.api import ScrapeResponse
from eventfeed.services.scrape_service import ScrapeService

router = APIRouter(prefix="/api", tags=["scrape"])
log = get_logger("scrape_routes")


def _parse_batch(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.get("/scrape", response_model=ScrapeResponse)
async def trigger_scrape(
    batch: Optional[str] = Query(None, description="Batch index; absent or unknown runs every registered source"),
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    registry: Dict[str, BaseCollector] = Depends(get_registry),
):
    """
    Run one scrape batch.

    Requires ``Authorization: Bearer <CRON_SECRET>``. Per-source failures are
    reported in ``results`` and never fail the request.
    """
    secret = settings.CRON_SECRET
    if not secret:
        log.error("Scrape triggered but CRON_SECRET is not configured")
        return JSONResponse(status_code=500, content={"error": "CRON_SECRET is not configured"})
    if authorization != f"Bearer {secret}":
        log.warning("Scrape trigger rejected: bad credentials")
        return JSONResponse(status_code=401, content={"error": "Unauthorised"})

    service = ScrapeService(db, registry=registry)
    summary = await service.run(_parse_batch(batch))
    return summary.as_response()
