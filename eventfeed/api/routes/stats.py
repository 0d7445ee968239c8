"""Stats routes - Scrape run observability."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventfeed.api.deps import get_db
from eventfeed.schemas.api import StatsResponse
from eventfeed.services.event_service import EventService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=list[StatsResponse])
def get_scrape_stats(
    source: Optional[str] = Query(None, description="Filter by source slug"),
    status: Optional[str] = Query(None, description="Filter by status (running, success, failure)"),
    limit: int = Query(10, ge=1, le=50, description="Number of runs to return"),
    db: Session = Depends(get_db),
):
    """
    Recent scrape runs, newest first.

    Shows records processed and rejected, status and error messages per
    source. Use this for spotting collectors whose target site has changed.
    """
    service = EventService(db)
    runs = service.get_scrape_runs(source=source, status=status, limit=limit)

    return [
        StatsResponse(
            run_id=str(run.run_id),
            source_name=run.source_name,
            status=run.status,
            records_processed=run.records_processed,
            records_rejected=run.records_rejected,
            error_message=run.error_message,
            started_at=run.started_at,
            ended_at=run.ended_at,
        )
        for run in runs
    ]
