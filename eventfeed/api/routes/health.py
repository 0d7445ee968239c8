"""Health routes - System health and readiness checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventfeed.api.deps import get_db
from eventfeed.schemas.api import HealthResponse
from eventfeed.services.event_service import EventService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(response: Response, db: Session = Depends(get_db)):
    """
    Health check endpoint for load balancers and container health checks.

    Checks database connectivity and the status of the latest scrape run.
    Returns 503 if the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        response.status_code = 503
        return HealthResponse(database=f"down: {e}", last_scrape_status=None)

    last_run = EventService(db).get_latest_run()
    return HealthResponse(
        database="ok",
        last_scrape_status=last_run.status if last_run else None,
    )


@router.get("/ready")
def readiness(response: Response, db: Session = Depends(get_db)):
    """Readiness probe - 200 if the service can serve traffic, 503 otherwise."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()}
    except SQLAlchemyError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e), "timestamp": datetime.now(timezone.utc).isoformat()}
