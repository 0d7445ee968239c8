"""API dependencies"""

from typing import Dict, Generator

from sqlalchemy.orm import Session

from eventfeed.core.db import SessionLocal
from eventfeed.ingestion.base import BaseCollector
from eventfeed.ingestion.registry import build_registry


def get_db() -> Generator[Session, None, None]:
    """Database dependency: one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_registry() -> Dict[str, BaseCollector]:
    """Collector lookup table used by the scrape trigger."""
    return build_registry()
