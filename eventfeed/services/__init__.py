# Services package
from eventfeed.services.event_service import EventService
from eventfeed.services.scrape_service import ScrapeService, ScrapeSummary, SourceOk

__all__ = [
    "EventService",
    "ScrapeService",
    "ScrapeSummary",
    "SourceOk",
]
