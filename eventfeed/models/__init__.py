from eventfeed.models.base import Base
from eventfeed.models.events import Event
from eventfeed.models.runs import ScrapeRun
from eventfeed.models.sources import Source

__all__ = [
    "Base",
    "Event",
    "ScrapeRun",
    "Source",
]
