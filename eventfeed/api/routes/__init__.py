from eventfeed.api.routes.events import router as events_router
from eventfeed.api.routes.health import router as health_router
from eventfeed.api.routes.scrape import router as scrape_router
from eventfeed.api.routes.stats import router as stats_router

__all__ = ["events_router", "health_router", "scrape_router", "stats_router"]
