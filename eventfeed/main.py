from pathlib import Path
from contextlib import asynccontextmanager

from alembic import command
from alembic.config import Config
from fastapi import FastAPI

from eventfeed.api.routes import events, health, scrape, stats
from eventfeed.classification import init_classifiers
from eventfeed.core.config import settings
from eventfeed.core.logging import get_logger


log = get_logger("app")


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Log environment mode
    log.info(f"Starting application in {settings.ENV.upper()} mode")
    if settings.is_production:
        log.info("Production mode: Debug disabled, docs disabled, stricter logging")
    else:
        log.info("Development mode: Debug enabled, docs available")

    # Startup
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            run_migrations()
        except Exception:
            log.exception("Failed to apply migrations on startup")
            raise
    else:
        log.info("Skipping migrations (RUN_MIGRATIONS_ON_STARTUP=false)")

    # Classifier caches are built once here and only read afterwards
    init_classifiers()
    log.info("Classifiers initialized")

    yield

    log.info("Application shutdown complete")


# Configure FastAPI based on environment
app = FastAPI(
    title="Cambridge Innovation Events",
    description="Aggregates innovation and entrepreneurship events from Cambridge organizations",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production for security
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    # Debug mode only in development
    debug=settings.debug_enabled,
)


app.include_router(events.router)
app.include_router(health.router)
app.include_router(scrape.router)
app.include_router(stats.router)
