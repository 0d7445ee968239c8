"""Shared fixtures: in-memory SQLite database and loguru capture."""

import os
import tempfile

# Settings are read at import time; configure before any eventfeed import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="eventfeed-logs-"))
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from loguru import logger

from eventfeed.classification import init_classifiers
from eventfeed.core.db import SessionLocal, engine
from eventfeed.models import Base


@pytest.fixture(scope="session", autouse=True)
def classifiers():
    init_classifiers()


@pytest.fixture
def db():
    """Fresh schema per test on the shared in-memory connection."""
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def warnings_log():
    """Messages logged at WARNING level while the test runs."""
    messages = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING", filter=lambda r: r["level"].name == "WARNING")
    yield messages
    logger.remove(sink_id)
