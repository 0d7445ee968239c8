"""Loguru setup for the API and the scrape job.

Every module logs through ``get_logger(name)``. Collector and persistence
code binds ``source=<slug>`` as well, which prefixes the line with the slug
so one source's run can be grepped out of a batch.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from eventfeed.core.config import settings

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}{extra[source_tag]}:{function}:{line} | {message}"
)

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}
_KNOWN_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

_configured = False


class InterceptHandler(logging.Handler):
    """Route stdlib records (httpx, sqlalchemy, alembic, uvicorn) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _tag_source(record) -> None:
    source = record["extra"].get("source")
    record["extra"]["source_tag"] = f" [{source}]" if source else ""


def _resolve_level(raw: str | None) -> str:
    level = (raw or "INFO").strip().upper()
    level = _LEVEL_ALIASES.get(level, level)
    return level if level in _KNOWN_LEVELS else "INFO"


def configure_logging() -> None:
    global _configured
    if _configured:
        return
    _configured = True

    level = _resolve_level(settings.effective_log_level)
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"name": "eventfeed", "source_tag": ""}, patcher=_tag_source)
    logger.add(sys.stdout, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)
    logger.add(
        log_dir / "eventfeed.log",
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False


def get_logger(name: str) -> logger.__class__:
    return logger.bind(name=name)


configure_logging()
