"""Logging setup tests"""

import pytest
from loguru import logger

from eventfeed.core.logging import LOG_FORMAT, _resolve_level, get_logger


@pytest.fixture
def formatted_lines():
    lines = []
    sink_id = logger.add(lambda m: lines.append(str(m)), level="INFO", format=LOG_FORMAT)
    yield lines
    logger.remove(sink_id)


def test_bound_source_tags_the_line(formatted_lines):
    get_logger("ingestion.runner").bind(source="allia").info("Fetched")
    assert " | ingestion.runner [allia]:" in formatted_lines[-1]


def test_untagged_line_without_source(formatted_lines):
    get_logger("app").info("Starting")
    assert " | app:" in formatted_lines[-1]


@pytest.mark.parametrize("raw, expected", [("warn", "WARNING"), ("fatal", "CRITICAL"), ("loud", "INFO"), (None, "INFO")])
def test_resolve_level(raw, expected):
    assert _resolve_level(raw) == expected
