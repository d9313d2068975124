from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from sqlident.observability import TraceEvent
from sqlident.utils.logging import set_correlation_id


@pytest.fixture(autouse=True)
def reset_sqlident_logger() -> Generator[None, None, None]:
    """Undo ``configure_logging`` so ``caplog`` keeps seeing sqlident records."""
    yield
    set_correlation_id(None)
    root_logger = logging.getLogger("sqlident")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True


@pytest.fixture
def trace_events() -> list[TraceEvent]:
    return []


@pytest.fixture
def sqlite_trigger_script() -> str:
    return (
        "CREATE TRIGGER update_b AFTER INSERT ON a\n"
        "BEGIN\n"
        "  UPDATE a SET b = 1;\n"
        "END;"
    )
