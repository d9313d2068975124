"""Trace primitives for parser events."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from sqlident.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlident.core.statement import Statement
    from sqlident.core.tokenizer import Token

__all__ = ("TRACE_LOGGER_NAME", "TraceEvent", "TraceObserver", "format_trace_event", "logging_trace_observer")


TRACE_LOGGER_NAME = "sqlident.trace"

logger = get_logger(TRACE_LOGGER_NAME)


@dataclass(slots=True)
class TraceEvent:
    """Structured payload describing one step of a parse.

    ``kind`` is ``"token"`` when a token was scanned and ``"statement"`` when a
    statement was sealed into the result.
    """

    kind: str
    dialect: str
    token: "Optional[Token]"
    statement: "Optional[Statement]"

    def as_dict(self) -> "dict[str, Any]":
        """Return event payload as a dictionary."""

        payload: dict[str, Any] = {"kind": self.kind, "dialect": self.dialect}
        if self.token is not None:
            payload["token"] = {
                "type": self.token.type.value,
                "value": self.token.value,
                "start": self.token.start,
                "end": self.token.end,
            }
        if self.statement is not None:
            statement = self.statement
            payload["statement"] = {
                "start": statement.start,
                "end": statement.end,
                "type": statement.type.value if statement.type is not None else None,
                "execution_type": statement.execution_type.value if statement.execution_type is not None else None,
                "end_statement": statement.end_statement,
                "can_end": statement.can_end,
                "open_blocks": statement.open_blocks,
            }
        return payload


TraceObserver = Callable[[TraceEvent], None]


def format_trace_event(event: TraceEvent) -> str:
    """Create a concise human-readable representation of a trace event."""

    if event.kind == "statement" and event.statement is not None:
        statement = event.statement
        statement_type = statement.type.value if statement.type is not None else "?"
        return f"[{event.dialect}] statement {statement_type} [{statement.start}, {statement.end}]"
    if event.token is not None:
        return f"[{event.dialect}] token {event.token.type.value} {event.token.value!r} @{event.token.start}"
    return f"[{event.dialect}] {event.kind}"


def logging_trace_observer(event: TraceEvent) -> None:
    """Forward trace events to the ``sqlident.trace`` logger at DEBUG level."""

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(format_trace_event(event), extra={"extra_fields": event.as_dict()})
