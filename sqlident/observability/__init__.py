"""Optional tracing hooks for the parser."""

from sqlident.observability._observer import (
    TRACE_LOGGER_NAME,
    TraceEvent,
    TraceObserver,
    format_trace_event,
    logging_trace_observer,
)

__all__ = ("TRACE_LOGGER_NAME", "TraceEvent", "TraceObserver", "format_trace_event", "logging_trace_observer")
