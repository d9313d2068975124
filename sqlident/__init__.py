"""sqlident: split SQL scripts into statements and classify them."""

from sqlident import core, exceptions, observability, utils
from sqlident.__metadata__ import __version__
from sqlident.core import (
    DIALECTS,
    ExecutionType,
    ParseResult,
    ParserConfig,
    Statement,
    StatementType,
    Token,
    TokenType,
    parse,
)
from sqlident.exceptions import (
    SQLIdentError,
    SQLParsingError,
    StatementAlreadyTerminatedError,
    UnexpectedTokenSequenceError,
    UnrecognizedStatementStartError,
    UnsupportedDialectError,
)
from sqlident.identify import IdentifyResult, identify
from sqlident.observability import TraceEvent, logging_trace_observer

__all__ = (
    "DIALECTS",
    "ExecutionType",
    "IdentifyResult",
    "ParseResult",
    "ParserConfig",
    "SQLIdentError",
    "SQLParsingError",
    "Statement",
    "StatementAlreadyTerminatedError",
    "StatementType",
    "Token",
    "TokenType",
    "TraceEvent",
    "UnexpectedTokenSequenceError",
    "UnrecognizedStatementStartError",
    "UnsupportedDialectError",
    "__version__",
    "core",
    "exceptions",
    "identify",
    "logging_trace_observer",
    "observability",
    "parse",
    "utils",
)
