"""Top-level splitter.

Drives the tokenizer across the whole script, hands every token to a freshly
created ``StatementParser`` per statement and collects the finished statements
together with the full token stream.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Literal, Optional

from sqlident.core.classifier import StatementParser, create_statement_parser
from sqlident.core.config import ParserConfig
from sqlident.core.dialects import get_dialect_config
from sqlident.core.statement import Statement, StatementType, get_execution_type
from sqlident.core.tokenizer import BLANK_TOKEN_TYPES, Token, Tokenizer
from sqlident.observability import TraceEvent
from sqlident.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlident.observability import TraceObserver

__all__ = ("ParseResult", "get_tokenizer", "parse", "parse_with_config")

logger = get_logger("sqlident.core.parser")


@dataclass
class ParseResult:
    """Statements and tokens of a whole script.

    ``start`` and ``end`` are the inclusive bounds of the script. ``body`` is
    ordered by ``start`` and ``tokens`` covers every character of the input.
    """

    start: int
    end: int
    body: list[Statement] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)
    type: Literal["QUERY"] = "QUERY"


@lru_cache(maxsize=None)
def get_tokenizer(dialect: str) -> Tokenizer:
    """Return the tokenizer of a dialect, compiling its patterns once."""
    return Tokenizer(get_dialect_config(dialect))


def parse(
    sql: str,
    strict: bool = True,
    dialect: str = "generic",
    *,
    observer: "Optional[TraceObserver]" = None,
) -> ParseResult:
    """Split a SQL script into classified statements.

    Args:
        sql: The SQL script.
        strict: Raise on tokens the classifier does not expect.
        dialect: One of ``mssql``, ``sqlite``, ``mysql``, ``psql`` or ``generic``.
        observer: Optional trace hook receiving a ``TraceEvent`` per token and statement.

    Returns:
        The parse result.
    """
    return parse_with_config(sql, ParserConfig(strict=strict, dialect=dialect, observer=observer))


def parse_with_config(sql: str, config: ParserConfig) -> ParseResult:
    """Split a SQL script using a prepared ``ParserConfig``."""
    dialect_config = get_dialect_config(config.dialect)
    tokenizer = get_tokenizer(config.dialect)
    observer = config.observer

    result = ParseResult(start=0, end=len(sql) - 1)
    statement_parser: Optional[StatementParser] = None

    position = 0
    length = len(sql)
    while position < length:
        token = tokenizer.scan_token(sql, position)
        position = token.end
        result.tokens.append(token)
        if observer is not None:
            observer(TraceEvent(kind="token", dialect=config.dialect, token=token, statement=None))

        if statement_parser is None:
            # blank tokens between statements belong to no statement
            if token.type in BLANK_TOKEN_TYPES:
                continue
            statement_parser = create_statement_parser(token, dialect_config, strict=config.strict)

        statement_parser.add_token(token)

        statement = statement_parser.statement
        if statement.end_statement is not None:
            statement.end = token.end - 1
            _seal(result, statement, config)
            statement_parser = None

    # last statement without an ending semicolon
    if statement_parser is not None:
        statement = statement_parser.statement
        statement.end = result.end
        _seal(result, statement, config)

    logger.debug(
        "Parsed %d statement(s) from %d token(s)",
        len(result.body),
        len(result.tokens),
        extra={"extra_fields": {"dialect": config.dialect, "strict": config.strict}},
    )
    return result


def _seal(result: ParseResult, statement: Statement, config: ParserConfig) -> None:
    if statement.type is None:
        # ended before a type keyword, e.g. a bare ";" in non-strict mode
        statement.type = StatementType.UNKNOWN
        statement.execution_type = get_execution_type(statement.type)
    result.body.append(statement)
    if config.observer is not None:
        config.observer(TraceEvent(kind="statement", dialect=config.dialect, token=None, statement=statement))
