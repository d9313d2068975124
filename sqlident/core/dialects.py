# ruff: noqa: PLR6301
"""Dialect rule sets consulted by the scanner and the statement classifier.

Each dialect decides which quoting rules the scanner applies and how a
statement with a body (triggers, functions) may contain semicolons before it
actually ends.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Final

from sqlident.core.statement import Statement, StatementType
from sqlident.core.tokenizer import (
    TokenPattern,
    TokenType,
    scan_dollar_quoted_string,
    scan_word,
)
from sqlident.exceptions import UnsupportedDialectError

__all__ = (
    "DIALECTS",
    "DialectConfig",
    "GenericDialectConfig",
    "MySQLDialectConfig",
    "PostgreSQLDialectConfig",
    "SQLiteDialectConfig",
    "TSQLDialectConfig",
    "get_dialect_config",
)


DIALECTS: Final[tuple[str, ...]] = ("mssql", "sqlite", "mysql", "psql", "generic")

_BODY_STATEMENT_TYPES: Final = frozenset({StatementType.CREATE_TRIGGER, StatementType.CREATE_FUNCTION})


class DialectConfig(ABC):
    """Abstract base class for SQL dialect configurations."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the dialect (e.g., 'psql', 'mssql')."""

    @property
    def body_statement_types(self) -> frozenset[StatementType]:
        """Statement types whose body may contain semicolons before ``END``."""
        return frozenset()

    @property
    def tracks_open_blocks(self) -> bool:
        """Whether nested blocks inside a body are counted."""
        return False

    @property
    def block_openers(self) -> frozenset[str]:
        """Keywords that open a nested block inside a body."""
        return frozenset()

    @property
    def block_enders(self) -> frozenset[str]:
        """Keywords that close a body or a nested block."""
        return frozenset({"END"})

    @property
    def body_end_markers(self) -> frozenset[str]:
        """Keywords that allow a body statement to end when no block is open."""
        return frozenset()

    @property
    def optional_create_keywords(self) -> frozenset[str]:
        """Keywords ignored between ``CREATE`` and the object keyword."""
        return frozenset()

    @property
    def supports_definer(self) -> bool:
        """Whether ``DEFINER = principal`` may follow ``CREATE``."""
        return False

    def get_all_token_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        """Assembles the complete, ordered list of token patterns."""
        patterns: list[tuple[TokenType, TokenPattern]] = [
            (TokenType.WHITESPACE, r"\s+"),
            (TokenType.COMMENT_INLINE, r"--[^\n]*"),
        ]
        patterns.extend(self._get_line_comment_patterns())
        patterns.append((TokenType.COMMENT_BLOCK, r"/\*.*?(?:\*/|\Z)"))
        patterns.extend(self._get_string_patterns())
        patterns.extend(self._get_dialect_specific_patterns())
        patterns.extend([
            (TokenType.SEMICOLON, r";"),
            (TokenType.KEYWORD, scan_word),
            (TokenType.UNKNOWN, r"."),  # Fallback for any other character
        ])
        return patterns

    def _get_line_comment_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        """Override to add line comment styles besides ``--``."""
        return []

    def _get_string_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        """Quoted strings and identifiers; an unterminated one runs to the end."""
        return [
            (TokenType.STRING, r"'(?:[^']|'')*'?"),
            (TokenType.STRING, r'"(?:[^"]|"")*"?'),
        ]

    def _get_dialect_specific_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        """Override to add dialect-specific string patterns."""
        return []

    def is_body_statement(self, statement: Statement) -> bool:
        return statement.type in self.body_statement_types

    def should_suppress_terminator(self, statement: Statement) -> bool:
        """Check whether a semicolon belongs to the body of ``statement``."""
        if not self.is_body_statement(statement):
            return False
        return not statement.can_end or bool(statement.open_blocks)


class GenericDialectConfig(DialectConfig):
    """Generic SQL: a semicolon always ends the statement."""

    @property
    def name(self) -> str:
        return "generic"


class SQLiteDialectConfig(DialectConfig):
    """Configuration for SQLite, whose triggers end with ``END;``."""

    @property
    def name(self) -> str:
        return "sqlite"

    @property
    def body_statement_types(self) -> frozenset[StatementType]:
        return _BODY_STATEMENT_TYPES

    def _get_dialect_specific_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        return [
            (TokenType.STRING, r"`(?:[^`]|``)*`?"),
            (TokenType.STRING, r"\[[^\]]*\]?"),
        ]


class TSQLDialectConfig(DialectConfig):
    """Configuration for T-SQL (SQL Server)."""

    @property
    def name(self) -> str:
        return "mssql"

    @property
    def body_statement_types(self) -> frozenset[StatementType]:
        return _BODY_STATEMENT_TYPES

    def _get_dialect_specific_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        return [(TokenType.STRING, r"\[(?:[^\]]|\]\])*\]?")]


class MySQLDialectConfig(DialectConfig):
    """Configuration for MySQL with backslash escapes and ``DEFINER`` clauses."""

    @property
    def name(self) -> str:
        return "mysql"

    @property
    def supports_definer(self) -> bool:
        return True

    def _get_line_comment_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        return [(TokenType.COMMENT_INLINE, r"#[^\n]*")]

    def _get_string_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        return [
            (TokenType.STRING, r"'(?:[^'\\]|\\.?|'')*'?"),
            (TokenType.STRING, r'"(?:[^"\\]|\\.?|"")*"?'),
            (TokenType.STRING, r"`(?:[^`]|``)*`?"),
        ]


class PostgreSQLDialectConfig(DialectConfig):
    """Configuration for PostgreSQL with dollar-quoted strings.

    Function bodies are depth-tracked: ``BEGIN``, ``IF``, ``LOOP`` and ``CASE``
    open a block, ``END`` closes one, and the function may only end once every
    block is closed. ``LANGUAGE`` outside any block also allows the function to
    end, which covers bodies written as dollar-quoted strings.
    """

    @property
    def name(self) -> str:
        return "psql"

    @property
    def body_statement_types(self) -> frozenset[StatementType]:
        return frozenset({StatementType.CREATE_FUNCTION})

    @property
    def tracks_open_blocks(self) -> bool:
        return True

    @property
    def block_openers(self) -> frozenset[str]:
        return frozenset({"BEGIN", "IF", "LOOP", "CASE"})

    @property
    def body_end_markers(self) -> frozenset[str]:
        return frozenset({"LANGUAGE"})

    @property
    def optional_create_keywords(self) -> frozenset[str]:
        return frozenset({"OR", "REPLACE"})

    def _get_dialect_specific_patterns(self) -> list[tuple[TokenType, TokenPattern]]:
        return [(TokenType.STRING, scan_dollar_quoted_string)]


_DIALECT_CONFIGS: Final[dict[str, type[DialectConfig]]] = {
    "generic": GenericDialectConfig,
    "sqlite": SQLiteDialectConfig,
    "mssql": TSQLDialectConfig,
    "mysql": MySQLDialectConfig,
    "psql": PostgreSQLDialectConfig,
}


@lru_cache(maxsize=None)
def get_dialect_config(dialect: str) -> DialectConfig:
    """Return the configuration of a supported dialect.

    Args:
        dialect: One of ``DIALECTS``, case-insensitive.

    Raises:
        UnsupportedDialectError: If the dialect is not supported.

    Returns:
        The shared dialect configuration.
    """
    config_class = _DIALECT_CONFIGS.get(dialect.lower())
    if config_class is None:
        raise UnsupportedDialectError(dialect, DIALECTS)
    return config_class()
