"""Lexical scanner for SQL scripts.

The scanner converts a position in the raw SQL text into the next token. It is
pull-based: ``Tokenizer.scan_token`` produces exactly one token per call and the
new cursor is the token's ``end`` offset. Token spans are contiguous and
exhaustive, so joining every token value reproduces the input.
"""

import re
from collections.abc import Generator
from dataclasses import dataclass
from enum import Enum
from re import Pattern
from typing import TYPE_CHECKING, Callable, Final, Optional, Union

from mypy_extensions import mypyc_attr
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from sqlident.core.dialects import DialectConfig

__all__ = (
    "BLANK_TOKEN_TYPES",
    "KEYWORDS",
    "CompiledTokenPattern",
    "Token",
    "TokenHandler",
    "TokenPattern",
    "TokenType",
    "Tokenizer",
    "scan_dollar_quoted_string",
    "scan_word",
)


KEYWORDS: Final[frozenset[str]] = frozenset({
    "SELECT",
    "INSERT",
    "UPDATE",
    "DELETE",
    "TRUNCATE",
    "CREATE",
    "DROP",
    "TABLE",
    "DATABASE",
    "TRIGGER",
    "FUNCTION",
    "BEGIN",
    "END",
    "IF",
    "LOOP",
    "CASE",
    "OR",
    "REPLACE",
    "DEFINER",
    "LANGUAGE",
})

_WORD_RE: Final = re.compile(r"\w[\w$]*")
_DOLLAR_TAG_RE: Final = re.compile(r"\$([a-zA-Z_][a-zA-Z0-9_]*)?\$")


class TokenType(str, Enum):
    """Types of tokens recognized by the SQL lexer."""

    WHITESPACE = "whitespace"
    COMMENT_INLINE = "comment-inline"
    COMMENT_BLOCK = "comment-block"
    STRING = "string"
    SEMICOLON = "semicolon"
    KEYWORD = "keyword"
    UNKNOWN = "unknown"


BLANK_TOKEN_TYPES: Final[frozenset[TokenType]] = frozenset({
    TokenType.WHITESPACE,
    TokenType.COMMENT_INLINE,
    TokenType.COMMENT_BLOCK,
})


@dataclass
class Token:
    """A single token of the SQL script.

    ``start`` is inclusive and ``end`` exclusive, so ``sql[start:end] == value``.
    """

    type: TokenType
    value: str
    start: int
    end: int


TokenHandler: TypeAlias = Callable[[str, int], Optional[Token]]
TokenPattern: TypeAlias = Union[str, TokenHandler]
CompiledTokenPattern: TypeAlias = Union[Pattern[str], TokenHandler]


def scan_word(text: str, position: int) -> Optional[Token]:
    """Scan a maximal run of word characters.

    The word is a keyword when its upper-case form is reserved, otherwise it is a
    single unknown token so that keywords are never matched inside identifiers.
    """
    match = _WORD_RE.match(text, position)
    if not match:
        return None
    value = match.group(0)
    token_type = TokenType.KEYWORD if value.upper() in KEYWORDS else TokenType.UNKNOWN
    return Token(type=token_type, value=value, start=position, end=match.end())


def scan_dollar_quoted_string(text: str, position: int) -> Optional[Token]:
    """Handle PostgreSQL dollar-quoted strings like $tag$...$tag$.

    A body without its closing tag runs to the end of the input.
    """
    start_match = _DOLLAR_TAG_RE.match(text, position)
    if not start_match:
        return None

    tag = start_match.group(0)
    content_end = text.find(tag, start_match.end())
    end = len(text) if content_end == -1 else content_end + len(tag)
    return Token(type=TokenType.STRING, value=text[position:end], start=position, end=end)


@mypyc_attr(allow_interpreted_subclasses=False)
class Tokenizer:
    """Pull-based scanner driven by the token patterns of a dialect."""

    __slots__ = ("_compiled_patterns",)

    def __init__(self, dialect: "DialectConfig") -> None:
        self._compiled_patterns = self._compile_patterns(dialect.get_all_token_patterns())

    @staticmethod
    def _compile_patterns(
        patterns: "list[tuple[TokenType, TokenPattern]]",
    ) -> "list[tuple[TokenType, CompiledTokenPattern]]":
        """Compile regex patterns for efficiency."""
        compiled: list[tuple[TokenType, CompiledTokenPattern]] = []
        for token_type, pattern in patterns:
            if isinstance(pattern, str):
                compiled.append((token_type, re.compile(pattern, re.IGNORECASE | re.DOTALL)))
            else:
                compiled.append((token_type, pattern))
        return compiled

    def scan_token(self, sql: str, position: int) -> Token:
        """Produce the token starting at ``position``.

        Args:
            sql: The SQL script being scanned.
            position: Offset of the first character of the token.

        Raises:
            ValueError: If ``position`` is outside the script.

        Returns:
            The token. The next cursor position is ``token.end``.
        """
        if position < 0 or position >= len(sql):
            msg = f"Cannot scan a token at position {position} of a {len(sql)} character script"
            raise ValueError(msg)

        for token_type, pattern in self._compiled_patterns:
            if isinstance(pattern, Pattern):
                match = pattern.match(sql, position)
                if match and match.end() > position:
                    return Token(type=token_type, value=match.group(0), start=position, end=match.end())
            else:
                token = pattern(sql, position)
                if token is not None:
                    return token

        # The catch-all pattern always matches a single character.
        return Token(type=TokenType.UNKNOWN, value=sql[position], start=position, end=position + 1)

    def tokenize(self, sql: str) -> Generator[Token, None, None]:
        """Tokenize the SQL script into a stream of tokens.

        Args:
            sql: The SQL script to tokenize

        Yields:
            Token objects covering the whole script in order.
        """
        position = 0
        length = len(sql)
        while position < length:
            token = self.scan_token(sql, position)
            yield token
            position = token.end
