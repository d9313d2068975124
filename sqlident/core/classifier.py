"""Per-statement classification state machine.

Every statement type is described by a static, ordered tuple of ``Step``
descriptors in ``STATEMENT_STEPS``. A running ``StatementParser`` only holds
the current step index, the statement being built and the previous token. It
consults the dialect rule set before the steps to decide whether a semicolon
really ends the statement.
"""

from dataclasses import dataclass
from typing import Callable, Final, Optional

from mypy_extensions import mypyc_attr

from sqlident.core.dialects import DialectConfig
from sqlident.core.statement import DefinerState, Statement, StatementType, get_execution_type
from sqlident.core.tokenizer import BLANK_TOKEN_TYPES, Token, TokenType
from sqlident.exceptions import (
    StatementAlreadyTerminatedError,
    UnexpectedTokenSequenceError,
    UnrecognizedStatementStartError,
)

__all__ = (
    "LEADING_KEYWORDS",
    "STATEMENT_STEPS",
    "Step",
    "StatementParser",
    "create_statement_parser",
)


def _never(token: Optional[Token] = None) -> bool:  # noqa: ARG001
    return False


def _always(token: Optional[Token] = None) -> bool:  # noqa: ARG001
    return True


@dataclass(frozen=True)
class Step:
    """One transition of a statement state machine.

    An empty ``accept_tokens`` accepts any token. ``require_before`` restricts
    the type of the token preceding the accepted one.
    """

    mutate: Callable[[Statement, Token], None]
    accept_tokens: tuple[tuple[TokenType, str], ...] = ()
    require_before: Optional[frozenset[TokenType]] = None
    pre_can_go_to_next: Callable[[Token], bool] = _never
    post_can_go_to_next: Callable[[Token], bool] = _always

    def accepts(self, token: Token) -> bool:
        if not self.accept_tokens:
            return True
        value = token.value.upper()
        return any(token.type is accept_type and value == accept_value for accept_type, accept_value in self.accept_tokens)

    def has_required_before(self, previous: Optional[Token]) -> bool:
        if self.require_before is None:
            return True
        return previous is not None and previous.type in self.require_before

    def describe_accepted(self) -> str:
        return " or ".join(f'(type="{accept_type.value}" value="{value}")' for accept_type, value in self.accept_tokens)


def _mark_start(statement: Statement, token: Token) -> None:
    statement.start = token.start


def _typed_start(statement_type: StatementType) -> Callable[[Statement, Token], None]:
    def mutate(statement: Statement, token: Token) -> None:
        statement.type = statement_type
        statement.start = token.start

    return mutate


def _prefixed_type(prefix: str) -> Callable[[Statement, Token], None]:
    def mutate(statement: Statement, token: Token) -> None:
        try:
            statement.type = StatementType(f"{prefix}_{token.value.upper()}")
        except ValueError:
            # Only reachable in non-strict mode, where any token is accepted.
            statement.type = StatementType.UNKNOWN

    return mutate


def _keywords(*values: str) -> tuple[tuple[TokenType, str], ...]:
    return tuple((TokenType.KEYWORD, value) for value in values)


def _single_keyword_steps(keyword: str) -> tuple[Step, ...]:
    return (Step(accept_tokens=_keywords(keyword), mutate=_typed_start(StatementType(keyword))),)


_AFTER_WHITESPACE: Final = frozenset({TokenType.WHITESPACE})

STATEMENT_STEPS: Final[dict[str, tuple[Step, ...]]] = {
    "SELECT": _single_keyword_steps("SELECT"),
    "INSERT": _single_keyword_steps("INSERT"),
    "UPDATE": _single_keyword_steps("UPDATE"),
    "DELETE": _single_keyword_steps("DELETE"),
    "TRUNCATE": _single_keyword_steps("TRUNCATE"),
    "CREATE": (
        Step(accept_tokens=_keywords("CREATE"), mutate=_mark_start),
        Step(
            require_before=_AFTER_WHITESPACE,
            accept_tokens=_keywords("TABLE", "DATABASE", "TRIGGER", "FUNCTION"),
            mutate=_prefixed_type("CREATE"),
        ),
    ),
    "DROP": (
        Step(accept_tokens=_keywords("DROP"), mutate=_mark_start),
        Step(
            require_before=_AFTER_WHITESPACE,
            accept_tokens=_keywords("TABLE", "DATABASE"),
            mutate=_prefixed_type("DROP"),
        ),
    ),
    "UNKNOWN": (Step(mutate=_typed_start(StatementType.UNKNOWN)),),
}

LEADING_KEYWORDS: Final[frozenset[str]] = frozenset(STATEMENT_STEPS) - {"UNKNOWN"}


@mypyc_attr(allow_interpreted_subclasses=False)
class StatementParser:
    """Consumes the tokens of one statement and classifies it."""

    __slots__ = (
        "_dialect",
        "_previous_body_word",
        "_previous_token",
        "_statement",
        "_step_index",
        "_steps",
        "_strict",
    )

    def __init__(self, steps: tuple[Step, ...], dialect: DialectConfig, strict: bool = True, start: int = 0) -> None:
        self._steps = steps
        self._dialect = dialect
        self._strict = strict
        self._step_index = 0
        self._previous_token: Optional[Token] = None
        self._previous_body_word: Optional[str] = None
        self._statement = Statement(start=start, end=start)
        if dialect.tracks_open_blocks:
            self._statement.open_blocks = 0

    @property
    def statement(self) -> Statement:
        return self._statement

    def add_token(self, token: Token) -> None:
        """Feed the next token of the statement.

        Raises:
            StatementAlreadyTerminatedError: If the statement already ended.
            UnexpectedTokenSequenceError: If the token breaks the current step in strict mode.
        """
        statement = self._statement
        if statement.end_statement is not None:
            raise StatementAlreadyTerminatedError

        if token.type is TokenType.SEMICOLON:
            self._previous_body_word = None
            if not self._dialect.should_suppress_terminator(statement):
                statement.end_statement = ";"
            return

        if self._consume_body_token(token):
            return

        if self._skip_optional_keyword(token):
            return

        if self._consume_definer_clause(token):
            return

        if token.type in BLANK_TOKEN_TYPES:
            self._previous_token = token
            return

        if statement.type is not None:
            # statement has already been identified, wait for its end
            return

        self._apply_step(token)
        self._previous_token = token

    def _consume_body_token(self, token: Token) -> bool:
        """Track ``END`` and nested blocks inside a trigger or function body."""
        dialect = self._dialect
        statement = self._statement
        if token.type in BLANK_TOKEN_TYPES or not dialect.is_body_statement(statement):
            return False

        follows_end = self._previous_body_word in dialect.block_enders
        value = token.value.upper()
        self._previous_body_word = value if token.type is TokenType.KEYWORD else None
        if token.type is not TokenType.KEYWORD:
            return False

        if value in dialect.block_enders:
            if dialect.tracks_open_blocks:
                statement.open_blocks = max((statement.open_blocks or 0) - 1, 0)
                if statement.open_blocks == 0:
                    statement.can_end = True
            else:
                statement.can_end = True
            return True

        if dialect.tracks_open_blocks and value in dialect.block_openers:
            # END IF, END LOOP and END CASE close the block instead of opening one
            if not follows_end:
                statement.open_blocks = (statement.open_blocks or 0) + 1
            return True

        if value in dialect.body_end_markers and not statement.open_blocks:
            statement.can_end = True
            return True

        return False

    def _skip_optional_keyword(self, token: Token) -> bool:
        if (
            self._step_index > 0
            and self._statement.type is None
            and token.type is TokenType.KEYWORD
            and token.value.upper() in self._dialect.optional_create_keywords
        ):
            self._previous_token = token
            return True
        return False

    def _consume_definer_clause(self, token: Token) -> bool:
        """Swallow ``DEFINER = principal`` between ``CREATE`` and the object keyword."""
        statement = self._statement
        state = statement.definer

        if state is DefinerState.INACTIVE:
            if (
                self._dialect.supports_definer
                and self._step_index > 0
                and statement.type is None
                and token.type is TokenType.KEYWORD
                and token.value.upper() == "DEFINER"
            ):
                statement.definer = DefinerState.SAW_DEFINER
                return True
            return False

        if state is DefinerState.CONSUMING_PRINCIPAL:
            # user@host spans several tokens; whitespace closes the principal
            if token.type in BLANK_TOKEN_TYPES:
                statement.definer = DefinerState.INACTIVE
                return False
            return True

        if token.type in BLANK_TOKEN_TYPES:
            return True

        if state is DefinerState.SAW_DEFINER:
            if token.value == "=":
                statement.definer = DefinerState.SAW_EQUALS
                return True
            statement.definer = DefinerState.INACTIVE
            return False

        statement.definer = DefinerState.CONSUMING_PRINCIPAL
        return True

    def _apply_step(self, token: Token) -> None:
        steps = self._steps
        if self._step_index >= len(steps):
            return

        step = steps[self._step_index]
        if step.pre_can_go_to_next(token) and self._step_index + 1 < len(steps):
            self._step_index += 1
            step = steps[self._step_index]

        if self._strict and not step.has_required_before(self._previous_token):
            required = " or ".join(sorted(token_type.value for token_type in step.require_before or ()))
            msg = f'Expected any of these tokens {required} before "{token.value}" (currentStep={self._step_index}).'
            raise UnexpectedTokenSequenceError(msg, value=token.value, step_index=self._step_index)

        if self._strict and not step.accepts(token):
            msg = (
                f"Expected any of these tokens {step.describe_accepted()} "
                f'instead of type="{token.type.value}" value="{token.value}" (currentStep={self._step_index}).'
            )
            raise UnexpectedTokenSequenceError(msg, value=token.value, step_index=self._step_index)

        step.mutate(self._statement, token)
        self._statement.execution_type = get_execution_type(self._statement.type)

        if step.post_can_go_to_next(token):
            self._step_index += 1


def create_statement_parser(token: Token, dialect: DialectConfig, strict: bool = True) -> StatementParser:
    """Select the state machine for a statement from its first token.

    Raises:
        UnrecognizedStatementStartError: In strict mode, if the token is not a leading keyword.

    Returns:
        A fresh parser. The token itself still has to be fed with ``add_token``.
    """
    value = token.value.upper()
    if token.type is TokenType.KEYWORD and value in LEADING_KEYWORDS:
        return StatementParser(STATEMENT_STEPS[value], dialect, strict=strict, start=token.start)

    if strict:
        raise UnrecognizedStatementStartError(token.value, token.start)

    return StatementParser(STATEMENT_STEPS["UNKNOWN"], dialect, strict=strict, start=token.start)
