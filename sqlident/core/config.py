"""Parser configuration."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from sqlident.core.dialects import DIALECTS
from sqlident.exceptions import ImproperConfigurationError, UnsupportedDialectError

if TYPE_CHECKING:
    from sqlident.observability import TraceObserver

__all__ = ("ParserConfig",)


@dataclass(frozen=True)
class ParserConfig:
    """Options of a single parse call.

    Attributes:
        strict: Raise on unexpected tokens instead of classifying as UNKNOWN.
        dialect: One of ``DIALECTS``; matched case-insensitively.
        observer: Optional callable receiving a ``TraceEvent`` per token and per
            sealed statement. Parsing is silent when it is ``None``.
    """

    strict: bool = True
    dialect: str = "generic"
    observer: "Optional[TraceObserver]" = None

    def __post_init__(self) -> None:
        if not isinstance(self.dialect, str):
            msg = f"Dialect must be a string, got {type(self.dialect).__name__}"
            raise ImproperConfigurationError(msg)
        dialect = self.dialect.lower()
        if dialect not in DIALECTS:
            raise UnsupportedDialectError(self.dialect, DIALECTS)
        object.__setattr__(self, "dialect", dialect)
        if self.observer is not None and not callable(self.observer):
            msg = "Observer must be callable"
            raise ImproperConfigurationError(msg)
