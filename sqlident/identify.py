"""Public projection of parsed statements."""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlident.core.parser import parse
from sqlident.core.statement import ExecutionType, Statement, StatementType

__all__ = ("IdentifyResult", "identify", "to_identify_results")


@dataclass
class IdentifyResult:
    """A statement of the script with its text and classification."""

    start: int
    end: int
    text: str
    type: StatementType
    execution_type: ExecutionType

    def as_dict(self) -> "dict[str, object]":
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "type": self.type.value,
            "executionType": self.execution_type.value,
        }


def to_identify_results(sql: str, statements: Iterable[Statement]) -> list[IdentifyResult]:
    """Project parsed statements of ``sql`` into ``IdentifyResult`` records."""
    return [
        IdentifyResult(
            start=statement.start,
            end=statement.end,
            text=sql[statement.start : statement.end + 1],
            type=statement.type or StatementType.UNKNOWN,
            execution_type=statement.execution_type or ExecutionType.UNKNOWN,
        )
        for statement in statements
    ]


def identify(sql: str, *, strict: bool = True, dialect: str = "generic") -> list[IdentifyResult]:
    """Identify the statements of a SQL script.

    Args:
        sql: The SQL script.
        strict: Raise on statements that cannot be classified.
        dialect: One of ``mssql``, ``sqlite``, ``mysql``, ``psql`` or ``generic``.

    Returns:
        One result per statement, in script order.
    """
    return to_identify_results(sql, parse(sql, strict=strict, dialect=dialect).body)
