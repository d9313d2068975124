"""Statement records produced by the splitter."""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional

__all__ = (
    "EXECUTION_TYPES",
    "DefinerState",
    "ExecutionType",
    "Statement",
    "StatementType",
    "get_execution_type",
)


class StatementType(str, Enum):
    """Kinds of statements the classifier can recognize."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TRUNCATE = "TRUNCATE"
    CREATE_TABLE = "CREATE_TABLE"
    CREATE_DATABASE = "CREATE_DATABASE"
    CREATE_TRIGGER = "CREATE_TRIGGER"
    CREATE_FUNCTION = "CREATE_FUNCTION"
    DROP_TABLE = "DROP_TABLE"
    DROP_DATABASE = "DROP_DATABASE"
    UNKNOWN = "UNKNOWN"


class ExecutionType(str, Enum):
    """Coarse behavior of a statement.

    - LISTING: the statement lists data
    - MODIFICATION: the statement modifies the database structure or data
    - UNKNOWN: anything else
    """

    LISTING = "LISTING"
    MODIFICATION = "MODIFICATION"
    UNKNOWN = "UNKNOWN"


class DefinerState(Enum):
    """Progress through a MySQL ``DEFINER = principal`` clause."""

    INACTIVE = "inactive"
    SAW_DEFINER = "saw_definer"
    SAW_EQUALS = "saw_equals"
    CONSUMING_PRINCIPAL = "consuming_principal"


EXECUTION_TYPES: Final[dict[StatementType, ExecutionType]] = {
    StatementType.SELECT: ExecutionType.LISTING,
    StatementType.INSERT: ExecutionType.MODIFICATION,
    StatementType.UPDATE: ExecutionType.MODIFICATION,
    StatementType.DELETE: ExecutionType.MODIFICATION,
    StatementType.TRUNCATE: ExecutionType.MODIFICATION,
    StatementType.CREATE_DATABASE: ExecutionType.MODIFICATION,
    StatementType.CREATE_TABLE: ExecutionType.MODIFICATION,
    StatementType.CREATE_TRIGGER: ExecutionType.MODIFICATION,
    StatementType.CREATE_FUNCTION: ExecutionType.MODIFICATION,
    StatementType.DROP_DATABASE: ExecutionType.MODIFICATION,
    StatementType.DROP_TABLE: ExecutionType.MODIFICATION,
}


def get_execution_type(statement_type: Optional[StatementType]) -> ExecutionType:
    """Look up the execution type of a statement type."""
    if statement_type is None:
        return ExecutionType.UNKNOWN
    return EXECUTION_TYPES.get(statement_type, ExecutionType.UNKNOWN)


@dataclass
class Statement:
    """A single statement of the script.

    ``start`` and ``end`` are inclusive offsets. The statement is provisional
    until ``type`` is assigned and complete once ``end_statement`` is set.
    ``open_blocks`` is only tracked for dialects with nested body blocks.
    """

    start: int = 0
    end: int = 0
    type: Optional[StatementType] = None
    execution_type: Optional[ExecutionType] = None
    end_statement: Optional[str] = None
    can_end: bool = False
    definer: DefinerState = DefinerState.INACTIVE
    open_blocks: Optional[int] = None
