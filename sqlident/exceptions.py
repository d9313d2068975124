from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "MissingDependencyError",
    "SQLIdentError",
    "SQLParsingError",
    "StatementAlreadyTerminatedError",
    "UnexpectedTokenSequenceError",
    "UnrecognizedStatementStartError",
    "UnsupportedDialectError",
)


class SQLIdentError(Exception):
    """Base exception class from which all sqlident exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLIdentError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLIdentError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlident[{install_package or package}]' to install sqlident with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLIdentError):
    """Improper Configuration error.

    This exception is raised when parser options are invalid.
    """


class UnsupportedDialectError(ImproperConfigurationError):
    """Requested dialect is not one of the supported dialects."""

    dialect: str

    def __init__(self, dialect: str, supported: "tuple[str, ...]") -> None:
        self.dialect = dialect
        super().__init__(f"Unsupported dialect {dialect!r}. Expected one of: {', '.join(supported)}")


class SQLParsingError(SQLIdentError):
    """Issues parsing SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues parsing SQL statement."
        super().__init__(message)


class UnrecognizedStatementStartError(SQLParsingError):
    """The first meaningful token of a statement is not a supported leading keyword."""

    def __init__(self, value: str, position: int) -> None:
        self.value = value
        self.position = position
        super().__init__(f'Invalid statement parser "{value}" at position {position}.')


class UnexpectedTokenSequenceError(SQLParsingError):
    """A token violated the constraints of the current classification step."""

    def __init__(self, message: str, *, value: str, step_index: int) -> None:
        self.value = value
        self.step_index = step_index
        super().__init__(message)


class StatementAlreadyTerminatedError(SQLIdentError, RuntimeError):
    """A token was fed to a statement that already reached its end.

    This signals a bug in the driver loop rather than a problem with the input.
    """

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "This statement has already got to the end."
        super().__init__(message)
