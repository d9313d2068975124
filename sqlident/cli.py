import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from click import Group

    from sqlident.identify import IdentifyResult

__all__ = ("add_identify_command", "get_sqlident_group", "main")


def get_sqlident_group() -> "Group":
    """Get the sqlident CLI group.

    Raises:
        MissingDependencyError: If the `click` package is not installed.

    Returns:
        The sqlident CLI group.
    """
    from sqlident.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError:
        try:
            import click  # type: ignore[no-redef]
        except ImportError as e:
            raise MissingDependencyError(package="click", install_package="cli") from e

    @click.group(name="sqlident")
    @click.option(
        "--log-level",
        help="Log level of the sqlident loggers.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default="WARNING",
        show_default=True,
    )
    @click.option(
        "--log-format",
        help="Log line format; structured lines are JSON.",
        type=click.Choice(["simple", "structured"], case_sensitive=False),
        default="simple",
        show_default=True,
    )
    @click.option(
        "--correlation-id",
        help="Correlation id attached to every structured log line.",
        type=str,
        default=None,
    )
    @click.pass_context
    def sqlident_group(ctx: "click.Context", log_level: str, log_format: str, correlation_id: "Optional[str]") -> None:
        """Split SQL scripts into statements and classify them."""
        from sqlident.utils.logging import configure_logging, set_correlation_id

        ctx.ensure_object(dict)
        ctx.obj["log_level"] = log_level.upper()
        set_correlation_id(correlation_id)
        configure_logging(level=log_level, format_style=log_format.lower())

    return add_identify_command(sqlident_group)


def add_identify_command(group: "Group") -> "Group":
    """Add the ``identify`` command to a group.

    Args:
        group: The group to add the command to.

    Raises:
        MissingDependencyError: If the `click` package is not installed.

    Returns:
        The group with the identify command added.
    """
    from sqlident.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError:
        try:
            import click  # type: ignore[no-redef]
        except ImportError as e:
            raise MissingDependencyError(package="click", install_package="cli") from e
    from rich import get_console
    from rich.markup import escape

    from sqlident.core.dialects import DIALECTS

    console = get_console()

    @group.command(name="identify", help="Identify the statements of a SQL script.")
    @click.argument("script", type=click.File("r"), default="-")
    @click.option(
        "--dialect",
        help="SQL dialect of the script.",
        type=click.Choice(list(DIALECTS), case_sensitive=False),
        default="generic",
        show_default=True,
    )
    @click.option(
        "--strict/--no-strict",
        help="Fail on statements that cannot be classified.",
        default=True,
        show_default=True,
    )
    @click.option(
        "--format",
        "output_format",
        help="Output format.",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table",
        show_default=True,
    )
    @click.option(
        "--trace",
        help="Log every token and statement at DEBUG level.",
        type=bool,
        default=False,
        is_flag=True,
    )
    @click.pass_context
    def identify_statements(
        ctx: "click.Context", script: "click.utils.LazyFile", dialect: str, strict: bool, output_format: str, trace: bool
    ) -> None:
        """Identify the statements of a SQL script."""
        from sqlident.core.config import ParserConfig
        from sqlident.core.parser import parse_with_config
        from sqlident.exceptions import SQLIdentError
        from sqlident.identify import to_identify_results
        from sqlident.observability import logging_trace_observer

        sql = script.read()
        try:
            config = ParserConfig(strict=strict, dialect=dialect, observer=logging_trace_observer if trace else None)
            result = parse_with_config(sql, config)
        except SQLIdentError as e:
            console.print(f"[red]Error identifying statements: {escape(str(e))}[/]")
            ctx.exit(1)

        results = to_identify_results(sql, result.body)
        if output_format.lower() == "json":
            click.echo(_encode_results(results))
        else:
            _print_results_table(results, dialect)

    return group


def _encode_results(results: "list[IdentifyResult]") -> str:
    import msgspec

    return msgspec.json.encode([result.as_dict() for result in results]).decode("utf-8")


def _print_results_table(results: "list[IdentifyResult]", dialect: str) -> None:
    from rich import get_console
    from rich.table import Table

    console = get_console()
    table = Table(title=f"Statements ({dialect.lower()})")
    table.add_column("#", justify="right")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Execution", style="magenta", no_wrap=True)
    table.add_column("Span", justify="right")
    table.add_column("Text", overflow="fold")
    for index, result in enumerate(results, start=1):
        table.add_row(
            str(index),
            result.type.value,
            result.execution_type.value,
            f"{result.start}-{result.end}",
            _shorten(result.text),
        )
    console.print(table)


def _shorten(text: str, width: int = 60) -> str:
    collapsed = " ".join(text.split())
    if len(collapsed) <= width:
        return collapsed
    return collapsed[: width - 3] + "..."


def main(args: Optional[list[str]] = None) -> None:
    """Entry point of the ``sqlident`` console script."""
    group = get_sqlident_group()
    group.main(args=args if args is not None else sys.argv[1:], prog_name="sqlident")
