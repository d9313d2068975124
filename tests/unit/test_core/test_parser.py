"""Tests for the top-level statement splitter."""

import pytest

from sqlident.core.config import ParserConfig
from sqlident.core.parser import ParseResult, get_tokenizer, parse, parse_with_config
from sqlident.core.statement import EXECUTION_TYPES, ExecutionType, StatementType
from sqlident.core.tokenizer import TokenType
from sqlident.exceptions import (
    ImproperConfigurationError,
    UnexpectedTokenSequenceError,
    UnrecognizedStatementStartError,
    UnsupportedDialectError,
)
from sqlident.observability import TraceEvent

MIXED_SCRIPT = """
-- create the schema
CREATE TABLE users (id int, name text);

INSERT INTO users VALUES (1, 'a;b');
/* listing */
SELECT * FROM users;
UPDATE users SET name = 'c' WHERE id = 1;
DELETE FROM users;
TRUNCATE users;
DROP TABLE users
"""


def _assert_well_formed(sql: str, result: ParseResult) -> None:
    assert "".join(token.value for token in result.tokens) == sql
    starts = [statement.start for statement in result.body]
    assert starts == sorted(starts)
    for previous, current in zip(result.body, result.body[1:]):
        assert previous.end < current.start
    for statement in result.body:
        assert statement.start <= statement.end
        assert statement.execution_type is EXECUTION_TYPES.get(statement.type, ExecutionType.UNKNOWN)


class TestParseResult:
    """Shape of the parse result."""

    def test_select(self) -> None:
        result = parse("SELECT 1;", True, "generic")

        assert result.type == "QUERY"
        assert result.start == 0
        assert result.end == 8
        assert len(result.body) == 1
        statement = result.body[0]
        assert statement.type is StatementType.SELECT
        assert statement.type == "SELECT"
        assert statement.execution_type is ExecutionType.LISTING
        assert statement.end_statement == ";"
        assert (statement.start, statement.end) == (0, 8)

    def test_empty_input(self) -> None:
        result = parse("")

        assert result.body == []
        assert result.tokens == []
        assert result.end == -1

    def test_only_blank_tokens(self) -> None:
        sql = "  -- nothing here\n/* at all */\n"
        result = parse(sql)

        assert result.body == []
        assert [token.type for token in result.tokens] == [
            TokenType.WHITESPACE,
            TokenType.COMMENT_INLINE,
            TokenType.WHITESPACE,
            TokenType.COMMENT_BLOCK,
            TokenType.WHITESPACE,
        ]

    def test_mixed_script(self) -> None:
        result = parse(MIXED_SCRIPT)

        _assert_well_formed(MIXED_SCRIPT, result)
        assert [statement.type for statement in result.body] == [
            StatementType.CREATE_TABLE,
            StatementType.INSERT,
            StatementType.SELECT,
            StatementType.UPDATE,
            StatementType.DELETE,
            StatementType.TRUNCATE,
            StatementType.DROP_TABLE,
        ]
        assert MIXED_SCRIPT[result.body[1].start : result.body[1].end + 1] == "INSERT INTO users VALUES (1, 'a;b');"

    def test_statement_spans_exclude_leading_blanks(self) -> None:
        sql = "  SELECT 1;  \n  SELECT 2;"
        result = parse(sql)

        assert [(statement.start, statement.end) for statement in result.body] == [(2, 10), (16, 24)]

    def test_last_statement_without_terminator(self) -> None:
        sql = "SELECT 1; SELECT 2  "
        result = parse(sql)

        last = result.body[-1]
        assert last.end_statement is None
        assert last.start == 10
        assert last.end == len(sql) - 1

    def test_whitespace_inside_statement_is_recorded(self) -> None:
        result = parse("SELECT  1 ;")

        assert [token.value for token in result.tokens] == ["SELECT", "  ", "1", " ", ";"]

    def test_bare_semicolon_in_non_strict_mode(self) -> None:
        result = parse("; SELECT 1;", strict=False)

        assert [statement.type for statement in result.body] == [StatementType.UNKNOWN, StatementType.SELECT]
        assert (result.body[0].start, result.body[0].end) == (0, 0)

    @pytest.mark.parametrize("dialect", ["generic", "sqlite", "mssql", "mysql", "psql"])
    def test_well_formed_in_every_dialect(self, dialect: str) -> None:
        result = parse(MIXED_SCRIPT, dialect=dialect)

        _assert_well_formed(MIXED_SCRIPT, result)
        assert len(result.body) == 7


class TestStrictness:
    """Strict and non-strict parsing."""

    def test_strict_rejects_unknown_statement(self) -> None:
        with pytest.raises(UnrecognizedStatementStartError):
            parse("GRANT ALL;", True, "generic")

    def test_non_strict_tolerates_unknown_statement(self) -> None:
        result = parse("GRANT ALL;", False, "generic")

        assert len(result.body) == 1
        assert result.body[0].type is StatementType.UNKNOWN
        assert result.body[0].execution_type is ExecutionType.UNKNOWN

    def test_errors_abort_the_whole_parse(self) -> None:
        with pytest.raises(UnexpectedTokenSequenceError):
            parse("SELECT 1; CREATE INDEX i ON t (a); SELECT 2;")

    def test_comment_glued_to_object_keyword(self) -> None:
        with pytest.raises(UnexpectedTokenSequenceError):
            parse("CREATE /*c*/TABLE t;", True, "generic")

        result = parse("CREATE /*c*/TABLE t;", False, "generic")
        assert result.body[0].type is StatementType.CREATE_TABLE

    def test_non_strict_string_start(self) -> None:
        result = parse("'x'; SELECT 1;", strict=False)

        assert [statement.type for statement in result.body] == [StatementType.UNKNOWN, StatementType.SELECT]


class TestDialects:
    """Dialect-aware statement boundaries."""

    def test_sqlite_trigger_body(self, sqlite_trigger_script: str) -> None:
        result = parse(sqlite_trigger_script, True, "sqlite")

        assert len(result.body) == 1
        statement = result.body[0]
        assert statement.type is StatementType.CREATE_TRIGGER
        assert statement.end == len(sqlite_trigger_script) - 1
        assert sqlite_trigger_script[statement.end] == ";"

    def test_generic_never_suppresses_semicolons(self, sqlite_trigger_script: str) -> None:
        result = parse(sqlite_trigger_script, False, "generic")

        assert len(result.body) == 2
        first = result.body[0]
        assert first.type is StatementType.CREATE_TRIGGER
        assert first.end == sqlite_trigger_script.index(";")

    def test_mssql_trigger_followed_by_statement(self) -> None:
        sql = (
            "CREATE TRIGGER reminder ON customer AFTER INSERT AS\n"
            "BEGIN\n"
            "  INSERT INTO audit VALUES (1);\n"
            "  UPDATE stats SET n = n + 1;\n"
            "END;\n"
            "SELECT * FROM audit;"
        )
        result = parse(sql, dialect="mssql")

        assert [statement.type for statement in result.body] == [StatementType.CREATE_TRIGGER, StatementType.SELECT]
        assert sql[result.body[0].start : result.body[0].end + 1].endswith("END;")

    def test_psql_dollar_quoted_function(self) -> None:
        sql = (
            "CREATE OR REPLACE FUNCTION increment(i integer) RETURNS integer AS $$\n"
            "BEGIN\n"
            "  RETURN i + 1;\n"
            "END;\n"
            "$$ LANGUAGE plpgsql;\n"
            "SELECT increment(1);"
        )
        result = parse(sql, dialect="psql")

        assert [statement.type for statement in result.body] == [StatementType.CREATE_FUNCTION, StatementType.SELECT]
        assert sql[result.body[0].end] == ";"
        assert sql[: result.body[0].end + 1].endswith("LANGUAGE plpgsql;")

    def test_psql_nested_blocks_do_not_end_function_early(self) -> None:
        """Depth tracking: an inner END does not let the function end."""
        sql = (
            "CREATE FUNCTION f() RETURNS int LANGUAGE sql\n"
            "BEGIN ATOMIC\n"
            "  SELECT CASE WHEN true THEN 1 ELSE 0 END;\n"
            "  SELECT 2;\n"
            "END;\n"
            "SELECT 3;"
        )
        result = parse(sql, dialect="psql")

        assert [statement.type for statement in result.body] == [StatementType.CREATE_FUNCTION, StatementType.SELECT]
        function = result.body[0]
        assert sql[function.start : function.end + 1].endswith("SELECT 2;\nEND;")
        assert function.open_blocks == 0

    def test_psql_trigger_ends_at_first_semicolon(self) -> None:
        sql = "CREATE TRIGGER t BEFORE UPDATE ON a FOR EACH ROW EXECUTE FUNCTION f(); SELECT 1;"
        result = parse(sql, dialect="psql")

        assert [statement.type for statement in result.body] == [StatementType.CREATE_TRIGGER, StatementType.SELECT]

    def test_mysql_definer_is_transparent(self) -> None:
        with_definer = parse("CREATE DEFINER=u@h FUNCTION f() RETURNS int RETURN 1;", True, "mysql")
        without_definer = parse("CREATE FUNCTION f() RETURNS int RETURN 1;", True, "mysql")

        assert with_definer.body[0].type is StatementType.CREATE_FUNCTION
        assert with_definer.body[0].type is without_definer.body[0].type
        assert with_definer.body[0].execution_type is without_definer.body[0].execution_type

    def test_unsupported_dialect(self) -> None:
        with pytest.raises(UnsupportedDialectError):
            parse("SELECT 1;", dialect="oracle")

    def test_dialect_is_case_insensitive(self) -> None:
        result = parse("SELECT 1;", dialect="SQLite")

        assert result.body[0].type is StatementType.SELECT


class TestConfigAndTracing:
    """ParserConfig and the trace hook."""

    def test_config_normalizes_dialect(self) -> None:
        assert ParserConfig(dialect="MySQL").dialect == "mysql"

    def test_config_rejects_non_string_dialect(self) -> None:
        with pytest.raises(ImproperConfigurationError):
            ParserConfig(dialect=None)  # type: ignore[arg-type]

    def test_config_rejects_non_callable_observer(self) -> None:
        with pytest.raises(ImproperConfigurationError, match="callable"):
            ParserConfig(observer="print")  # type: ignore[arg-type]

    def test_parse_with_config(self) -> None:
        result = parse_with_config("GRANT ALL;", ParserConfig(strict=False))

        assert result.body[0].type is StatementType.UNKNOWN

    def test_observer_receives_tokens_and_statements(self, trace_events: list[TraceEvent]) -> None:
        sql = "SELECT 1; DROP TABLE t;"
        result = parse(sql, observer=trace_events.append)

        token_events = [event for event in trace_events if event.kind == "token"]
        statement_events = [event for event in trace_events if event.kind == "statement"]
        assert [event.token for event in token_events] == result.tokens
        assert [event.statement for event in statement_events] == result.body
        assert {event.dialect for event in trace_events} == {"generic"}

    def test_parse_is_silent_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        parse("SELECT 1; SELECT 2;")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_tokenizer_is_shared_per_dialect(self) -> None:
        assert get_tokenizer("psql") is get_tokenizer("psql")
        assert get_tokenizer("psql") is not get_tokenizer("mysql")
