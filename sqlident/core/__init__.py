"""sqlident core: scanner, dialect rules, statement classifier and splitter.

Architecture Overview:
- tokenizer.py: pull-based lexical scanner (Token, TokenType, Tokenizer)
- dialects.py: per-dialect quoting and statement termination rules
- statement.py: Statement record, StatementType and ExecutionType
- classifier.py: per-statement step state machine (StatementParser)
- config.py: ParserConfig
- parser.py: top-level splitter (parse, ParseResult)
"""

from sqlident.core.tokenizer import KEYWORDS, Token, Tokenizer, TokenType
from sqlident.core.statement import EXECUTION_TYPES, DefinerState, ExecutionType, Statement, StatementType
from sqlident.core.dialects import DIALECTS, DialectConfig, get_dialect_config
from sqlident.core.classifier import STATEMENT_STEPS, Step, StatementParser, create_statement_parser
from sqlident.core.config import ParserConfig
from sqlident.core.parser import ParseResult, parse, parse_with_config

__all__ = (
    "DIALECTS",
    "EXECUTION_TYPES",
    "KEYWORDS",
    "STATEMENT_STEPS",
    "DefinerState",
    "DialectConfig",
    "ExecutionType",
    "ParseResult",
    "ParserConfig",
    "Statement",
    "StatementParser",
    "StatementType",
    "Step",
    "Token",
    "TokenType",
    "Tokenizer",
    "create_statement_parser",
    "get_dialect_config",
    "parse",
    "parse_with_config",
)
