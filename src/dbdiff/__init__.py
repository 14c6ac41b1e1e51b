"""
dbdiff: make a target table identical to a source table

Compares two tables with the same columns and primary key and produces the
INSERT, UPDATE and DELETE statements that turn the target into the source.

Components:
- schema: table descriptors and their discovery
- render: SQL literal quoting and statement rendering
- engine: local (in-memory index) and remote (server-side join) strategies
- orchestrator: schema validation and strategy selection
- cli: command-line entry point

Usage:
    from dbdiff import StatementWriter, diff_tables

    writer = StatementWriter(sys.stdout)
    stats = diff_tables(source_conn, target_conn, "staging.customers", "customers", writer)
"""

from .errors import (
    ConfigError,
    DegenerateClauseError,
    DiffError,
    FetchError,
    SchemaError,
    SchemaIncompatibleError,
)
from .orchestrator import Strategy, check_schemas, diff_tables
from .output import StatementWriter, open_output
from .render import Statement, StatementType
from .schema import TableSchema

__version__ = "1.0.0"
__all__ = [
    "diff_tables",
    "check_schemas",
    "Strategy",
    "StatementWriter",
    "open_output",
    "Statement",
    "StatementType",
    "TableSchema",
    "DiffError",
    "SchemaError",
    "SchemaIncompatibleError",
    "FetchError",
    "DegenerateClauseError",
    "ConfigError",
]
