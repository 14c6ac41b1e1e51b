"""
INSERT/UPDATE/DELETE statement builders and remote diff queries.

Builders return the statement text without the trailing semicolon. A
builder whose mandatory clause would render empty raises
DegenerateClauseError rather than emit an unconditional statement.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from utils.database_types import DatabaseType

from ..errors import DegenerateClauseError
from ..schema import TableSchema
from .renderer import diff_list, field_list, null_check_list, set_list, value_list, where_list


class StatementType(str, Enum):
    """Kind of mutation a generated statement performs."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Statement:
    """One generated mutation against the target table."""

    statement_type: StatementType
    table: str
    key: tuple
    sql: str


def _require(clause: str, what: str) -> str:
    if not clause:
        raise DegenerateClauseError(f"empty {what}")
    return clause


def render_insert(
    table: str, schema: TableSchema, row: Sequence[Any], db_type: DatabaseType
) -> str:
    """INSERT INTO <table> (<col,...>) VALUES (<val,...>)"""
    fields = _require(field_list(schema, schema.all_indices, db_type), "column list")
    values = _require(value_list(schema, row, schema.all_indices, db_type), "value list")
    return f"INSERT INTO {table} ({fields}) VALUES ({values})"


def render_update(
    table: str,
    schema: TableSchema,
    row: Sequence[Any],
    changed: Sequence[int],
    db_type: DatabaseType,
) -> str:
    """
    UPDATE <table> SET <col=val,...> WHERE <pk=val AND ...>

    Args:
        table: Target table name
        schema: Table descriptor
        row: Source row supplying the new values
        changed: Column positions to assign
        db_type: Target dialect
    """
    assignments = _require(set_list(schema, row, changed, db_type), "SET clause")
    condition = _require(
        where_list(schema, row, schema.primary_key_indices, db_type), "WHERE clause"
    )
    return f"UPDATE {table} SET {assignments} WHERE {condition}"


def render_delete(
    table: str, schema: TableSchema, row: Sequence[Any], db_type: DatabaseType
) -> str:
    """DELETE FROM <table> WHERE <pk=val AND ...>"""
    condition = _require(
        where_list(schema, row, schema.primary_key_indices, db_type), "WHERE clause"
    )
    return f"DELETE FROM {table} WHERE {condition}"


def changed_rows_query(
    source_table: str, target_table: str, schema: TableSchema, db_type: DatabaseType
) -> str:
    """
    Rows present on both sides whose non-key columns differ.

    Each result row holds the source columns followed by the target columns.
    """
    using = _require(field_list(schema, schema.primary_key_indices, db_type), "USING clause")
    condition = _require(diff_list(schema, schema.non_key_indices, db_type), "WHERE clause")
    return (
        f"SELECT s.*, t.* FROM {source_table} s "
        f"JOIN {target_table} t USING ({using}) WHERE {condition}"
    )


def new_rows_query(
    source_table: str, target_table: str, schema: TableSchema, db_type: DatabaseType
) -> str:
    """Source rows whose key is absent from the target."""
    return _anti_join(source_table, "s", target_table, schema, db_type)


def old_rows_query(
    source_table: str, target_table: str, schema: TableSchema, db_type: DatabaseType
) -> str:
    """Target rows whose key is absent from the source."""
    return _anti_join(target_table, "t", source_table, schema, db_type)


def _anti_join(
    table: str, alias: str, other: str, schema: TableSchema, db_type: DatabaseType
) -> str:
    using = _require(field_list(schema, schema.primary_key_indices, db_type), "USING clause")
    condition = _require(
        null_check_list(schema, schema.primary_key_indices, db_type, alias="j"),
        "WHERE clause",
    )
    return (
        f"SELECT {alias}.* FROM {table} {alias} "
        f"LEFT JOIN {other} j USING ({using}) WHERE {condition}"
    )


def select_all_query(table: str) -> str:
    return f"SELECT * FROM {table}"
