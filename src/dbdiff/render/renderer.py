"""
Generic clause rendering.

Every list-shaped piece of a generated statement (column lists, value
lists, SET and WHERE clauses, join predicates) is produced by render_list
from a RenderOp describing how to render one column and a delimiter
joining the terms.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from utils.database_types import DatabaseType

from ..schema import TableSchema
from .quoting import quote_value


class RenderOp(Enum):
    """How a single column is rendered inside a list."""

    FIELD = "field"            # `col`
    VALUE = "value"            # 'literal'
    EQUAL = "equal"            # `col`='literal'
    MATCH = "match"            # `col`='literal', or `col` IS NULL
    NULL_CHECK = "null_check"  # j.`col` IS NULL
    DIFF = "diff"              # null-safe s.`col` <> t.`col`


def render_term(
    op: RenderOp,
    schema: TableSchema,
    index: int,
    db_type: DatabaseType,
    row: Sequence[Any] | None = None,
    alias: str = "j",
) -> str:
    """Render one column position according to op."""
    name = db_type.quote_identifier(schema.column_names[index])

    if op is RenderOp.FIELD:
        return name
    if op is RenderOp.VALUE:
        return quote_value(row[index], db_type)
    if op is RenderOp.MATCH and row[index] is None:
        # SQLite allows NULL in non-integer primary keys
        return f"{name} IS NULL"
    if op in (RenderOp.EQUAL, RenderOp.MATCH):
        return f"{name}={quote_value(row[index], db_type)}"
    if op is RenderOp.NULL_CHECK:
        return f"{alias}.{name} IS NULL"
    return db_type.differs(f"s.{name}", f"t.{name}")


def render_list(
    schema: TableSchema,
    op: RenderOp,
    delimiter: str,
    indices: Iterable[int],
    db_type: DatabaseType,
    row: Sequence[Any] | None = None,
    alias: str = "j",
) -> str:
    """
    Render the columns at indices and join them with delimiter.

    Returns an empty string when indices is empty; callers decide whether
    an empty clause is acceptable.
    """
    return delimiter.join(
        render_term(op, schema, index, db_type, row=row, alias=alias)
        for index in indices
    )


def field_list(schema: TableSchema, indices: Iterable[int], db_type: DatabaseType) -> str:
    return render_list(schema, RenderOp.FIELD, ",", indices, db_type)


def value_list(
    schema: TableSchema, row: Sequence[Any], indices: Iterable[int], db_type: DatabaseType
) -> str:
    return render_list(schema, RenderOp.VALUE, ",", indices, db_type, row=row)


def set_list(
    schema: TableSchema, row: Sequence[Any], indices: Iterable[int], db_type: DatabaseType
) -> str:
    return render_list(schema, RenderOp.EQUAL, ",", indices, db_type, row=row)


def where_list(
    schema: TableSchema, row: Sequence[Any], indices: Iterable[int], db_type: DatabaseType
) -> str:
    return render_list(schema, RenderOp.MATCH, " AND ", indices, db_type, row=row)


def null_check_list(
    schema: TableSchema, indices: Iterable[int], db_type: DatabaseType, alias: str = "j"
) -> str:
    return render_list(schema, RenderOp.NULL_CHECK, " AND ", indices, db_type, alias=alias)


def diff_list(schema: TableSchema, indices: Iterable[int], db_type: DatabaseType) -> str:
    return render_list(schema, RenderOp.DIFF, " OR ", indices, db_type)
