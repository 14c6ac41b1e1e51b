"""
Schema discovery from live database connections.

Reads the ordered column list and primary-key membership of a table using
each dialect's own catalog: DESCRIBE on MySQL, pg_attribute/pg_index on
PostgreSQL and PRAGMA table_info on SQLite.
"""

import logging
from typing import Any

from utils.database_types import DatabaseType
from utils.tracing import trace_database_query

from ..errors import FetchError
from .descriptor import TableSchema

logger = logging.getLogger(__name__)

POSTGRES_COLUMNS_QUERY = """
    SELECT a.attname, (i.indrelid IS NOT NULL) AS is_primary
    FROM pg_attribute a
    LEFT JOIN pg_index i
      ON i.indrelid = a.attrelid
     AND i.indisprimary
     AND a.attnum = ANY(i.indkey)
    WHERE a.attrelid = %s::regclass
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""


def discover_schema(connection: Any, table: str, db_type: DatabaseType) -> TableSchema:
    """
    Read the schema descriptor of a table.

    Args:
        connection: Open DB-API connection
        table: Table name, passed to the database verbatim
        db_type: Dialect of the connection

    Returns:
        TableSchema for the table

    Raises:
        FetchError: If the catalog query fails or the table has no columns
    """
    with trace_database_query("DESCRIBE", table, db_type.value):
        cursor = connection.cursor()
        try:
            if db_type == DatabaseType.MYSQL:
                columns = _mysql_columns(cursor, table)
            elif db_type == DatabaseType.POSTGRESQL:
                columns = _postgres_columns(cursor, table)
            else:
                columns = _sqlite_columns(cursor, table)
        except Exception as e:
            raise FetchError(f"cannot read definition of table {table}: {e}") from e
        finally:
            cursor.close()

    if not columns:
        raise FetchError(f"table {table} not found or has no columns")

    schema = TableSchema.from_columns(columns)
    logger.debug(
        f"Discovered {table}: {schema.field_count} columns, "
        f"primary key ({', '.join(schema.primary_key_names)})"
    )
    return schema


def _mysql_columns(cursor: Any, table: str) -> list[tuple[str, bool]]:
    cursor.execute(f"DESCRIBE {table}")
    names = [desc[0] for desc in cursor.description]
    field_pos = names.index("Field")
    key_pos = names.index("Key")
    return [
        (_text(row[field_pos]), _text(row[key_pos]) == "PRI")
        for row in cursor.fetchall()
    ]


def _postgres_columns(cursor: Any, table: str) -> list[tuple[str, bool]]:
    cursor.execute(POSTGRES_COLUMNS_QUERY, (table,))
    return [(name, bool(is_primary)) for name, is_primary in cursor.fetchall()]


def _sqlite_columns(cursor: Any, table: str) -> list[tuple[str, bool]]:
    # cid, name, type, notnull, dflt_value, pk
    cursor.execute(f"PRAGMA table_info({table})")
    return [(row[1], row[5] > 0) for row in cursor.fetchall()]


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return "" if value is None else str(value)
