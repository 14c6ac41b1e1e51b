"""
Streaming row access.

Rows are pulled from an unbuffered (MySQL) or server-side (PostgreSQL)
cursor in chunks so that neither strategy holds a full result set in driver
memory. Values are normalised to str, bytes or None; PostgreSQL rows are read
as the server's text, like MySQL rows (see cli.connections).
"""

import itertools
import logging
from collections.abc import Iterator
from typing import Any

import psycopg2.extensions
import pymysql.cursors

from utils.database_types import DatabaseType
from utils.tracing import trace_database_query

from ..errors import FetchError

logger = logging.getLogger(__name__)

_cursor_names = itertools.count(1)

Row = tuple[str | bytes | None, ...]


# json/jsonb and their arrays, listed explicitly in case their casters are not
# in psycopg2's global table.
POSTGRES_JSON_OIDS = (114, 199, 3802, 3807)
POSTGRES_BYTEA_OID = 17


def _server_text(value: str | None, cursor: Any) -> str | None:
    return value


# Every type psycopg2 would decode, except bytea, comes back as the server's
# text, which is also valid literal input (json, arrays, intervals).
POSTGRES_TEXT = psycopg2.extensions.new_type(
    tuple(sorted(
        (set(psycopg2.extensions.string_types) | set(POSTGRES_JSON_OIDS))
        - {POSTGRES_BYTEA_OID}
    )),
    "DBDIFF_SERVER_TEXT",
    _server_text,
)


def open_stream_cursor(connection: Any, db_type: DatabaseType) -> Any:
    """Open a cursor that fetches rows incrementally from the server."""
    if db_type == DatabaseType.MYSQL:
        return connection.cursor(pymysql.cursors.SSCursor)
    if db_type == DatabaseType.POSTGRESQL:
        cursor = connection.cursor(name=f"dbdiff_stream_{next(_cursor_names)}")
        psycopg2.extensions.register_type(POSTGRES_TEXT, cursor)
        return cursor
    return connection.cursor()


def normalize_value(value: Any) -> str | bytes | None:
    """Reduce a driver value to the raw str/bytes/None row model."""
    if value is None or isinstance(value, (str, bytes)):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return str(value)


def iter_rows(
    connection: Any,
    query: str,
    db_type: DatabaseType,
    chunk_size: int = 1000,
    table: str = "",
) -> Iterator[Row]:
    """
    Execute a query and yield its rows one at a time.

    The cursor is closed once the result is exhausted or the caller stops
    iterating.

    Args:
        connection: Open DB-API connection
        query: SELECT statement to run
        db_type: Dialect of the connection
        chunk_size: Rows fetched per round trip
        table: Table name used for tracing

    Yields:
        Row tuples of normalised values

    Raises:
        FetchError: If the query or a fetch fails
    """
    cursor = open_stream_cursor(connection, db_type)
    try:
        with trace_database_query("SELECT", table, db_type.value):
            cursor.execute(query)

        while True:
            batch = cursor.fetchmany(chunk_size)
            if not batch:
                break
            for row in batch:
                yield tuple(normalize_value(value) for value in row)
    except Exception as e:
        raise FetchError(f"query failed: {e}") from e
    finally:
        cursor.close()

    logger.debug(f"Finished streaming rows for {table or query}")
