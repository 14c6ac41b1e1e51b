"""
Helpers for building SQLite fixtures tables and applying generated scripts.
"""

import sqlite3
from collections.abc import Iterable, Sequence

DEFAULT_COLUMNS = (("id", "INTEGER"), ("name", "TEXT"), ("email", "TEXT"))


def create_table(
    conn: sqlite3.Connection,
    name: str,
    rows: Iterable[Sequence] = (),
    columns: Sequence[tuple[str, str]] = DEFAULT_COLUMNS,
    primary_key: Sequence[str] = ("id",),
) -> None:
    """Create a table and insert rows into it."""
    definitions = [f'"{col}" {col_type}' for col, col_type in columns]
    if primary_key:
        definitions.append("PRIMARY KEY (" + ", ".join(f'"{c}"' for c in primary_key) + ")")
    conn.execute(f"CREATE TABLE {name} ({', '.join(definitions)})")
    placeholders = ", ".join("?" for _ in columns)
    conn.executemany(f"INSERT INTO {name} VALUES ({placeholders})", list(rows))
    conn.commit()


def table_rows(conn: sqlite3.Connection, name: str) -> list[tuple]:
    """All rows of a table ordered by their first column."""
    return list(conn.execute(f"SELECT * FROM {name} ORDER BY 1"))


def apply_statements(conn: sqlite3.Connection, statements: Iterable) -> None:
    """Execute generated statements (objects with .sql, or strings)."""
    for statement in statements:
        conn.execute(getattr(statement, "sql", statement))
    conn.commit()


def summarize(statements: Iterable) -> list[tuple]:
    """(type, table, key) triples, sorted, for order-insensitive comparison."""
    return sorted(
        (s.statement_type.value, s.table, s.key) for s in statements
    )
