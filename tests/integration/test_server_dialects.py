"""
Integration tests against live MySQL and PostgreSQL servers.

Skipped unless MYSQL_HOST / POSTGRES_HOST point at a server where the test
user may create tables.
"""

import os

import psycopg2
import pymysql
import pytest

from dbdiff.cli.connections import MYSQL_TEXT_CONVERSIONS
from dbdiff.engine import LocalDiffEngine, RemoteDiffEngine
from dbdiff.schema import discover_schema
from utils.database_types import DatabaseType

from helpers import summarize

pytestmark = pytest.mark.integration

SOURCE_ROWS = [(1, "Ann", "ann@x"), (2, "bob", None), (4, "trailing ", "d@x")]
TARGET_ROWS = [(1, "Ann", None), (2, "Bob", None), (3, "Cid", "c@x"), (4, "trailing", "d@x")]

EXPECTED = [
    ("DELETE", "dbdiff_dst", ("3",)),
    ("UPDATE", "dbdiff_dst", ("1",)),
    ("UPDATE", "dbdiff_dst", ("2",)),
    ("UPDATE", "dbdiff_dst", ("4",)),
]


def load_tables(conn, create, insert):
    cursor = conn.cursor()
    for table, rows in (("dbdiff_src", SOURCE_ROWS), ("dbdiff_dst", TARGET_ROWS)):
        cursor.execute(f"DROP TABLE IF EXISTS {table}")
        cursor.execute(create.format(table=table))
        cursor.executemany(insert.format(table=table), rows)
    conn.commit()
    cursor.close()


def apply_statements(conn, statements):
    cursor = conn.cursor()
    for statement in statements:
        cursor.execute(statement.sql)
    conn.commit()
    cursor.close()


def fetch(conn, table):
    cursor = conn.cursor()
    cursor.execute(f"SELECT * FROM {table} ORDER BY id")
    rows = cursor.fetchall()
    cursor.close()
    return rows


@pytest.mark.skipif(not os.getenv("POSTGRES_HOST"), reason="POSTGRES_HOST not set")
class TestPostgres:
    """Diffs on PostgreSQL"""

    @pytest.fixture
    def postgres_conn(self):
        conn = psycopg2.connect(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            dbname=os.getenv("POSTGRES_DB", "postgres"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )
        load_tables(
            conn,
            "CREATE TABLE {table} (id INTEGER PRIMARY KEY, name TEXT, email TEXT)",
            "INSERT INTO {table} VALUES (%s, %s, %s)",
        )
        yield conn
        conn.rollback()
        conn.close()

    @pytest.mark.parametrize("engine_class", [LocalDiffEngine, RemoteDiffEngine])
    def test_diff_and_apply(self, postgres_conn, engine_class):
        db_type = DatabaseType.POSTGRESQL
        schema = discover_schema(postgres_conn, "dbdiff_dst", db_type)
        if engine_class is LocalDiffEngine:
            engine = LocalDiffEngine(postgres_conn, postgres_conn, schema, db_type)
        else:
            engine = RemoteDiffEngine(postgres_conn, schema, db_type)

        statements = list(engine.diff("dbdiff_src", "dbdiff_dst"))
        assert summarize(statements) == EXPECTED

        apply_statements(postgres_conn, statements)
        assert fetch(postgres_conn, "dbdiff_dst") == fetch(postgres_conn, "dbdiff_src")

    @pytest.mark.parametrize("engine_class", [LocalDiffEngine, RemoteDiffEngine])
    def test_json_and_array_columns(self, postgres_conn, engine_class):
        """json, jsonb and array values must replay as valid literals"""
        cursor = postgres_conn.cursor()
        for table in ("dbdiff_doc_src", "dbdiff_doc_dst"):
            cursor.execute(f"DROP TABLE IF EXISTS {table}")
            cursor.execute(
                f"CREATE TABLE {table} (id INTEGER PRIMARY KEY, doc JSON, meta JSONB, tags INTEGER[])"
            )
        cursor.execute(
            "INSERT INTO dbdiff_doc_src VALUES "
            "(1, '{\"a\": \"it''s\"}', '{\"k\": [1, 2]}', '{1,2}'), (2, '[]', '{}', '{}')"
        )
        cursor.execute(
            "INSERT INTO dbdiff_doc_dst VALUES "
            "(1, '{\"a\": \"b\"}', '{\"k\": [1, 2]}', '{1,3}'), (3, 'null', NULL, NULL)"
        )
        postgres_conn.commit()
        cursor.close()

        db_type = DatabaseType.POSTGRESQL
        schema = discover_schema(postgres_conn, "dbdiff_doc_dst", db_type)
        if engine_class is LocalDiffEngine:
            engine = LocalDiffEngine(postgres_conn, postgres_conn, schema, db_type)
        else:
            engine = RemoteDiffEngine(postgres_conn, schema, db_type)

        statements = list(engine.diff("dbdiff_doc_src", "dbdiff_doc_dst"))
        assert summarize(statements) == [
            ("DELETE", "dbdiff_doc_dst", ("3",)),
            ("INSERT", "dbdiff_doc_dst", ("2",)),
            ("UPDATE", "dbdiff_doc_dst", ("1",)),
        ]

        apply_statements(postgres_conn, statements)
        as_text = "SELECT id, doc::text, meta::text, tags::text FROM {} ORDER BY id"
        cursor = postgres_conn.cursor()
        cursor.execute(as_text.format("dbdiff_doc_dst"))
        target = cursor.fetchall()
        cursor.execute(as_text.format("dbdiff_doc_src"))
        assert target == cursor.fetchall()
        cursor.close()


@pytest.mark.skipif(not os.getenv("MYSQL_HOST"), reason="MYSQL_HOST not set")
class TestMySQL:
    """Diffs on MySQL; case and trailing-space changes must be detected"""

    @pytest.fixture
    def mysql_conn(self):
        conn = pymysql.connect(
            host=os.getenv("MYSQL_HOST", "localhost"),
            port=int(os.getenv("MYSQL_PORT", "3306")),
            user=os.getenv("MYSQL_USER", "root"),
            password=os.getenv("MYSQL_PASSWORD", ""),
            database=os.getenv("MYSQL_DATABASE", "test"),
            charset="utf8mb4",
            conv=MYSQL_TEXT_CONVERSIONS,
        )
        load_tables(
            conn,
            "CREATE TABLE {table} (id INT PRIMARY KEY, name VARCHAR(50), email VARCHAR(50))",
            "INSERT INTO {table} VALUES (%s, %s, %s)",
        )
        yield conn
        conn.close()

    @pytest.mark.parametrize("engine_class", [LocalDiffEngine, RemoteDiffEngine])
    def test_diff_and_apply(self, mysql_conn, engine_class):
        db_type = DatabaseType.MYSQL
        schema = discover_schema(mysql_conn, "dbdiff_dst", db_type)
        if engine_class is LocalDiffEngine:
            engine = LocalDiffEngine(mysql_conn, mysql_conn, schema, db_type)
        else:
            engine = RemoteDiffEngine(mysql_conn, schema, db_type)

        statements = list(engine.diff("dbdiff_src", "dbdiff_dst"))
        assert summarize(statements) == EXPECTED

        apply_statements(mysql_conn, statements)
        assert fetch(mysql_conn, "dbdiff_dst") == fetch(mysql_conn, "dbdiff_src")
