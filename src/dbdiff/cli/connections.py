"""
Opening database connections for a CLI run.
"""

import logging
import sqlite3
from typing import Any

import psycopg2
import pymysql
import pymysql.converters

from utils.database_types import DatabaseType

from ..errors import FetchError
from .credentials import ConnectionConfig

logger = logging.getLogger(__name__)

# Encoders only: with no type decoders PyMySQL returns every column as text
# (bytes for binary columns), which keeps values byte-exact for comparison.
MYSQL_TEXT_CONVERSIONS = {
    key: value
    for key, value in pymysql.converters.conversions.items()
    if not isinstance(key, int)
}


def open_connection(config: ConnectionConfig) -> Any:
    """
    Connect to the database described by config.

    Raises:
        FetchError: If the connection cannot be established
    """
    try:
        if config.dialect == DatabaseType.MYSQL:
            connection = pymysql.connect(
                host=config.host,
                port=config.port or config.dialect.default_port,
                user=config.user,
                password=config.password,
                database=config.database,
                charset="utf8mb4",
                conv=MYSQL_TEXT_CONVERSIONS,
            )
        elif config.dialect == DatabaseType.POSTGRESQL:
            connection = psycopg2.connect(
                host=config.host,
                port=config.port or config.dialect.default_port,
                user=config.user,
                password=config.password,
                dbname=config.database,
            )
        else:
            connection = sqlite3.connect(config.database)
    except (pymysql.MySQLError, psycopg2.Error, sqlite3.Error) as e:
        raise FetchError(f"cannot connect to {config.describe()}: {e}") from e

    logger.info(f"Connected to {config.describe()}")
    return connection


def begin_snapshot(connection: Any, db_type: DatabaseType) -> None:
    """
    Start a read-only repeatable-read transaction so every query of the run
    sees the same data.
    """
    if db_type == DatabaseType.POSTGRESQL:
        connection.set_session(isolation_level="REPEATABLE READ", readonly=True)
        return

    cursor = connection.cursor()
    try:
        if db_type == DatabaseType.MYSQL:
            cursor.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ")
            cursor.execute("START TRANSACTION WITH CONSISTENT SNAPSHOT, READ ONLY")
        else:
            cursor.execute("BEGIN")
    finally:
        cursor.close()
    logger.debug("Consistent snapshot started")
