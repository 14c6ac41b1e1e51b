"""
Database type enumeration for type-safe dialect handling.

Everything that differs between the supported SQL dialects (identifier
quoting, null-safe comparison, transaction syntax, default ports) is
answered here so the renderer and engines never branch on raw strings.
"""

from enum import Enum
from typing import Any


class DatabaseType(str, Enum):
    """
    Enumeration of supported database types.

    Inherits from str for easy comparison with command-line values.
    """

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_connection(cls, connection: Any) -> "DatabaseType":
        """
        Detect database type from the driver module of a connection.

        Args:
            connection: DB-API connection (or cursor) object

        Returns:
            DatabaseType enum value

        Raises:
            ValueError: If the driver is not recognised
        """
        driver = f"{type(connection).__module__}.{type(connection).__name__}".lower()

        if "pymysql" in driver or "mysql" in driver:
            return cls.MYSQL
        elif "psycopg" in driver or "postgres" in driver:
            return cls.POSTGRESQL
        elif "sqlite" in driver:
            return cls.SQLITE

        raise ValueError(f"Cannot detect database type for driver {driver}")

    @property
    def default_port(self) -> int | None:
        """Default TCP port, None for file based databases."""
        if self == DatabaseType.MYSQL:
            return 3306
        elif self == DatabaseType.POSTGRESQL:
            return 5432
        return None

    def quote_identifier(self, identifier: str) -> str:
        """
        Quote identifier based on database type.

        Args:
            identifier: Column name

        Returns:
            Quoted identifier string
        """
        if self == DatabaseType.MYSQL:
            return "`" + identifier.replace("`", "``") + "`"
        return '"' + identifier.replace('"', '""') + '"'

    def differs(self, left: str, right: str) -> str:
        """
        Null-safe "values differ" predicate between two column references.

        NULL compared with NULL is equal and NULL compared with a value
        differs. MySQL compares binary so that collation rules never hide
        a case or trailing-space change; PostgreSQL compares the text forms,
        which also works for types without an equality operator (json).

        Args:
            left: Qualified left operand, e.g. s.`name`
            right: Qualified right operand, e.g. t.`name`
        """
        if self == DatabaseType.MYSQL:
            return f"(NOT BINARY {left} <=> {right})"
        elif self == DatabaseType.POSTGRESQL:
            return f"({left}::text IS DISTINCT FROM {right}::text)"
        return f"({left} IS NOT {right})"

    @property
    def begin_transaction(self) -> str:
        """Statement that opens a transaction in a generated script."""
        if self == DatabaseType.MYSQL:
            return "START TRANSACTION"
        return "BEGIN"
