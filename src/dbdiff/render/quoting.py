"""
SQL literal quoting.

All values written into generated statements pass through quote_value, so
escaping rules for each dialect live in exactly one place.
"""

from typing import Any

from pymysql.converters import escape_string

from utils.database_types import DatabaseType


def quote_value(value: Any, db_type: DatabaseType) -> str:
    """
    Render a scalar as an SQL literal.

    Args:
        value: str, bytes or None (other types are rendered via str())
        db_type: Target dialect

    Returns:
        SQL literal; None becomes NULL, bytes become a hex literal
    """
    if value is None:
        return "NULL"

    if isinstance(value, (bytes, bytearray, memoryview)):
        hex_digits = bytes(value).hex()
        if db_type == DatabaseType.POSTGRESQL:
            return f"'\\x{hex_digits}'::bytea"
        return f"X'{hex_digits}'"

    if not isinstance(value, str):
        value = str(value)

    if db_type == DatabaseType.MYSQL:
        # MySQL treats backslash as an escape character inside string literals
        return f"'{escape_string(value)}'"

    escaped = value.replace("'", "''")
    return f"'{escaped}'"
