"""
Client-side span helpers for database queries and HTTP requests.
"""

from typing import Any

from opentelemetry import trace

from .context import trace_operation


def trace_database_query(
    query_type: str,
    table: str,
    database: str = "unknown"
) -> Any:
    """
    Context manager for tracing a database query.

    Args:
        query_type: Type of query (SELECT, DESCRIBE, ...)
        table: Table name
        database: Database system (mysql, postgresql, sqlite)

    Example:
        >>> with trace_database_query("SELECT", "customers", "mysql"):
        ...     cursor.execute("SELECT * FROM customers")
    """
    return trace_operation(
        f"db.{query_type.lower()}",
        kind=trace.SpanKind.CLIENT,
        **{
            "db.operation": query_type,
            "db.table": table,
            "db.system": database,
        }
    )


def trace_http_request(method: str, url: str, **extra_attrs):
    """
    Context manager for tracing an HTTP request.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        **extra_attrs: Additional attributes
    """
    return trace_operation(
        f"http.{method.lower()}",
        kind=trace.SpanKind.CLIENT,
        **{
            "http.method": method,
            "http.url": url,
            **extra_attrs
        }
    )
