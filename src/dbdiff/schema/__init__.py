"""
Table schema descriptors and their discovery from live connections.
"""

from .descriptor import MAX_COLUMNS, TableSchema
from .discovery import discover_schema

__all__ = [
    "TableSchema",
    "MAX_COLUMNS",
    "discover_schema",
]
