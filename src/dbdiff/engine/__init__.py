"""
Diff engines.

- LocalDiffEngine: indexes the target in memory, works across servers
- RemoteDiffEngine: pushes the comparison into join queries on one server
"""

from .base import DiffEngine, DiffStats
from .local import LocalDiffEngine, key_sort_order
from .remote import RemoteDiffEngine
from .rows import iter_rows, normalize_value, open_stream_cursor

__all__ = [
    "DiffEngine",
    "DiffStats",
    "LocalDiffEngine",
    "RemoteDiffEngine",
    "key_sort_order",
    "iter_rows",
    "normalize_value",
    "open_stream_cursor",
]
