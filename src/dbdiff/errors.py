"""
Exception hierarchy for table diffing.

Every error a diff run can raise derives from DiffError, so callers
(the CLI in particular) can report failures with a single handler.
"""

from typing import Any


class DiffError(Exception):
    """Base class for all dbdiff errors."""


class SchemaError(DiffError):
    """A table schema descriptor could not be built."""


class SchemaIncompatibleError(SchemaError):
    """Source and target tables do not share columns and primary key."""

    def __init__(self, message: str, source: Any = None, target: Any = None):
        super().__init__(message)
        self.source = source
        self.target = target


class FetchError(DiffError):
    """Reading a schema or rows from the database failed."""


class DegenerateClauseError(DiffError):
    """
    A statement clause rendered empty.

    Raised by the renderer when a WHERE/SET/USING clause has no terms, which
    would otherwise produce an unconditional or malformed statement. The
    engines catch it and skip the statement.
    """


class ConfigError(DiffError):
    """Connection settings are missing or malformed."""
