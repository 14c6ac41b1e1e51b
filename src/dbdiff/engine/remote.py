"""
Remote diff strategy.

When both tables are reachable through one connection the comparison is
pushed to the database as three join queries (changed, new and old rows),
so only differing rows travel to the client.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from utils.database_types import DatabaseType
from utils.tracing import add_span_event

from ..errors import DegenerateClauseError
from ..render import (
    Statement,
    StatementType,
    changed_rows_query,
    new_rows_query,
    old_rows_query,
    render_delete,
    render_insert,
    render_update,
)
from ..schema import TableSchema
from .base import DiffEngine
from .rows import iter_rows

logger = logging.getLogger(__name__)


class RemoteDiffEngine(DiffEngine):
    """Diff two tables with server-side joins over a single connection."""

    strategy = "remote"

    def __init__(
        self,
        connection: Any,
        schema: TableSchema,
        db_type: DatabaseType,
        chunk_size: int = 1000,
    ):
        super().__init__(schema, db_type, chunk_size)
        self.connection = connection

    def diff(self, source_table: str, target_table: str) -> Iterator[Statement]:
        """Yield updates, then inserts, then deletes. Each query is drained before the next."""
        if not self._has_primary_key(target_table):
            return

        yield from self._changed_rows(source_table, target_table)
        yield from self._new_rows(source_table, target_table)
        yield from self._old_rows(source_table, target_table)

    def _query(self, build: Callable[..., str], source_table: str, target_table: str) -> str | None:
        try:
            return build(source_table, target_table, self.schema, self.db_type)
        except DegenerateClauseError as e:
            logger.info(f"Skipping {build.__name__} for {target_table}: {e}")
            return None

    def _changed_rows(self, source_table: str, target_table: str) -> Iterator[Statement]:
        query = self._query(changed_rows_query, source_table, target_table)
        if query is None:
            return

        width = self.schema.field_count
        found = 0
        for row in iter_rows(self.connection, query, self.db_type, self.chunk_size, table=target_table):
            found += 1
            self.stats.source_rows += 1
            self.stats.target_rows += 1

            # source columns first, target columns after; the join already
            # matched the keys, possibly under a case-insensitive collation
            changed = self.schema.change_set(
                row, row, offset=width, indices=self.schema.non_key_indices
            )
            if not changed:
                continue

            source_row = row[:width]
            key = self.schema.extract_key(source_row)
            statement = self._statement(
                StatementType.UPDATE, target_table, key,
                lambda: render_update(target_table, self.schema, source_row, changed, self.db_type),
            )
            if statement is not None:
                yield statement

        add_span_event("changed_rows_read", rows=found)

    def _new_rows(self, source_table: str, target_table: str) -> Iterator[Statement]:
        query = self._query(new_rows_query, source_table, target_table)
        if query is None:
            return

        found = 0
        for row in iter_rows(self.connection, query, self.db_type, self.chunk_size, table=source_table):
            found += 1
            self.stats.source_rows += 1
            statement = self._statement(
                StatementType.INSERT, target_table, self.schema.extract_key(row),
                lambda: render_insert(target_table, self.schema, row, self.db_type),
            )
            if statement is not None:
                yield statement

        add_span_event("new_rows_read", rows=found)

    def _old_rows(self, source_table: str, target_table: str) -> Iterator[Statement]:
        query = self._query(old_rows_query, source_table, target_table)
        if query is None:
            return

        found = 0
        for row in iter_rows(self.connection, query, self.db_type, self.chunk_size, table=target_table):
            found += 1
            self.stats.target_rows += 1
            statement = self._statement(
                StatementType.DELETE, target_table, self.schema.extract_key(row),
                lambda: render_delete(target_table, self.schema, row, self.db_type),
            )
            if statement is not None:
                yield statement

        add_span_event("old_rows_read", rows=found)
