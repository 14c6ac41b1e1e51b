"""
Local diff strategy.

The whole target table is read into a dictionary keyed by primary-key
composite, then the source table is streamed past it. Suitable when source
and target live on different servers; memory use grows with the target.
"""

import logging
from collections.abc import Iterator
from typing import Any

from utils.database_types import DatabaseType
from utils.tracing import add_span_event

from ..render import (
    Statement,
    StatementType,
    render_delete,
    render_insert,
    render_update,
    select_all_query,
)
from ..schema import TableSchema
from .base import DiffEngine
from .rows import Row, iter_rows

logger = logging.getLogger(__name__)


def key_sort_order(key: tuple) -> tuple:
    """Total ordering over composites: NULL first, then text, then binary."""
    order = []
    for value in key:
        if value is None:
            order.append((0, ""))
        elif isinstance(value, bytes):
            order.append((2, value))
        else:
            order.append((1, value))
    return tuple(order)


class LocalDiffEngine(DiffEngine):
    """Diff two tables by indexing the target in memory."""

    strategy = "local"

    def __init__(
        self,
        source_connection: Any,
        target_connection: Any,
        schema: TableSchema,
        db_type: DatabaseType,
        chunk_size: int = 1000,
    ):
        super().__init__(schema, db_type, chunk_size)
        self.source_connection = source_connection
        self.target_connection = target_connection

    def diff(self, source_table: str, target_table: str) -> Iterator[Statement]:
        """
        Yield the statements that turn target_table into source_table.

        Inserts and updates follow source row order; deletes come last,
        ordered by primary key.
        """
        if not self._has_primary_key(target_table):
            return

        index = self._index_target(target_table)
        matched: set[tuple] = set()

        logger.info(f"Streaming source rows from {source_table}")
        for row in iter_rows(
            self.source_connection,
            select_all_query(source_table),
            self.db_type,
            self.chunk_size,
            table=source_table,
        ):
            self.stats.source_rows += 1
            key = self.schema.extract_key(row)

            if key not in index:
                statement = self._statement(
                    StatementType.INSERT, target_table, key,
                    lambda: render_insert(target_table, self.schema, row, self.db_type),
                )
            else:
                matched.add(key)
                changed = self.schema.change_set(row, index[key])
                if not changed:
                    continue
                statement = self._statement(
                    StatementType.UPDATE, target_table, key,
                    lambda: render_update(target_table, self.schema, row, changed, self.db_type),
                )

            if statement is not None:
                yield statement

        add_span_event("source_streamed", rows=self.stats.source_rows)

        residual = sorted(index.keys() - matched, key=key_sort_order)
        logger.info(f"{len(residual)} target rows have no source counterpart")
        for key in residual:
            statement = self._statement(
                StatementType.DELETE, target_table, key,
                lambda: render_delete(target_table, self.schema, index[key], self.db_type),
            )
            if statement is not None:
                yield statement

    def _index_target(self, target_table: str) -> dict[tuple, Row]:
        """Read every target row, keyed by primary key. The first row wins on duplicates."""
        logger.info(f"Loading target rows from {target_table}")
        index: dict[tuple, Row] = {}
        for row in iter_rows(
            self.target_connection,
            select_all_query(target_table),
            self.db_type,
            self.chunk_size,
            table=target_table,
        ):
            self.stats.target_rows += 1
            index.setdefault(self.schema.extract_key(row), row)

        if len(index) < self.stats.target_rows:
            logger.warning(
                f"{self.stats.target_rows - len(index)} duplicate primary keys in "
                f"{target_table} were ignored"
            )

        add_span_event("target_indexed", rows=self.stats.target_rows)
        logger.info(f"Indexed {len(index)} target rows")
        return index
