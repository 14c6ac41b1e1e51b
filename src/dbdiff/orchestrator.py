"""
Diff orchestration.

Validates that both tables share a schema, picks the local or remote
strategy, drives the chosen engine into a StatementWriter and records the
run in metrics and tracing.
"""

import time
from enum import Enum
from typing import Any

from utils.database_types import DatabaseType
from utils.logging import ContextLogger
from utils.metrics import DiffMetrics
from utils.tracing import add_span_attributes, trace_operation

from .engine import DiffEngine, DiffStats, LocalDiffEngine, RemoteDiffEngine
from .output import StatementWriter
from .schema import TableSchema, discover_schema


class Strategy(str, Enum):
    """How rows are compared."""

    AUTO = "auto"
    LOCAL = "local"
    REMOTE = "remote"


def select_strategy(
    strategy: Strategy, source_connection: Any, target_connection: Any
) -> Strategy:
    """
    Resolve AUTO to a concrete strategy.

    One shared connection means both tables live on the same server and the
    comparison can run there; two connections require the local strategy.

    Raises:
        ValueError: If REMOTE is requested for two distinct connections
    """
    shared = source_connection is None or source_connection is target_connection

    if strategy == Strategy.AUTO:
        return Strategy.REMOTE if shared else Strategy.LOCAL
    if strategy == Strategy.REMOTE and not shared:
        raise ValueError("remote strategy needs both tables on one connection")
    return strategy


def check_schemas(
    source_connection: Any,
    target_connection: Any,
    source_table: str,
    target_table: str,
    db_type: DatabaseType,
) -> TableSchema:
    """
    Discover both schemas, target first, and require them to match.

    Returns:
        The shared TableSchema

    Raises:
        SchemaIncompatibleError: If columns or primary keys differ
        FetchError: If a schema cannot be read
    """
    target_schema = discover_schema(target_connection, target_table, db_type)
    source_schema = discover_schema(source_connection, source_table, db_type)
    source_schema.ensure_compatible(target_schema)
    return target_schema


def build_engine(
    strategy: Strategy,
    source_connection: Any,
    target_connection: Any,
    schema: TableSchema,
    db_type: DatabaseType,
    chunk_size: int = 1000,
) -> DiffEngine:
    if strategy == Strategy.REMOTE:
        return RemoteDiffEngine(target_connection, schema, db_type, chunk_size)
    return LocalDiffEngine(source_connection, target_connection, schema, db_type, chunk_size)


def diff_tables(
    source_connection: Any,
    target_connection: Any,
    source_table: str,
    target_table: str,
    writer: StatementWriter,
    db_type: DatabaseType | None = None,
    strategy: Strategy = Strategy.AUTO,
    chunk_size: int = 1000,
    metrics: DiffMetrics | None = None,
) -> DiffStats:
    """
    Write the statements that make target_table equal to source_table.

    Args:
        source_connection: Connection holding the source table, or None to
            use target_connection for both
        target_connection: Connection holding the target table
        source_table: Source table name, used verbatim
        target_table: Target table name, used verbatim
        writer: Destination of the generated statements
        db_type: Dialect, detected from target_connection when None
        strategy: AUTO, LOCAL or REMOTE
        chunk_size: Rows fetched per round trip
        metrics: Metrics to record the run in (optional)

    Returns:
        DiffStats of the run

    Raises:
        SchemaIncompatibleError: Before any output if the schemas differ
        FetchError: If reading a schema or rows fails
    """
    if source_connection is None:
        source_connection = target_connection
    if db_type is None:
        db_type = DatabaseType.from_connection(target_connection)

    chosen = select_strategy(strategy, source_connection, target_connection)
    log = ContextLogger(
        __name__,
        source_table=source_table,
        target_table=target_table,
        strategy=chosen.value,
    )

    start_time = time.time()
    success = False

    with trace_operation(
        "diff_tables",
        source_table=source_table,
        target_table=target_table,
        strategy=chosen.value,
        dialect=db_type.value,
    ):
        try:
            schema = check_schemas(
                source_connection, target_connection, source_table, target_table, db_type
            )
            log.info(
                f"Diffing {source_table} -> {target_table} "
                f"({schema.field_count} columns, {chosen.value} strategy)"
            )

            engine = build_engine(
                chosen, source_connection, target_connection, schema, db_type, chunk_size
            )
            writer.write_all(engine.diff(source_table, target_table))
            writer.close()

            stats = engine.stats
            stats.duration_seconds = time.time() - start_time
            success = True

            add_span_attributes(
                inserts=stats.inserts,
                updates=stats.updates,
                deletes=stats.deletes,
                suppressed=stats.suppressed,
            )
            if stats.suppressed:
                log.warning(f"{stats.suppressed} statements suppressed due to empty clauses")
            log.info(
                f"Diff complete: {stats.inserts} inserts, {stats.updates} updates, "
                f"{stats.deletes} deletes in {stats.duration_seconds:.2f}s"
            )
            if metrics:
                metrics.record_stats(target_table, stats)
            return stats
        finally:
            if metrics:
                metrics.record_run(
                    target_table, chosen.value, success, time.time() - start_time
                )
