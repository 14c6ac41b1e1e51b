"""
CLI command implementations.

- run: generate the statements for one table pair
- check: verify that two table definitions match
"""

import argparse
import logging
import sys
from typing import Any

from utils.database_types import DatabaseType
from utils.metrics import DiffMetrics, write_metrics_file

from ..orchestrator import Strategy, check_schemas, diff_tables
from ..output import StatementWriter, open_output
from .connections import begin_snapshot, open_connection
from .credentials import get_connection_configs

logger = logging.getLogger(__name__)


def report_error(error: Exception) -> None:
    """Print a failure the way the command line reports it."""
    logger.debug("Run failed", exc_info=error)
    print(f"ERROR! {error}", file=sys.stderr)


def _connect(args: argparse.Namespace, opened: list) -> tuple[Any, Any]:
    """Open target (and separate source) connections, recording them in opened."""
    source_config, target_config = get_connection_configs(args)

    target_conn = open_connection(target_config)
    opened.append(target_conn)

    source_conn = target_conn
    if source_config is not None:
        source_conn = open_connection(source_config)
        opened.append(source_conn)

    if args.consistent_snapshot:
        for connection in opened:
            begin_snapshot(connection, target_config.dialect)

    return source_conn, target_conn


def _close_all(opened: list) -> None:
    for connection in opened:
        try:
            connection.close()
        except Exception as e:
            logger.warning(f"Error closing connection: {e}")


def cmd_run(args: argparse.Namespace) -> None:
    """
    Generate the statements that make the target table match the source

    Args:
        args: Parsed command-line arguments
    """
    logger.info(f"Starting diff: {args.source_table} -> {args.target_table}")

    db_type = DatabaseType(args.dialect)
    metrics = DiffMetrics()
    opened: list = []
    try:
        source_conn, target_conn = _connect(args, opened)

        with open_output(args.output) as stream:
            writer = StatementWriter(stream, db_type=db_type, transaction=args.transaction)
            stats = diff_tables(
                source_conn,
                target_conn,
                args.source_table,
                args.target_table,
                writer,
                db_type=db_type,
                strategy=Strategy(args.strategy),
                chunk_size=args.chunk_size,
                metrics=metrics,
            )
    except Exception as e:
        report_error(e)
        sys.exit(1)
    finally:
        _close_all(opened)
        if args.metrics_file:
            write_metrics_file(args.metrics_file, metrics.registry)

    logger.info(
        f"Generated {stats.total_statements} statements "
        f"({stats.inserts} inserts, {stats.updates} updates, {stats.deletes} deletes)"
    )
    sys.exit(0)


def cmd_check(args: argparse.Namespace) -> None:
    """
    Check that source and target tables can be diffed

    Args:
        args: Parsed command-line arguments
    """
    opened: list = []
    try:
        source_conn, target_conn = _connect(args, opened)
        schema = check_schemas(
            source_conn, target_conn, args.source_table, args.target_table, DatabaseType(args.dialect)
        )
    except Exception as e:
        report_error(e)
        sys.exit(1)
    finally:
        _close_all(opened)

    key = ", ".join(schema.primary_key_names) or "none"
    print(
        f"{args.source_table} and {args.target_table} match: "
        f"{schema.field_count} columns, primary key ({key})"
    )
    if not schema.has_primary_key:
        logger.warning("Tables have no primary key; a diff would generate no statements")
    sys.exit(0)
