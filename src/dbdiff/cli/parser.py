"""
Command-line argument parser configuration.

This module sets up the argument parser for the dbdiff CLI tool,
defining all commands and their options.
"""

import argparse

from utils.database_types import DatabaseType

from ..orchestrator import Strategy


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'source_table',
        help='Table holding the desired data (used verbatim)'
    )
    parser.add_argument(
        'target_table',
        help='Table the generated statements modify (used verbatim)'
    )
    parser.add_argument(
        '--target-config',
        help='MySQL-style option file with target connection settings'
    )
    parser.add_argument(
        '--source-config',
        help='Option file for a separate source database '
             '(default: source table is read through the target connection)'
    )
    parser.add_argument(
        '--dialect',
        choices=[t.value for t in DatabaseType],
        default=DatabaseType.MYSQL.value,
        help='SQL dialect of both databases (default: mysql)'
    )
    parser.add_argument(
        '--use-vault',
        action='store_true',
        help='Fetch target credentials from HashiCorp Vault'
    )
    parser.add_argument(
        '--vault-source',
        action='store_true',
        help='With --use-vault, also fetch separate source credentials'
    )
    parser.add_argument(
        '--consistent-snapshot',
        action='store_true',
        help='Read both tables inside a repeatable-read, read-only transaction'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='dbdiff',
        description="Generate INSERT/UPDATE/DELETE statements that make a target "
                    "table identical to a source table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Both tables in one database: compare with server-side joins
  dbdiff run --target-config target.cnf staging.customers prod.customers

  # Tables on different servers: index the target locally
  dbdiff run --source-config source.cnf --target-config target.cnf customers customers

  # Write an atomic script wrapped in a transaction
  dbdiff run --target-config target.cnf --output fix.sql --transaction new_orders orders

  # PostgreSQL with credentials from Vault
  dbdiff run --dialect postgresql --use-vault public.src public.dst

  # Only check that the two tables can be compared
  dbdiff check --target-config target.cnf staging.customers prod.customers

Option files use the MySQL format (host, port, user, password, database).
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: $LOG_LEVEL or INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file, rotated (default: $LOG_FILE)'
    )
    parser.add_argument(
        '--json-logs',
        action='store_true',
        default=None,
        help='Emit logs as JSON (default: $LOG_JSON)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Generate the statements for one table pair')
    _add_connection_arguments(run_parser)
    run_parser.add_argument(
        '--strategy',
        choices=[s.value for s in Strategy],
        default=Strategy.AUTO.value,
        help='local: index target in memory; remote: server-side joins '
             '(default: auto, remote when both tables share a connection)'
    )
    run_parser.add_argument(
        '--output',
        help='Write the script to this file instead of stdout (written atomically)'
    )
    run_parser.add_argument(
        '--transaction',
        action='store_true',
        help='Wrap the script in a transaction'
    )
    run_parser.add_argument(
        '--chunk-size',
        type=_positive_int,
        default=1000,
        help='Rows fetched per round trip (default: 1000)'
    )
    run_parser.add_argument(
        '--metrics-file',
        help='Write Prometheus metrics to this textfile after the run'
    )
    run_parser.add_argument(
        '--otlp-endpoint',
        help='Export traces to this OTLP collector (default: OTLP_ENDPOINT env var)'
    )

    # ========== Check command ==========
    check_parser = subparsers.add_parser(
        'check', help='Only verify that the two table definitions match'
    )
    _add_connection_arguments(check_parser)

    return parser
