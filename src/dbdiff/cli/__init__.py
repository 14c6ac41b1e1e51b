"""
Command-line interface for table diffing.

Available commands:
- run: Generate INSERT/UPDATE/DELETE statements for a table pair
- check: Verify that two table definitions match

Exit status is 0 on success and 1 on any failure.
"""

import sys

from utils.logging import configure_from_env, shutdown_logging
from utils.tracing import initialize_tracing, shutdown_tracing

from .commands import cmd_check, cmd_run
from .credentials import ConnectionConfig, get_connection_configs, load_connection_config
from .option_file import parse_option_lines, read_option_file
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the dbdiff CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_from_env(
        level=args.log_level,
        log_file=args.log_file,
        json_format=args.json_logs,
    )

    try:
        if args.command is None:
            parser.print_help(sys.stderr)
            sys.exit(1)

        if args.source_config and args.use_vault:
            parser.error("--source-config cannot be combined with --use-vault")
        if args.vault_source and not args.use_vault:
            parser.error("--vault-source requires --use-vault")

        initialize_tracing(otlp_endpoint=getattr(args, 'otlp_endpoint', None))
        try:
            if args.command == 'run':
                cmd_run(args)
            else:
                cmd_check(args)
        finally:
            shutdown_tracing()
    finally:
        shutdown_logging()


__all__ = [
    'main',
    'cmd_run',
    'cmd_check',
    'create_parser',
    'ConnectionConfig',
    'get_connection_configs',
    'load_connection_config',
    'parse_option_lines',
    'read_option_file',
]


if __name__ == '__main__':
    main()
