"""
Connection settings for the CLI.

Each side of a diff (source, target) gets a ConnectionConfig built from, in
order of precedence: Vault, an option file, then DBDIFF_<ROLE>_* environment
variables filling whatever is still missing.
"""

import argparse
import logging
import os
from dataclasses import dataclass

import requests

from utils.database_types import DatabaseType
from utils.vault_client import VaultClient

from ..errors import ConfigError
from .option_file import read_option_file

logger = logging.getLogger(__name__)

FIELDS = ("host", "port", "user", "password", "database")


@dataclass
class ConnectionConfig:
    """Settings needed to open one database connection."""

    dialect: DatabaseType
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None

    def describe(self) -> str:
        """Location of the database, without credentials."""
        if self.dialect == DatabaseType.SQLITE:
            return f"sqlite:{self.database}"
        location = f"{self.host}:{self.port or self.dialect.default_port}"
        if self.database:
            location += f"/{self.database}"
        return f"{self.dialect.value}://{location}"


def required_fields(dialect: DatabaseType) -> tuple[str, ...]:
    if dialect == DatabaseType.SQLITE:
        return ("database",)
    return ("host", "user", "password")


def env_settings(role: str) -> dict[str, str]:
    """DBDIFF_<ROLE>_<FIELD> variables that are set."""
    settings = {}
    for field in FIELDS:
        value = os.getenv(f"DBDIFF_{role.upper()}_{field.upper()}")
        if value is not None:
            settings[field] = value
    return settings


def load_connection_config(
    role: str,
    dialect: DatabaseType,
    config_path: str | None = None,
    vault_client: VaultClient | None = None,
) -> ConnectionConfig:
    """
    Resolve the connection settings of one side.

    Args:
        role: "source" or "target"
        dialect: Database dialect
        config_path: MySQL-style option file (optional)
        vault_client: Fetch settings from Vault instead of a file (optional)

    Returns:
        ConnectionConfig

    Raises:
        ConfigError: If a required setting is missing or invalid
    """
    if vault_client is not None:
        try:
            settings = {
                key: str(value)
                for key, value in vault_client.get_database_credentials(role).items()
            }
        except (ValueError, requests.RequestException) as e:
            raise ConfigError(f"cannot fetch {role} credentials from Vault: {e}") from e
        origin = f"Vault secret for {role}"
    elif config_path:
        settings = read_option_file(config_path)
        origin = f"config file {config_path}"
    else:
        settings = {}
        origin = f"{role} settings"

    for field, value in env_settings(role).items():
        settings.setdefault(field, value)

    for field in required_fields(dialect):
        if field not in settings:
            raise ConfigError(f"missing {field} in {origin}")

    port = settings.get("port")
    if port is not None:
        try:
            port = int(port)
        except ValueError:
            raise ConfigError(f"invalid port {port!r} in {origin}") from None

    return ConnectionConfig(
        dialect=dialect,
        host=settings.get("host"),
        port=port,
        user=settings.get("user"),
        password=settings.get("password"),
        database=settings.get("database") or None,
    )


def has_source_settings(args: argparse.Namespace) -> bool:
    """Whether the run names a separate source database."""
    if args.use_vault:
        return args.vault_source
    return bool(args.source_config) or bool(env_settings("source"))


def get_connection_configs(
    args: argparse.Namespace,
) -> tuple[ConnectionConfig | None, ConnectionConfig]:
    """
    Build (source, target) settings from parsed arguments.

    Source is None when both tables live in the target database.
    """
    dialect = DatabaseType(args.dialect)
    vault_client = VaultClient() if args.use_vault else None

    target = load_connection_config("target", dialect, args.target_config, vault_client)
    source = None
    if has_source_settings(args):
        source = load_connection_config("source", dialect, args.source_config, vault_client)

    logger.info(
        f"Target database: {target.describe()}; "
        f"source database: {source.describe() if source else 'same connection'}"
    )
    return source, target
