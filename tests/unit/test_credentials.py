"""
Unit tests for connection settings resolution.
"""

import argparse
from unittest.mock import MagicMock, patch

import pytest
import requests

from dbdiff.cli.credentials import (
    ConnectionConfig,
    get_connection_configs,
    has_source_settings,
    load_connection_config,
    required_fields,
)
from dbdiff.errors import ConfigError
from utils.database_types import DatabaseType


def write_config(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def make_args(**overrides):
    defaults = dict(
        dialect="mysql",
        target_config=None,
        source_config=None,
        use_vault=False,
        vault_source=False,
    )
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


class TestConnectionConfig:
    """Test ConnectionConfig helpers"""

    def test_describe_uses_default_port(self):
        config = ConnectionConfig(DatabaseType.MYSQL, host="db", user="u", password="p", database="shop")
        assert config.describe() == "mysql://db:3306/shop"

    def test_describe_sqlite(self):
        config = ConnectionConfig(DatabaseType.SQLITE, database="/tmp/x.db")
        assert config.describe() == "sqlite:/tmp/x.db"

    def test_describe_never_shows_password(self):
        config = ConnectionConfig(DatabaseType.POSTGRESQL, host="db", user="u", password="hunter2")
        assert "hunter2" not in config.describe()

    def test_required_fields(self):
        assert required_fields(DatabaseType.MYSQL) == ("host", "user", "password")
        assert required_fields(DatabaseType.SQLITE) == ("database",)


class TestLoadConnectionConfig:
    """Test precedence and validation of settings"""

    def test_from_option_file(self, tmp_path):
        path = write_config(tmp_path, "t.cnf", "host=db\nport=3307\nuser=u\npassword=p\ndatabase=shop\n")

        config = load_connection_config("target", DatabaseType.MYSQL, path)

        assert config == ConnectionConfig(DatabaseType.MYSQL, "db", 3307, "u", "p", "shop")

    def test_missing_required_key(self, tmp_path):
        path = write_config(tmp_path, "t.cnf", "host=db\nuser=u\n")

        with pytest.raises(ConfigError) as exc_info:
            load_connection_config("target", DatabaseType.MYSQL, path)

        assert str(exc_info.value) == f"missing password in config file {path}"

    def test_env_fills_gaps(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, "t.cnf", "host=db\nuser=u\n")
        monkeypatch.setenv("DBDIFF_TARGET_PASSWORD", "from-env")
        monkeypatch.setenv("DBDIFF_TARGET_HOST", "ignored")

        config = load_connection_config("target", DatabaseType.MYSQL, path)

        assert config.password == "from-env"
        assert config.host == "db"

    def test_env_only(self, monkeypatch):
        monkeypatch.setenv("DBDIFF_SOURCE_HOST", "src")
        monkeypatch.setenv("DBDIFF_SOURCE_USER", "u")
        monkeypatch.setenv("DBDIFF_SOURCE_PASSWORD", "p")

        config = load_connection_config("source", DatabaseType.POSTGRESQL)

        assert config.host == "src"
        assert config.port is None

    def test_nothing_configured(self):
        with pytest.raises(ConfigError, match="missing host in target settings"):
            load_connection_config("target", DatabaseType.MYSQL)

    def test_sqlite_needs_only_database(self, tmp_path):
        path = write_config(tmp_path, "t.cnf", "database=/data/app.db\n")

        config = load_connection_config("target", DatabaseType.SQLITE, path)

        assert config.database == "/data/app.db"

    def test_invalid_port(self, tmp_path):
        path = write_config(tmp_path, "t.cnf", "host=db\nuser=u\npassword=p\nport=abc\n")

        with pytest.raises(ConfigError, match="invalid port"):
            load_connection_config("target", DatabaseType.MYSQL, path)

    def test_vault_takes_precedence(self, tmp_path):
        path = write_config(tmp_path, "t.cnf", "host=file\nuser=u\npassword=p\n")
        vault = MagicMock()
        vault.get_database_credentials.return_value = {
            "host": "vault-db", "port": 5433, "user": "vu", "password": "vp"
        }

        config = load_connection_config("target", DatabaseType.POSTGRESQL, path, vault)

        assert config.host == "vault-db"
        assert config.port == 5433
        vault.get_database_credentials.assert_called_once_with("target")

    def test_vault_failure_is_config_error(self):
        vault = MagicMock()
        vault.get_database_credentials.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ConfigError, match="cannot fetch source credentials from Vault"):
            load_connection_config("source", DatabaseType.MYSQL, vault_client=vault)


class TestGetConnectionConfigs:
    """Test source/target resolution from parsed arguments"""

    def test_target_only(self, tmp_path):
        path = write_config(tmp_path, "t.cnf", "host=db\nuser=u\npassword=p\n")

        source, target = get_connection_configs(make_args(target_config=path))

        assert source is None
        assert target.host == "db"

    def test_separate_source(self, tmp_path):
        target_path = write_config(tmp_path, "t.cnf", "host=tgt\nuser=u\npassword=p\n")
        source_path = write_config(tmp_path, "s.cnf", "host=src\nuser=u\npassword=p\n")

        source, target = get_connection_configs(
            make_args(target_config=target_path, source_config=source_path)
        )

        assert source.host == "src"
        assert target.host == "tgt"

    def test_source_from_env(self, monkeypatch):
        monkeypatch.setenv("DBDIFF_SOURCE_HOST", "src")

        assert has_source_settings(make_args()) is True

    @patch('dbdiff.cli.credentials.VaultClient')
    def test_vault_source_only_when_requested(self, mock_vault_client_class):
        vault = mock_vault_client_class.return_value
        vault.get_database_credentials.return_value = {"host": "h", "user": "u", "password": "p"}

        source, _ = get_connection_configs(make_args(use_vault=True))
        assert source is None

        source, _ = get_connection_configs(make_args(use_vault=True, vault_source=True))
        assert source is not None
        assert [c.args[0] for c in vault.get_database_credentials.call_args_list] == [
            "target", "target", "source"
        ]
