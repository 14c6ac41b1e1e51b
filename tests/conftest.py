"""
Pytest configuration and fixtures for dbdiff tests.
Provides in-memory SQLite databases for source and target tables.
"""

import logging
import os
import sqlite3

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "property: mark test as property-based test")


@pytest.fixture
def sqlite_conn():
    """In-memory SQLite database holding both source and target tables."""
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def source_db():
    """Separate in-memory database for the source side of local diffs."""
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def target_db():
    """Separate in-memory database for the target side of local diffs."""
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture(autouse=True)
def clean_dbdiff_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep connection settings from the developer's environment out of tests."""
    for key in list(os.environ):
        if key.startswith("DBDIFF_") or key in (
            "VAULT_ADDR", "VAULT_TOKEN", "VAULT_NAMESPACE", "OTLP_ENDPOINT", "TRACE_CONSOLE",
            "LOG_LEVEL", "LOG_FILE", "LOG_JSON", "LOG_CONSOLE",
        ):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by setup_logging (the CLI calls it)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
