"""
Utility modules for dbdiff

Provides:
- database_types: SQL dialect differences
- logging: structured logging setup
- tracing: OpenTelemetry spans
- metrics: Prometheus metrics for diff runs
- vault_client: HashiCorp Vault integration for credentials
"""

__version__ = "1.0.0"
__all__ = ["database_types", "logging", "tracing", "metrics", "vault_client"]
