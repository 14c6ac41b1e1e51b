"""
HashiCorp Vault client for fetching database credentials

Reads the source and target connection settings of a diff run from the
Vault KV v2 secrets engine.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

import requests

from .tracing import trace_http_request

logger = logging.getLogger(__name__)

CREDENTIAL_ROLES = ("source", "target")
REQUIRED_FIELDS = ("host", "user", "password")


class VaultClient:
    """
    HashiCorp Vault client for secrets management

    This client uses the KV v2 secrets engine to fetch database credentials.
    """

    def __init__(
        self,
        vault_addr: Optional[str] = None,
        vault_token: Optional[str] = None,
        namespace: Optional[str] = None,
        mount_point: str = "secret",
    ):
        """
        Initialize Vault client

        Args:
            vault_addr: Vault server address (default: from VAULT_ADDR env var)
            vault_token: Vault authentication token (default: from VAULT_TOKEN env var)
            namespace: Vault namespace (optional, for Vault Enterprise)
            mount_point: KV v2 mount holding the credentials

        Raises:
            ValueError: If vault_addr or vault_token are not provided
        """
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_token = vault_token or os.getenv("VAULT_TOKEN")
        self.namespace = namespace or os.getenv("VAULT_NAMESPACE")
        self.mount_point = mount_point

        if not self.vault_addr:
            raise ValueError(
                "Vault address not provided. Set VAULT_ADDR environment variable "
                "or pass vault_addr parameter."
            )

        if not self.vault_token:
            raise ValueError(
                "Vault token not provided. Set VAULT_TOKEN environment variable "
                "or pass vault_token parameter."
            )

        self.vault_addr = self.vault_addr.rstrip("/")

        self.headers = {
            "X-Vault-Token": self.vault_token,
            "Content-Type": "application/json"
        }
        if self.namespace:
            self.headers["X-Vault-Namespace"] = self.namespace

        logger.debug(f"Initialized Vault client for {self.vault_addr}")

    def get_secret(self, secret_path: str) -> Dict[str, Any]:
        """
        Fetch a secret from the KV v2 secrets engine

        Args:
            secret_path: Path below the mount point (e.g., "database/dbdiff_source")

        Returns:
            Dictionary containing secret data

        Raises:
            ValueError: If secret_path is invalid or the secret is missing/empty
            requests.RequestException: If the Vault request fails
        """
        if not secret_path or not isinstance(secret_path, str):
            raise ValueError("secret_path must be a non-empty string")

        if ".." in secret_path or secret_path.startswith("/"):
            raise ValueError(
                f"Invalid secret_path: {secret_path}. "
                "Path traversal attempts are not allowed."
            )

        if not re.match(r"^[a-zA-Z0-9/_-]+$", secret_path):
            raise ValueError(
                f"Invalid secret_path: {secret_path}. "
                "Only alphanumeric characters, slashes, underscores, and hyphens are allowed."
            )

        url = f"{self.vault_addr}/v1/{self.mount_point}/data/{secret_path}"

        with trace_http_request("GET", url, component="vault"):
            response = requests.get(url, headers=self.headers, timeout=10)

        if response.status_code == 404:
            raise ValueError(f"Secret not found at path: {secret_path}")

        response.raise_for_status()

        secret_data = response.json().get("data", {}).get("data", {})
        if not secret_data:
            raise ValueError(f"No data found in secret at path: {secret_path}")

        logger.debug(f"Fetched secret {secret_path}")
        return secret_data

    def get_database_credentials(self, role: str) -> Dict[str, Any]:
        """
        Fetch the connection settings of one side of a diff

        Args:
            role: "source" or "target"

        Returns:
            Dictionary with host, user, password and optionally port, database

        Raises:
            ValueError: If role is invalid or required fields are missing
        """
        if role not in CREDENTIAL_ROLES:
            raise ValueError(
                f"Unsupported credential role: {role}. Must be 'source' or 'target'."
            )

        secret_data = self.get_secret(f"database/dbdiff_{role}")

        missing_fields = [field for field in REQUIRED_FIELDS if field not in secret_data]
        if missing_fields:
            raise ValueError(
                f"Missing required fields in {role} secret: {', '.join(missing_fields)}"
            )

        logger.info(f"Fetched {role} database credentials from Vault")
        return secret_data
