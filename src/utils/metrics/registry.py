"""
Metric registration and export helpers.
"""

import logging
from typing import Callable, TypeVar

from prometheus_client import CollectorRegistry, REGISTRY, write_to_textfile

logger = logging.getLogger(__name__)

# Type variable for metric types
T = TypeVar("T")


def get_or_create_metric(
    metric_factory: Callable[[], T],
    metric_name: str,
    registry: CollectorRegistry = REGISTRY,
) -> T:
    """
    Create a new metric or return the one already registered under the name.

    Args:
        metric_factory: Callable that creates the metric (e.g., lambda: Counter(...))
        metric_name: Name of the metric for lookup if already registered
        registry: Prometheus registry to use (default: global REGISTRY)

    Returns:
        The metric instance (either newly created or existing)

    Example:
        RUNS_TOTAL = get_or_create_metric(
            lambda: Counter("runs_total", "Total runs", ["table_name"]),
            "runs_total"
        )
    """
    try:
        return metric_factory()
    except ValueError:
        # Metric already registered, get existing one
        existing = registry._names_to_collectors.get(metric_name)
        if existing is not None:
            return existing
        raise


def write_metrics_file(path: str, registry: CollectorRegistry = REGISTRY) -> None:
    """
    Write the registry in the node-exporter textfile format.

    Args:
        path: Destination file, replaced atomically
        registry: Registry to export
    """
    write_to_textfile(path, registry)
    logger.info(f"Metrics written to {path}")
