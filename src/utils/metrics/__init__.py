"""
Prometheus metrics for diff runs

Usage:
    from utils.metrics import DiffMetrics, write_metrics_file

    metrics = DiffMetrics()
    metrics.record_run("customers", "local", success=True, duration=4.2)
    metrics.record_stats("customers", stats)
    write_metrics_file("/var/lib/node_exporter/dbdiff.prom")
"""

from .diff import DiffMetrics
from .registry import get_or_create_metric, write_metrics_file

__all__ = [
    "DiffMetrics",
    "get_or_create_metric",
    "write_metrics_file",
]
