"""
Metrics for table diff runs.

Tracks runs, generated statements and rows read so that scheduled diffs
can be monitored for drift between source and target.
"""

import logging
import time
from typing import Any, Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    REGISTRY,
)

from .registry import get_or_create_metric

logger = logging.getLogger(__name__)


class DiffMetrics:
    """
    Metrics for table diff runs

    Tracks diff runs, generated statements and rows read.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize diff metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.runs_total = get_or_create_metric(
            lambda: Counter(
                "dbdiff_runs_total",
                "Total number of diff runs",
                ["table_name", "strategy", "status"],
                registry=self.registry,
            ),
            "dbdiff_runs_total",
            self.registry,
        )

        self.run_duration_seconds = get_or_create_metric(
            lambda: Histogram(
                "dbdiff_run_duration_seconds",
                "Duration of diff runs in seconds",
                ["table_name", "strategy"],
                buckets=(0.1, 0.5, 1, 5, 10, 30, 60, 300, 600, 1800, 3600),
                registry=self.registry,
            ),
            "dbdiff_run_duration_seconds",
            self.registry,
        )

        self.last_run_timestamp = get_or_create_metric(
            lambda: Gauge(
                "dbdiff_last_run_timestamp",
                "Timestamp of last diff run",
                ["table_name"],
                registry=self.registry,
            ),
            "dbdiff_last_run_timestamp",
            self.registry,
        )

        self.statements_total = get_or_create_metric(
            lambda: Counter(
                "dbdiff_statements_total",
                "Total number of generated statements",
                ["table_name", "statement_type"],
                registry=self.registry,
            ),
            "dbdiff_statements_total",
            self.registry,
        )

        self.rows_read_total = get_or_create_metric(
            lambda: Counter(
                "dbdiff_rows_read_total",
                "Total number of rows read from the database",
                ["table_name", "side"],
                registry=self.registry,
            ),
            "dbdiff_rows_read_total",
            self.registry,
        )

        self.suppressed_statements_total = get_or_create_metric(
            lambda: Counter(
                "dbdiff_suppressed_statements_total",
                "Statements skipped because a clause rendered empty",
                ["table_name"],
                registry=self.registry,
            ),
            "dbdiff_suppressed_statements_total",
            self.registry,
        )

    def record_run(
        self,
        table_name: str,
        strategy: str,
        success: bool,
        duration: float,
    ) -> None:
        """
        Record a diff run

        Args:
            table_name: Target table of the run
            strategy: "local" or "remote"
            success: Whether the run completed successfully
            duration: Duration in seconds
        """
        status = "success" if success else "failed"

        self.runs_total.labels(
            table_name=table_name,
            strategy=strategy,
            status=status,
        ).inc()

        self.run_duration_seconds.labels(
            table_name=table_name,
            strategy=strategy,
        ).observe(duration)

        self.last_run_timestamp.labels(table_name=table_name).set(time.time())

        logger.debug(
            f"Recorded diff run: table={table_name}, strategy={strategy}, "
            f"status={status}, duration={duration:.2f}s"
        )

    def record_stats(self, table_name: str, stats: Any) -> None:
        """
        Record statement and row counters of a finished run

        Args:
            table_name: Target table of the run
            stats: DiffStats of the run
        """
        for statement_type, count in (
            ("INSERT", stats.inserts),
            ("UPDATE", stats.updates),
            ("DELETE", stats.deletes),
        ):
            if count:
                self.statements_total.labels(
                    table_name=table_name,
                    statement_type=statement_type,
                ).inc(count)

        self.rows_read_total.labels(table_name=table_name, side="source").inc(stats.source_rows)
        self.rows_read_total.labels(table_name=table_name, side="target").inc(stats.target_rows)

        if stats.suppressed:
            self.suppressed_statements_total.labels(table_name=table_name).inc(stats.suppressed)
