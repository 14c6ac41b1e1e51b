"""
Distributed tracing using OpenTelemetry.

Instruments:
- Diff runs and their phases
- Schema and row queries
- Vault HTTP requests
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .database import trace_database_query, trace_http_request
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "add_span_attributes",
    "add_span_event",
    "trace_database_query",
    "trace_http_request",
]
