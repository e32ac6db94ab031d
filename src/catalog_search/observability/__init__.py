"""Observability: structured logging, metrics and tracing."""

from catalog_search.observability.context import bind_log_context, get_log_context, update_span_id
from catalog_search.observability.logging import JsonFormatter, configure_logging
from catalog_search.observability.metrics import (
    RELOAD_COUNT,
    RELOAD_LATENCY,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    SNAPSHOT_ITEMS,
    get_metrics,
    track_latency,
)
from catalog_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "RELOAD_COUNT",
    "RELOAD_LATENCY",
    "SEARCH_LATENCY",
    "SEARCH_REQUESTS",
    "SNAPSHOT_ITEMS",
    "JsonFormatter",
    "bind_log_context",
    "configure_logging",
    "create_span",
    "get_log_context",
    "get_metrics",
    "get_tracer",
    "init_tracing",
    "track_latency",
]
