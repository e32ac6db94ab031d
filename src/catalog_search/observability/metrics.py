"""Prometheus metrics for the search engine, mirrored to OpenTelemetry."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from prometheus_client import Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


_meter_holder: dict[str, Any] = {"meter": None}


def _get_meter():
    meter = _meter_holder.get("meter")
    if meter is None:
        meter = otel_metrics.get_meter(__name__)
        _meter_holder["meter"] = meter
    return meter


def _label_key(labels: dict[str, str]) -> tuple[tuple[str, str], ...]:
    return tuple(sorted(labels.items()))


class _BoundMetric:
    def __init__(self, wrapper: MetricBridge, labels: dict[str, str]) -> None:
        self._wrapper = wrapper
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._wrapper.inc(self._labels, amount)

    def observe(self, value: float) -> None:
        self._wrapper.observe(self._labels, value)

    def set(self, value: float) -> None:
        self._wrapper.set(self._labels, value)


class MetricBridge:
    """Bridge a Prometheus metric to a lazily created OTel instrument."""

    def __init__(
        self,
        prom_metric: Counter | Histogram | Gauge,
        *,
        otel_name: str,
        otel_description: str,
        otel_kind: str,
    ) -> None:
        self._prom_metric = prom_metric
        self._otel_name = otel_name
        self._otel_description = otel_description
        self._otel_kind = otel_kind
        self._otel_instrument = None
        self._last_values: dict[tuple[tuple[str, str], ...], float] = {}

    def labels(self, **labels: str) -> _BoundMetric:
        return _BoundMetric(self, labels)

    def _ensure_otel_instrument(self):
        if self._otel_instrument is not None:
            return self._otel_instrument
        meter = _get_meter()
        if self._otel_kind == "counter":
            self._otel_instrument = meter.create_counter(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "histogram":
            self._otel_instrument = meter.create_histogram(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "gauge":
            self._otel_instrument = meter.create_up_down_counter(self._otel_name, description=self._otel_description)
        else:
            raise ValueError(f"Unknown metric kind: {self._otel_kind}")
        return self._otel_instrument

    def inc(self, labels: dict[str, str], amount: float) -> None:
        self._prom_metric.labels(**labels).inc(amount)
        self._ensure_otel_instrument().add(amount, labels)

    def observe(self, labels: dict[str, str], value: float) -> None:
        self._prom_metric.labels(**labels).observe(value)
        self._ensure_otel_instrument().record(value, labels)

    def set(self, labels: dict[str, str], value: float) -> None:
        self._prom_metric.labels(**labels).set(value)
        otel = self._ensure_otel_instrument()
        key = _label_key(labels)
        delta = value - self._last_values.get(key, 0.0)
        if delta:
            otel.add(delta, labels)
        self._last_values[key] = value


_SEARCH_REQUESTS_PROM = Counter(
    "catalog_search_requests_total",
    "Search requests by operation and the pipeline stage that produced the result",
    ["operation", "stage"],
)

_SEARCH_LATENCY_PROM = Histogram(
    "catalog_search_latency_seconds",
    "Query latency in seconds",
    ["operation"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
)

_RELOAD_COUNT_PROM = Counter(
    "catalog_reload_total",
    "Catalog reloads by outcome",
    ["status"],
)

_RELOAD_LATENCY_PROM = Histogram(
    "catalog_reload_latency_seconds",
    "Catalog reload duration in seconds",
    ["store"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

_SNAPSHOT_ITEMS_PROM = Gauge(
    "catalog_snapshot_items",
    "Items in the published snapshot",
    ["store"],
)

SEARCH_REQUESTS = MetricBridge(
    _SEARCH_REQUESTS_PROM,
    otel_name="catalog_search_requests_total",
    otel_description="Search requests by operation and stage",
    otel_kind="counter",
)

SEARCH_LATENCY = MetricBridge(
    _SEARCH_LATENCY_PROM,
    otel_name="catalog_search_latency_seconds",
    otel_description="Query latency in seconds",
    otel_kind="histogram",
)

RELOAD_COUNT = MetricBridge(
    _RELOAD_COUNT_PROM,
    otel_name="catalog_reload_total",
    otel_description="Catalog reloads by outcome",
    otel_kind="counter",
)

RELOAD_LATENCY = MetricBridge(
    _RELOAD_LATENCY_PROM,
    otel_name="catalog_reload_latency_seconds",
    otel_description="Catalog reload duration in seconds",
    otel_kind="histogram",
)

SNAPSHOT_ITEMS = MetricBridge(
    _SNAPSHOT_ITEMS_PROM,
    otel_name="catalog_snapshot_items",
    otel_description="Items in the published snapshot",
    otel_kind="gauge",
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()
