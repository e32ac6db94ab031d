"""Unit tests for logging, metrics and tracing."""

import logging
import sys

import orjson
from opentelemetry import trace as trace_api
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import REGISTRY
import pytest

from catalog_search.adapters.catalog_store import AbstractCatalogStore, CatalogStoreError
from catalog_search.observability import (
    SEARCH_LATENCY,
    JsonFormatter,
    bind_log_context,
    configure_logging,
    create_span,
    get_log_context,
    get_metrics,
    init_tracing,
    track_latency,
)
from catalog_search.observability import metrics as metrics_module
from catalog_search.observability.context import log_context, update_span_id
from catalog_search.service_layer.search_service import CatalogReloadError, CatalogSearchService


def _record(msg: str = "test message", level: int = logging.INFO, name: str = "catalog_search.test"):
    return logging.LogRecord(name=name, level=level, pathname="test.py", lineno=1, msg=msg, args=(), exc_info=None)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    provider = trace_api.get_tracer_provider()
    if not isinstance(provider, TracerProvider):
        provider = init_tracing("catalog-search-test")
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return exporter


class _OfflineStore(AbstractCatalogStore):
    def list_all_items(self):
        raise CatalogStoreError("store offline")

    def save_item(self, item):
        raise CatalogStoreError("store offline")


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_log_context(self):
        data = orjson.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["component"] == "test"
        assert "timestamp" in data
        assert "trace_id" in data
        assert "span_id" in data

    def test_bound_fields_appear_in_output(self):
        with bind_log_context(operation="search"):
            data = orjson.loads(JsonFormatter().format(_record()))

        assert data["operation"] == "search"
        assert "operation" not in get_log_context()

    def test_extra_fields_and_redaction(self):
        record = _record()
        record.query = "milk"
        record.token = "secret-value"

        data = orjson.loads(JsonFormatter().format(record))

        assert data["query"] == "milk"
        assert data["token"] == "[REDACTED]"

    def test_long_message_is_truncated(self):
        data = orjson.loads(JsonFormatter().format(_record("x" * 5000)))

        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3

    def test_exception_text(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("catalog_search", logging.ERROR, "t.py", 1, "failed", (), sys.exc_info())

        data = orjson.loads(JsonFormatter().format(record))

        assert "ValueError: boom" in data["exception"]

    def test_non_json_values_are_serialized(self):
        record = _record()
        record.stores = {"b", "a"}
        record.raw = b"bytes"

        data = orjson.loads(JsonFormatter().format(record))

        assert data["stores"] == ["a", "b"]
        assert data["raw"] == "bytes"


@pytest.mark.unit
class TestLogContext:
    """Tests for log context propagation."""

    def test_ids_are_generated_once(self):
        log_context.set(None)

        first = get_log_context()

        assert len(first["trace_id"]) == 32
        assert len(first["span_id"]) == 16
        assert get_log_context() == first

    def test_update_span_id_keeps_trace_id(self):
        trace_id = get_log_context()["trace_id"]

        update_span_id("abcdef0123456789")

        ctx = get_log_context()
        assert ctx["trace_id"] == trace_id
        assert ctx["span_id"] == "abcdef0123456789"

    def test_nested_bindings_unwind(self):
        with bind_log_context(operation="outer"), bind_log_context(stage="inner"):
            assert get_log_context()["operation"] == "outer"
            assert get_log_context()["stage"] == "inner"

        assert "stage" not in get_log_context()


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_sets_level_and_single_handler(self, restore_root_logger):
        configure_logging(level="DEBUG")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_plain_formatter(self, restore_root_logger):
        configure_logging(level="INFO", json_output=False)

        formatter = restore_root_logger.handlers[0].formatter
        assert not isinstance(formatter, JsonFormatter)
        assert "%(asctime)s" in formatter._fmt

    def test_logger_overrides(self, restore_root_logger):
        configure_logging(level="INFO", logger_levels={"catalog_search.search": "error"})

        assert logging.getLogger("catalog_search.search").level == logging.ERROR
        logging.getLogger("catalog_search.search").setLevel(logging.NOTSET)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging(level="chatty")

        assert restore_root_logger.level == logging.INFO


@pytest.mark.unit
class TestMetrics:
    """Tests for Prometheus metrics."""

    def test_exposition_contains_catalog_metrics(self, search_service):
        search_service.search("milk")

        output = get_metrics()

        assert isinstance(output, bytes)
        assert b"catalog_search_requests_total" in output
        assert b"catalog_reload_total" in output

    def test_public_names_resolve(self):
        from catalog_search import observability

        assert all(hasattr(observability, name) for name in observability.__all__)
        assert not hasattr(metrics_module, "get_metrics_content_type")

    def test_requests_are_counted_by_stage(self, search_service):
        def count(stage):
            labels = {"operation": "search", "stage": stage}
            return REGISTRY.get_sample_value("catalog_search_requests_total", labels) or 0.0

        before = {stage: count(stage) for stage in ("index", "substring", "rejected", "none")}

        search_service.search("milk")
        search_service.search("choc")
        search_service.search("!")
        search_service.search("zzz")

        for stage in before:
            assert count(stage) == before[stage] + 1

    def test_reload_outcomes_are_counted(self, search_service):
        def count(status):
            return REGISTRY.get_sample_value("catalog_reload_total", {"status": status}) or 0.0

        ok_before = count("ok")

        search_service.reload()

        assert count("ok") == ok_before + 1
        assert REGISTRY.get_sample_value("catalog_snapshot_items", {"store": "InMemoryCatalogStore"}) == 7

    def test_track_latency_observes_on_error(self):
        labels = {"operation": "latency-test"}
        before = REGISTRY.get_sample_value("catalog_search_latency_seconds_count", labels) or 0.0

        with pytest.raises(RuntimeError), track_latency(SEARCH_LATENCY, operation="latency-test"):
            raise RuntimeError("boom")

        assert REGISTRY.get_sample_value("catalog_search_latency_seconds_count", labels) == before + 1

    def test_unknown_metric_kind(self):
        bridge = metrics_module.MetricBridge(
            metrics_module._SEARCH_REQUESTS_PROM,
            otel_name="bogus",
            otel_description="bogus",
            otel_kind="summary",
        )

        with pytest.raises(ValueError, match="Unknown metric kind"):
            bridge.labels(operation="search", stage="index").inc()


@pytest.mark.unit
class TestTracing:
    """Tests for OpenTelemetry spans."""

    def test_create_span_sets_attributes_and_span_id(self, span_exporter):
        with create_span("catalog.test", attributes={"catalog.items": 3}) as span:
            span_id = format(span.get_span_context().span_id, "016x")
            assert get_log_context()["span_id"] == span_id

        finished = [s for s in span_exporter.get_finished_spans() if s.name == "catalog.test"]
        assert finished[-1].attributes["catalog.items"] == 3

    def test_create_span_records_errors(self, span_exporter):
        with pytest.raises(RuntimeError), create_span("catalog.failing"):
            raise RuntimeError("boom")

        finished = [s for s in span_exporter.get_finished_spans() if s.name == "catalog.failing"]
        assert finished[-1].status.status_code is StatusCode.ERROR

    def test_reload_is_traced(self, span_exporter, test_settings):
        with pytest.raises(CatalogReloadError):
            CatalogSearchService(_OfflineStore(), settings=test_settings)

        finished = [s for s in span_exporter.get_finished_spans() if s.name == "catalog.reload"]
        assert finished[-1].attributes["catalog.store"] == "_OfflineStore"
        assert finished[-1].status.status_code is StatusCode.ERROR
