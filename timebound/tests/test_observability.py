"""
Unit Tests: Observability

Tests:
    - JSON log formatting with extras and context fields
    - Counter/Gauge semantics and label handling
    - Registry get-or-create and Prometheus export
"""

import io
import json
import logging

import pytest

from timebound.observability.logging import (
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    setup_logging,
)
from timebound.observability.metrics import Counter, Gauge, MetricsCollector


@pytest.fixture
def json_stream(request):
    """Capture one logger's output as JSON lines."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    name = f"timebound.test.{request.node.name}"
    logger = logging.getLogger(name)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield name, stream
    logger.removeHandler(handler)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestStructuredLogger:
    """Tests for StructuredLogger and JsonFormatter."""

    def test_json_record(self, json_stream):
        name, stream = json_stream
        StructuredLogger(name).info("Evicted history entries", count=3)

        [record] = lines(stream)
        assert record["message"] == "Evicted history entries"
        assert record["level"] == "INFO"
        assert record["logger"] == name
        assert record["count"] == 3
        assert "@timestamp" in record

    def test_context_fields(self, json_stream):
        name, stream = json_stream
        logger = StructuredLogger(name)

        with logger.context(sensor="boiler-1"):
            logger.warning("inside")
        logger.warning("outside")

        inside, outside = lines(stream)
        assert inside["sensor"] == "boiler-1"
        assert "sensor" not in outside

    def test_with_extra(self, json_stream):
        name, stream = json_stream
        child = StructuredLogger(name).with_extra(component="history")

        child.error("failed", code="X")

        [record] = lines(stream)
        assert record["component"] == "history"
        assert record["code"] == "X"

    def test_level_filtering(self, json_stream):
        name, stream = json_stream
        logger = StructuredLogger(name, level=LogLevel.WARNING)

        logger.debug("hidden")
        logger.critical("shown")

        assert [r["message"] for r in lines(stream)] == ["shown"]

    def test_non_json_values(self, json_stream):
        name, stream = json_stream
        StructuredLogger(name).info("value", when=object)

        [record] = lines(stream)
        assert "object" in record["when"]

    def test_parse_level(self):
        assert LogLevel.parse("warning") is LogLevel.WARNING
        assert LogLevel.parse("nope") is None

    def test_setup_logging_json(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)

        logging.getLogger("timebound.test.setup").info("hello")

        [record] = lines(stream)
        assert record["message"] == "hello"

    def test_setup_logging_plain(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(LogLevel.INFO, json_output=False, stream=stream)

        logging.getLogger("timebound.test.setup").info("hello")

        assert "| INFO     | timebound.test.setup | hello" in stream.getvalue()


class TestMetrics:
    """Tests for Counter, Gauge and MetricsCollector."""

    def test_counter(self):
        counter = Counter("requests_total", ["code"])
        counter.inc(code="A")
        counter.inc(2, code="A")
        counter.inc(code="B")

        assert counter.get(code="A") == 3
        assert counter.get(code="B") == 1
        assert counter.get(code="C") == 0

    def test_counter_rejects_negative(self):
        with pytest.raises(ValueError):
            Counter("c").inc(-1)

    def test_gauge(self):
        gauge = Gauge("size")
        gauge.set(10)
        gauge.inc(5)
        gauge.dec(3)
        assert gauge.get() == 12

    def test_collect(self):
        counter = Counter("c", ["code"])
        counter.inc(code="A")
        assert list(counter.collect()) == [({"code": "A"}, 1.0)]

    def test_get_or_create(self):
        collector = MetricsCollector()
        assert collector.counter("c") is collector.counter("c")

    def test_kind_mismatch(self):
        collector = MetricsCollector()
        collector.counter("c")
        with pytest.raises(TypeError):
            collector.gauge("c")

    def test_singleton(self):
        assert MetricsCollector.get_instance() is MetricsCollector.get_instance()

    def test_export_prometheus(self):
        collector = MetricsCollector()
        collector.counter("history_inserts_total", help_text="Inserted").inc(4)
        collector.gauge("history_size").set(2)
        collector.counter("history_query_errors_total", ["code"]).inc(code="E")

        output = collector.export_prometheus()

        assert "# HELP history_inserts_total Inserted" in output
        assert "# TYPE history_inserts_total counter" in output
        assert "history_inserts_total 4.0" in output
        assert "# TYPE history_size gauge" in output
        assert 'history_query_errors_total{code="E"} 1.0' in output
