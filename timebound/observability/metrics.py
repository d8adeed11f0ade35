"""
Metrics: Prometheus-Compatible Counters and Gauges

In-process, thread-safe metric primitives for the history log:
- Label dimensions per metric
- Process-wide registry with text exposition export
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Iterator, Optional, Sequence

LabelKey = tuple[tuple[str, str], ...]


class _LabeledMetric:
    """Shared label handling for counters and gauges."""

    __slots__ = ("_name", "_help", "_label_names", "_values", "_lock")

    kind = "untyped"

    def __init__(
        self,
        name: str,
        label_names: Sequence[str] = (),
        help_text: str = "",
    ) -> None:
        self._name = name
        self._help = help_text
        self._label_names = tuple(label_names)
        self._values: dict[LabelKey, float] = defaultdict(float)
        self._lock = threading.Lock()

    def _key(self, labels: dict[str, str]) -> LabelKey:
        return tuple(sorted((k, labels.get(k, "")) for k in self._label_names))

    def get(self, **labels: str) -> float:
        """Current value for a label combination."""
        key = self._key(labels)
        with self._lock:
            return self._values.get(key, 0.0)

    def collect(self) -> Iterator[tuple[dict[str, str], float]]:
        """Iterate all label combinations."""
        with self._lock:
            items = list(self._values.items())
        for key, value in items:
            yield dict(key), value

    @property
    def name(self) -> str:
        return self._name

    @property
    def help_text(self) -> str:
        return self._help


class Counter(_LabeledMetric):
    """
    Monotonically increasing counter.

    Usage:
        evictions = Counter("history_evictions_total")
        evictions.inc(3)
    """

    __slots__ = ()

    kind = "counter"

    def inc(self, value: float = 1.0, **labels: str) -> None:
        if value < 0:
            raise ValueError("Counter can only increase")
        key = self._key(labels)
        with self._lock:
            self._values[key] += value


class Gauge(_LabeledMetric):
    """Gauge metric that can go up and down."""

    __slots__ = ()

    kind = "gauge"

    def set(self, value: float, **labels: str) -> None:
        key = self._key(labels)
        with self._lock:
            self._values[key] = value

    def inc(self, value: float = 1.0, **labels: str) -> None:
        key = self._key(labels)
        with self._lock:
            self._values[key] += value

    def dec(self, value: float = 1.0, **labels: str) -> None:
        self.inc(-value, **labels)


class MetricsCollector:
    """
    Registry of named metrics.

    Usage:
        collector = MetricsCollector.get_instance()
        inserts = collector.counter("history_inserts_total")
        print(collector.export_prometheus())
    """

    __slots__ = ("_metrics", "_lock")

    _instance: Optional[MetricsCollector] = None

    def __init__(self) -> None:
        self._metrics: dict[str, _LabeledMetric] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> MetricsCollector:
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def counter(
        self,
        name: str,
        label_names: Sequence[str] = (),
        help_text: str = "",
    ) -> Counter:
        """Get or create counter."""
        return self._get_or_create(Counter, name, label_names, help_text)

    def gauge(
        self,
        name: str,
        label_names: Sequence[str] = (),
        help_text: str = "",
    ) -> Gauge:
        """Get or create gauge."""
        return self._get_or_create(Gauge, name, label_names, help_text)

    def _get_or_create(self, cls, name, label_names, help_text):
        with self._lock:
            metric = self._metrics.get(name)
            if metric is None:
                metric = cls(name, label_names, help_text)
                self._metrics[name] = metric
            elif not isinstance(metric, cls):
                raise TypeError(
                    f"Metric {name!r} already registered as {metric.kind}"
                )
            return metric

    def export_prometheus(self) -> str:
        """Export all metrics in Prometheus text format."""
        with self._lock:
            metrics = list(self._metrics.values())

        lines: list[str] = []
        for metric in metrics:
            if metric.help_text:
                lines.append(f"# HELP {metric.name} {metric.help_text}")
            lines.append(f"# TYPE {metric.name} {metric.kind}")
            for labels, value in metric.collect():
                lines.append(f"{metric.name}{_format_labels(labels)} {value}")
        return "\n".join(lines)


def _format_labels(labels: dict[str, str]) -> str:
    if not labels:
        return ""
    pairs = [f'{k}="{v}"' for k, v in sorted(labels.items())]
    return "{" + ",".join(pairs) + "}"
