"""
Observability module: Metrics and structured logging.
"""

from timebound.observability.metrics import MetricsCollector, Counter, Gauge
from timebound.observability.logging import StructuredLogger, LogLevel, setup_logging

__all__ = [
    "MetricsCollector",
    "Counter",
    "Gauge",
    "StructuredLogger",
    "LogLevel",
    "setup_logging",
]
