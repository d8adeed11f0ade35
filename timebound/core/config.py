"""
Configuration Management for the Time-Bounded History

Provides validated configuration with sensible defaults and
environment variable overrides.

Design:
- Immutable after validation
- Fail-fast on invalid configuration
- Retention is the only parameter of the log itself
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Mapping, Optional

from timebound.core import constants as C
from timebound.core.errors import ConfigError
from timebound.core.types import Result, Ok, Err
from timebound.observability.logging import LogLevel

if TYPE_CHECKING:
    from timebound.history.log import TimeBoundedLog
    from timebound.observability.metrics import MetricsCollector

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class HistoryConfig:
    """TimeBoundedLog configuration."""

    retention: timedelta = C.DEFAULT_RETENTION


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging and metrics configuration."""

    log_level: str = C.DEFAULT_LOG_LEVEL
    log_json: bool = True
    metrics_enabled: bool = True


@dataclass(frozen=True)
class TimeboundConfig:
    """Root configuration."""

    history: HistoryConfig = field(default_factory=HistoryConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
    ) -> Result[TimeboundConfig, ConfigError]:
        """
        Load configuration from environment variables.

        Variables are prefixed with TIMEBOUND_:
            TIMEBOUND_RETENTION_SECONDS  float, default 300
            TIMEBOUND_LOG_LEVEL          DEBUG..CRITICAL
            TIMEBOUND_LOG_JSON           bool
            TIMEBOUND_METRICS_ENABLED    bool
        """
        env = os.environ if environ is None else environ
        p = C.ENV_PREFIX

        raw_retention = env.get(f"{p}RETENTION_SECONDS")
        retention = C.DEFAULT_RETENTION
        if raw_retention is not None:
            try:
                retention = timedelta(seconds=float(raw_retention))
            except (ValueError, OverflowError) as e:
                return Err(ConfigError.invalid(
                    f"{p}RETENTION_SECONDS", raw_retention, str(e),
                ))

        flags: dict[str, bool] = {}
        for name, default in (("LOG_JSON", True), ("METRICS_ENABLED", True)):
            raw = env.get(f"{p}{name}")
            if raw is None:
                flags[name] = default
            elif raw.strip().lower() in _TRUTHY:
                flags[name] = True
            elif raw.strip().lower() in _FALSY:
                flags[name] = False
            else:
                return Err(ConfigError.invalid(
                    f"{p}{name}", raw, "expected a boolean",
                ))

        config = cls(
            history=HistoryConfig(retention=retention),
            observability=ObservabilityConfig(
                log_level=env.get(f"{p}LOG_LEVEL", C.DEFAULT_LOG_LEVEL),
                log_json=flags["LOG_JSON"],
                metrics_enabled=flags["METRICS_ENABLED"],
            ),
        )
        return config.validate().map(lambda _: config)

    def validate(self) -> Result[None, ConfigError]:
        """Validate configuration invariants."""
        if self.history.retention < timedelta(0):
            return Err(ConfigError.invalid(
                "retention", self.history.retention, "must not be negative",
            ))
        if LogLevel.parse(self.observability.log_level) is None:
            return Err(ConfigError.invalid(
                "log_level", self.observability.log_level, "unknown level",
            ))
        return Ok(None)

    def build_log(
        self,
        metrics: Optional[MetricsCollector] = None,
    ) -> TimeBoundedLog:
        """Construct a TimeBoundedLog wired to configured observability."""
        from timebound.history.log import TimeBoundedLog
        from timebound.observability.metrics import MetricsCollector

        if self.observability.metrics_enabled and metrics is None:
            metrics = MetricsCollector.get_instance()
        elif not self.observability.metrics_enabled:
            metrics = None
        return TimeBoundedLog(self.history.retention, metrics=metrics)
