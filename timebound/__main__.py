#!/usr/bin/env python3
"""
Timebound demo: a host process feeding sensor samples into a history.

Usage:
    python -m timebound

    # With a shorter retention and human-readable logs
    TIMEBOUND_RETENTION_SECONDS=60 TIMEBOUND_LOG_JSON=false python -m timebound
"""

from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone

from timebound.core.config import TimeboundConfig
from timebound.core.types import Ok, Err
from timebound.history.combinators import NUMERIC
from timebound.observability.logging import LogLevel, StructuredLogger, setup_logging
from timebound.observability.metrics import MetricsCollector


def main() -> int:
    config_result = TimeboundConfig.from_env()
    if config_result.is_err():
        print(f"Configuration error: {config_result.error}", file=sys.stderr)
        return 1
    config = config_result.unwrap()

    setup_logging(
        LogLevel.parse(config.observability.log_level) or LogLevel.INFO,
        json_output=config.observability.log_json,
    )
    logger = StructuredLogger("timebound.demo")

    history = config.build_log()
    start = datetime.now(timezone.utc) - timedelta(minutes=10)

    with logger.context(sensor="demo-temperature"):
        # One sample per second for ten minutes
        temperature = 20.0
        for i in range(600):
            temperature += random.uniform(-0.2, 0.2)
            history.insert(start + timedelta(seconds=i), round(temperature, 2))

        now = start + timedelta(seconds=599)
        logger.info(
            "Samples ingested",
            retained=history.size(),
            retention_s=config.history.retention.total_seconds(),
        )

        match history.before(now - timedelta(seconds=30)):
            case Ok(entry):
                logger.info("Value 30s ago", at=entry.timestamp, value=entry.item)
            case Err(error):
                logger.warning("No value 30s ago", error=error.to_dict())

        minute_ago = now - timedelta(minutes=1)
        match history.average_between_with(minute_ago, now, NUMERIC):
            case Ok(avg):
                logger.info("Average over last minute", value=round(avg, 3))
            case Err(error):
                logger.warning("No average", error=error.to_dict())

        count = history.count_between(minute_ago, now).unwrap_or(0)
        logger.info("Samples in last minute", count=count)

    if config.observability.metrics_enabled:
        print(MetricsCollector.get_instance().export_prometheus())
    return 0


if __name__ == "__main__":
    sys.exit(main())
