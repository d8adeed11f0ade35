"""
Constants for the Time-Bounded History

All magic numbers and configuration defaults centralized here.
"""

from datetime import timedelta
from typing import Final

# =============================================================================
# RETENTION
# =============================================================================
# Eviction never shrinks the log below this many entries
MIN_RETAINED_ENTRIES: Final[int] = 100
DEFAULT_RETENTION: Final[timedelta] = timedelta(minutes=5)

# =============================================================================
# CONFIGURATION
# =============================================================================
ENV_PREFIX: Final[str] = "TIMEBOUND_"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"

# =============================================================================
# METRIC NAMES
# =============================================================================
METRIC_INSERTS: Final[str] = "history_inserts_total"
METRIC_EVICTIONS: Final[str] = "history_evictions_total"
METRIC_QUERY_ERRORS: Final[str] = "history_query_errors_total"
METRIC_SIZE: Final[str] = "history_size"
