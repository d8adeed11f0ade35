"""
Timebound: Bounded, Time-Ordered In-Memory History

A small buffer embedded in monitoring or control processes:
- Retains recent timestamped samples
- Evicts the oldest entries past a retention span (keeping at least 100)
- Answers point and window queries over the retained data

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from timebound.core.types import (
    Result,
    Ok,
    Err,
    HistoryEntry,
)
from timebound.core.errors import (
    ErrorCode,
    TimeboundError,
    HistoryError,
    ConfigError,
    InconsistentHistoryError,
)
from timebound.core.config import TimeboundConfig

from timebound.history import (
    TimeBoundedLog,
    Combinators,
    NUMERIC,
    TIMEDELTA,
)

__all__ = [
    "__version__",
    # Core
    "Result",
    "Ok",
    "Err",
    "HistoryEntry",
    "ErrorCode",
    "TimeboundError",
    "HistoryError",
    "ConfigError",
    "InconsistentHistoryError",
    "TimeboundConfig",
    # History
    "TimeBoundedLog",
    "Combinators",
    "NUMERIC",
    "TIMEDELTA",
]
