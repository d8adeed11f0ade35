"""
Core module: Type definitions, error hierarchy, and configuration.

- Result monad for returning recoverable failures
- Error taxonomy with a separate fatal fault
- Configuration management with validation
"""

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
from timebound.core.config import TimeboundConfig, HistoryConfig, ObservabilityConfig

__all__ = [
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
    "HistoryConfig",
    "ObservabilityConfig",
]
