"""
Error Hierarchy for the Time-Bounded History

Design Principles:
- Recoverable conditions are returned as Err values, not raised
- A recoverable error may carry a degraded answer next to the failure
- Broken internal invariants raise, and must never be retried

Each recoverable error includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Timestamp and error ID for correlation in host logs

Usage:
    result = log.before(target)
    match result:
        case Ok(entry):
            use(entry)
        case Err(HistoryError(code=ErrorCode.HISTORY_BEFORE_LOG_START) as e):
            use_degraded(e.fallback)
        case Err(error):
            skip_cycle(error)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from timebound.core.types import HistoryEntry, Timestamp, format_timestamp


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: History query errors (recoverable)
    - 9xxx: Internal/configuration errors
    """

    HISTORY_EMPTY_LOG = 1001
    HISTORY_BEFORE_LOG_START = 1002
    HISTORY_EMPTY_WINDOW = 1003

    INTERNAL_INCONSISTENT_STATE = 9001
    INTERNAL_CONFIGURATION_ERROR = 9002


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class TimeboundError(Exception):
    """
    Base class for all recoverable timebound errors.

    Instances are normally wrapped in Err and returned; they subclass
    Exception only so a host may choose to raise them itself.
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# HISTORY QUERY ERRORS
# =============================================================================
@dataclass
class HistoryError(TimeboundError):
    """
    Recoverable query failures of TimeBoundedLog.

    ``fallback`` is the best-effort answer returned alongside the
    failure, if any. Callers that ignore the error may still use it.
    """

    fallback: Optional[HistoryEntry] = None

    @property
    def has_fallback(self) -> bool:
        return self.fallback is not None

    @classmethod
    def empty_log(cls, now: datetime) -> HistoryError:
        """Query attempted against a log with no retained entries."""
        return cls(
            code=ErrorCode.HISTORY_EMPTY_LOG,
            message="empty log",
            fallback=HistoryEntry(timestamp=now, item=None),
        )

    @classmethod
    def before_log_start(
        cls,
        wanted: Timestamp,
        oldest: HistoryEntry,
    ) -> HistoryError:
        """Query target precedes all retained data."""
        return cls(
            code=ErrorCode.HISTORY_BEFORE_LOG_START,
            message="wanted time before log start",
            fallback=oldest,
            context={
                "wanted": format_timestamp(wanted),
                "log_start": format_timestamp(oldest.timestamp),
            },
        )

    @classmethod
    def empty_window(cls, start: Timestamp, end: Timestamp) -> HistoryError:
        """Averaging window holds no retained entries."""
        return cls(
            code=ErrorCode.HISTORY_EMPTY_WINDOW,
            message="no values to average",
            context={"start": format_timestamp(start), "end": format_timestamp(end)},
        )

    def to_dict(self) -> dict[str, Any]:
        data = TimeboundError.to_dict(self)
        if self.fallback is not None:
            data["fallback_timestamp"] = format_timestamp(self.fallback.timestamp)
        return data


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigError(TimeboundError):
    """Invalid or unparseable configuration."""

    @classmethod
    def invalid(cls, key: str, value: Any, reason: str) -> ConfigError:
        return cls(
            code=ErrorCode.INTERNAL_CONFIGURATION_ERROR,
            message=f"Invalid configuration '{key}': {reason}",
            context={"key": key, "value": str(value)[:100], "reason": reason},
        )


# =============================================================================
# FATAL FAULT
# =============================================================================
class InconsistentHistoryError(RuntimeError):
    """
    Internal invariant of TimeBoundedLog is broken.

    Raised when the timestamp index and the item map disagree in size,
    typically after a duplicate timestamp insert. The log is in an
    undefined state afterwards: do not catch and retry, discard it.
    """

    code = ErrorCode.INTERNAL_INCONSISTENT_STATE

    def __init__(self, ordered: int, mapped: int) -> None:
        self.ordered = ordered
        self.mapped = mapped
        super().__init__(
            f"History in inconsistent state: {ordered} {mapped}"
        )
