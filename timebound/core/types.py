"""
Core Type Definitions for the Time-Bounded History

Implements a Result/Either monad so recoverable query failures are
returned to the caller instead of raised, together with the value
types shared by the history log and its callers.

Design Principles:
- Recoverable conditions travel as Err values, never as exceptions
- Items are opaque: the log stores them, callers interpret them
- Entries are immutable once handed out
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import (
    Any,
    Callable,
    Generic,
    Literal,
    TypeVar,
    Union,
)

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type

HistoryItem = Any          # Opaque caller payload
Timestamp = datetime       # Key type of the log
Retention = timedelta      # Max span between oldest and newest key

# Caller-supplied arithmetic for averaging opaque items
AddFn = Callable[[Any, Any], Any]
DivideFn = Callable[[Any, int], Any]


# =============================================================================
# RESULT MONAD
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result."""

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply transformation to success value."""
        return Ok(fn(self.value))

    def flat_map(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Monadic bind for chaining fallible operations."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result.

    The wrapped error may still carry a degraded answer (see
    HistoryError.fallback); unwrap() never returns it implicitly.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Unwrapping an error is a programming error.

        Raises:
            RuntimeError: Always, with the error attached
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        return self

    def flat_map(self, fn: Callable[[Any], Result[U, E]]) -> Err[E]:
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


def format_timestamp(value: Any) -> str:
    """ISO-8601 for datetimes, str() for other ordered keys (e.g. float seconds)."""
    isoformat = getattr(value, "isoformat", None)
    if callable(isoformat):
        return isoformat()
    return str(value)


# =============================================================================
# HISTORY ENTRY
# =============================================================================
@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """
    A single retained (timestamp, item) pair.

    Returned by point queries and carried as the best-effort fallback
    on recoverable query errors.
    """

    timestamp: Timestamp
    item: HistoryItem

    def age(self, now: Timestamp) -> Retention:
        """Time elapsed between this entry and ``now``."""
        return now - self.timestamp

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "timestamp": format_timestamp(self.timestamp),
            "item": self.item,
        }
