"""
Time-Bounded Log: Recent Timestamped Items with Age-Based Eviction

Retains (timestamp, item) pairs inserted in non-decreasing time order
and answers point and window queries over them:
- before(): latest entry at or before a target time
- average_between(): caller-defined average over an open window
- count_between(): entry count over a half-open window

Storage Model:
    _items: dict[timestamp -> item]
    _times: deque[timestamp]  -- insertion order, oldest at the left

Eviction:
    On every insert the oldest entry is dropped while more than
    MIN_RETAINED_ENTRIES remain AND newest - oldest > retention.

Complexity: insert amortized O(1) + evictions, queries O(n).
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from timebound.core import constants as C
from timebound.core.errors import HistoryError, InconsistentHistoryError
from timebound.core.types import (
    AddFn,
    DivideFn,
    Err,
    HistoryEntry,
    HistoryItem,
    Ok,
    Result,
    Retention,
    Timestamp,
)
from timebound.history.combinators import Combinators
from timebound.observability.logging import StructuredLogger
from timebound.observability.metrics import MetricsCollector


class TimeBoundedLog:
    """
    Bounded, time-ordered in-memory history.

    Usage:
        log = TimeBoundedLog(timedelta(minutes=5))
        log.insert(now, 21.5)

        match log.before(now - timedelta(seconds=30)):
            case Ok(entry):
                print(entry.timestamp, entry.item)
            case Err(error):
                print(error, error.fallback)

    Contract:
        Timestamps must be inserted in non-decreasing order and must be
        unique. Out-of-order inserts are accepted (and logged) but make
        query results meaningless; a duplicate timestamp raises
        InconsistentHistoryError and leaves the log unusable.

    Thread Safety:
        One threading.Lock guards all state for the full duration of
        every call. Caller-supplied add/divide callbacks run under that
        lock and must not call back into the same log.
    """

    __slots__ = (
        "_retention", "_items", "_times", "_lock",
        "_logger", "_inserts", "_evictions", "_query_errors", "_size",
    )

    def __init__(
        self,
        retention: Retention,
        *,
        logger: Optional[StructuredLogger] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._retention = retention
        self._items: dict[Timestamp, HistoryItem] = {}
        self._times: deque[Timestamp] = deque()
        self._lock = threading.Lock()
        self._logger = logger or StructuredLogger("timebound.history")

        if metrics is not None:
            self._inserts = metrics.counter(
                C.METRIC_INSERTS, help_text="Items inserted into history",
            )
            self._evictions = metrics.counter(
                C.METRIC_EVICTIONS, help_text="Items evicted from history",
            )
            self._query_errors = metrics.counter(
                C.METRIC_QUERY_ERRORS, ["code"],
                help_text="Recoverable history query failures",
            )
            self._size = metrics.gauge(
                C.METRIC_SIZE, help_text="Retained history entries",
            )
        else:
            self._inserts = self._evictions = None
            self._query_errors = self._size = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------
    def set_retention(self, retention: Retention) -> None:
        """
        Replace the retention used by future evictions.

        Nothing is evicted here; the next insert applies the new value.
        """
        with self._lock:
            previous = self._retention
            self._retention = retention

        self._logger.info(
            "History retention updated",
            previous=str(previous),
            retention=str(retention),
        )

    @property
    def retention(self) -> Retention:
        with self._lock:
            return self._retention

    def size(self) -> int:
        """Number of retained entries."""
        with self._lock:
            return len(self._times)

    def __len__(self) -> int:
        return self.size()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def insert(self, timestamp: Timestamp, item: HistoryItem) -> None:
        """
        Append an item and evict the oldest entries past retention.

        Raises:
            InconsistentHistoryError: the index and the item map no
                longer agree (e.g. duplicate timestamp). Fatal.
        """
        with self._lock:
            if self._times and timestamp < self._times[-1]:
                self._logger.warning(
                    "Out-of-order history insert",
                    timestamp=timestamp,
                    newest=self._times[-1],
                )

            self._times.append(timestamp)
            self._items[timestamp] = item

            if len(self._times) != len(self._items):
                self._logger.critical(
                    "History in inconsistent state",
                    ordered=len(self._times),
                    mapped=len(self._items),
                    timestamp=timestamp,
                )
                raise InconsistentHistoryError(
                    len(self._times), len(self._items),
                )

            evicted = self._evict_locked()

            if self._inserts is not None:
                self._inserts.inc()
                self._size.set(len(self._times))
                if evicted:
                    self._evictions.inc(evicted)

        if evicted:
            self._logger.debug("Evicted history entries", count=evicted)

    def _evict_locked(self) -> int:
        newest = self._times[-1]
        evicted = 0
        while (
            len(self._times) > C.MIN_RETAINED_ENTRIES
            and newest - self._times[0] > self._retention
        ):
            oldest = self._times.popleft()
            del self._items[oldest]
            evicted += 1
        return evicted

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def before(self, wanted: Timestamp) -> Result[HistoryEntry, HistoryError]:
        """
        Latest entry whose timestamp is at or before ``wanted``.

        Errors (each carries a ``fallback`` entry):
            HISTORY_EMPTY_LOG: fallback is (current UTC time, None)
            HISTORY_BEFORE_LOG_START: fallback is the oldest entry
        """
        with self._lock:
            if not self._times:
                return self._fail(
                    HistoryError.empty_log(datetime.now(timezone.utc))
                )

            oldest = self._times[0]
            if wanted < oldest:
                return self._fail(HistoryError.before_log_start(
                    wanted, HistoryEntry(oldest, self._items[oldest]),
                ))

            # TODO: bisect over _times once it is kept as a list
            then = oldest
            for t in self._times:
                if t > wanted:
                    break
                then = t
            return Ok(HistoryEntry(then, self._items[then]))

    def average_between(
        self,
        start: Timestamp,
        end: Timestamp,
        zero: HistoryItem,
        add: AddFn,
        divide: DivideFn,
    ) -> Result[HistoryItem, HistoryError]:
        """
        Average of items with ``start < t < end`` (both ends excluded).

        ``add`` folds items into an accumulator seeded with ``zero``;
        ``divide(accumulator, count)`` produces the average.

        Errors:
            HISTORY_EMPTY_WINDOW: no entry inside the window
        """
        with self._lock:
            total = zero
            count = 0
            for t in self._times:
                if t <= start:
                    continue
                if t >= end:
                    break
                total = add(total, self._items[t])
                count += 1

            if count == 0:
                return self._fail(HistoryError.empty_window(start, end))

            return Ok(divide(total, count))

    def average_between_with(
        self,
        start: Timestamp,
        end: Timestamp,
        combinators: Combinators,
    ) -> Result[HistoryItem, HistoryError]:
        """average_between() using a prepared Combinators bundle."""
        return self.average_between(
            start, end,
            combinators.zero, combinators.add, combinators.divide,
        )

    def count_between(
        self,
        start: Timestamp,
        end: Timestamp,
    ) -> Result[int, HistoryError]:
        """Number of entries with ``start <= t < end``. Never fails."""
        with self._lock:
            count = 0
            for t in self._times:
                if t >= end:
                    break
                if t >= start:
                    count += 1
            return Ok(count)

    def snapshot(self) -> list[HistoryEntry]:
        """Copy of retained entries, oldest first."""
        with self._lock:
            return [HistoryEntry(t, self._items[t]) for t in self._times]

    def _fail(self, error: HistoryError) -> Err[HistoryError]:
        if self._query_errors is not None:
            self._query_errors.inc(code=error.code.name)
        return Err(error)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"retention={self._retention!r}, size={len(self._times)})"
        )
