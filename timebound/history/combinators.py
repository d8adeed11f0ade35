"""
Combinators: Caller Arithmetic for Averaging Opaque Items

TimeBoundedLog never inspects items, so averaging needs a zero value,
an add function and a divide-by-count function from the caller. This
module bundles the common cases.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import numpy as np

from timebound.core.types import AddFn, DivideFn


@dataclass(frozen=True, slots=True)
class Combinators:
    """Zero value plus add/divide callbacks for one item type."""
    zero: Any
    add: AddFn
    divide: DivideFn

    def average(self, items: list[Any]) -> Any:
        """Average a plain list with the same arithmetic. Empty -> ValueError."""
        if not items:
            raise ValueError("cannot average an empty sequence")
        total = self.zero
        for item in items:
            total = self.add(total, item)
        return self.divide(total, len(items))


def _true_divide(total: Any, count: int) -> Any:
    return total / count


# int/float samples
NUMERIC = Combinators(zero=0, add=operator.add, divide=_true_divide)

# Latency or interval samples
TIMEDELTA = Combinators(zero=timedelta(0), add=operator.add, divide=_true_divide)


def vector(dim: int, dtype: Any = np.float64) -> Combinators:
    """Element-wise averaging of fixed-size numpy vectors."""
    if dim <= 0:
        raise ValueError(f"vector dimension must be positive, got {dim}")
    return Combinators(
        zero=np.zeros(dim, dtype=dtype),
        add=np.add,
        divide=_true_divide,
    )
