"""
History module: Time-bounded in-memory log

Provides:
- TimeBoundedLog: time-ordered storage with age/count eviction
- Combinators: caller arithmetic for averaging opaque items
"""

from timebound.history.combinators import (
    Combinators,
    NUMERIC,
    TIMEDELTA,
    vector,
)
from timebound.history.log import TimeBoundedLog

__all__ = [
    "TimeBoundedLog",
    "Combinators",
    "NUMERIC",
    "TIMEDELTA",
    "vector",
]
