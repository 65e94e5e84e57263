"""
Timestamped cache entries.

An entry never changes after creation; a refetch replaces it wholesale.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value plus the time (per ``clock``, in seconds) it was stored."""

    value: T
    timestamp: float
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def create(cls, value: T, clock: Clock = time.monotonic) -> "CacheEntry[T]":
        """Stamp a value with the current time of ``clock``."""
        return cls(value=value, timestamp=clock(), clock=clock)

    @property
    def age_seconds(self) -> float:
        """Age of this entry in seconds."""
        return self.clock() - self.timestamp

    def is_fresh(self, ttl_seconds: float) -> bool:
        """True while the entry is at most ``ttl_seconds`` old (inclusive)."""
        return self.clock() - self.timestamp <= ttl_seconds

    def is_stale(self, reference_time: float, ttl_seconds: float) -> bool:
        """
        True if the entry was older than ``ttl_seconds`` at ``reference_time``.

        Sweeps sample the clock once and judge every entry against that value.
        """
        return reference_time - self.timestamp > ttl_seconds
