"""
Clock abstraction.

All lifecycle timestamps are integer epoch milliseconds read from a Clock,
so tests can drive time explicitly.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current time in epoch milliseconds."""

    @abstractmethod
    def now_ms(self) -> int:
        ...


class SystemClock(Clock):
    """Wall-clock time."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


def ms_to_seconds(ms: int) -> int:
    """Whole seconds for display, rounding halves up (2500 -> 3)."""
    return int(ms / 1000 + 0.5)
