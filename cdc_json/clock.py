"""
Clock capability used to stamp envelopes with wall-clock time
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Source of epoch milliseconds"""

    def now_millis(self) -> int:
        ...


class SystemClock:
    """Wall clock backed by time.time_ns()"""

    def now_millis(self) -> int:
        return time.time_ns() // 1_000_000

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SystemClock)

    def __hash__(self) -> int:
        return hash(SystemClock)


class FixedClock:
    """
    Clock returning a settable value, for deterministic replays and tests

    Args:
        millis: Epoch milliseconds to return
    """

    def __init__(self, millis: int = 0):
        self.millis = millis

    def now_millis(self) -> int:
        return self.millis

    def advance(self, millis: int) -> None:
        self.millis += millis
