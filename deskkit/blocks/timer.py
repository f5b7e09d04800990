"""Tick timer deciding which blocks run on each alarm."""

import signal
from functools import reduce
from typing import Iterable

from .util import gcd

__all__ = ["TIMER_SIGNAL", "Timer"]

TIMER_SIGNAL = signal.SIGALRM


class Timer:
    """Counts time in ticks of the greatest common divisor of the intervals.

    Time wraps at the largest interval; at the start every block runs.
    """

    def __init__(self, intervals: Iterable[int]):
        intervals = list(intervals)
        self.reset_value = max([1, *intervals])
        self.tick = reduce(lambda acc, value: gcd(value, acc), intervals, 0)
        self.time = self.reset_value

    def advance(self) -> None:
        """Move time forward one tick, wrapping at the reset value."""
        self.time = (self.time + self.tick) % self.reset_value

    def arm(self) -> None:
        """Schedule the next alarm one tick from now and advance time."""
        signal.alarm(self.tick)
        self.advance()

    def must_run(self, interval: int) -> bool:
        """Tell whether a block with the given interval is due now."""
        if self.time == self.reset_value:
            return True
        if interval == 0:
            return False
        return self.time % interval == 0