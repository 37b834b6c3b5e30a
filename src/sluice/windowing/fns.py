"""Built-in window functions."""

import math
from collections.abc import Iterable

from sluice.contracts import BoundedWindow, GlobalWindow, IntervalWindow
from sluice.windowing.assignment import AssignContext


class GlobalWindows:
    """Assigns everything to the single global window.

    Reads nothing from the element, so it is safe for bundle-scope output.
    """

    def assign(self, ctx: AssignContext) -> Iterable[BoundedWindow]:
        return (GlobalWindow(),)

    def __repr__(self) -> str:
        return "GlobalWindows()"


class FixedWindows:
    """Non-overlapping windows of `size` seconds, shifted by `offset`."""

    def __init__(self, size: float, offset: float = 0.0) -> None:
        if size <= 0:
            raise ValueError(f"FixedWindows size must be positive, got {size}")
        if not 0 <= offset < size:
            raise ValueError(f"FixedWindows offset must be in [0, {size}), got {offset}")
        self.size = size
        self.offset = offset

    def assign(self, ctx: AssignContext) -> Iterable[BoundedWindow]:
        timestamp = ctx.timestamp
        start = timestamp - ((timestamp - self.offset) % self.size)
        return (IntervalWindow(start, start + self.size),)

    def __repr__(self) -> str:
        return f"FixedWindows(size={self.size}, offset={self.offset})"


class SlidingWindows:
    """Windows of `size` seconds starting every `period` seconds.

    Each timestamp falls into ceil(size / period) windows.
    """

    def __init__(self, size: float, period: float, offset: float = 0.0) -> None:
        if size <= 0 or period <= 0:
            raise ValueError("SlidingWindows size and period must be positive")
        if not 0 <= offset < period:
            raise ValueError(f"SlidingWindows offset must be in [0, {period}), got {offset}")
        self.size = size
        self.period = period
        self.offset = offset

    def assign(self, ctx: AssignContext) -> Iterable[BoundedWindow]:
        timestamp = ctx.timestamp
        last_start = timestamp - ((timestamp - self.offset) % self.period)
        count = math.ceil(self.size / self.period)
        windows = []
        for i in range(count):
            start = last_start - i * self.period
            if start + self.size > timestamp:
                windows.append(IntervalWindow(start, start + self.size))
        return windows

    def __repr__(self) -> str:
        return f"SlidingWindows(size={self.size}, period={self.period}, offset={self.offset})"
