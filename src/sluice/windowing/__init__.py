"""Window assignment and built-in window functions."""

from sluice.windowing.assignment import (
    AssignContext,
    Assignment,
    WindowAssigner,
    WindowFn,
)
from sluice.windowing.fns import FixedWindows, GlobalWindows, SlidingWindows

__all__ = [
    "AssignContext",
    "Assignment",
    "FixedWindows",
    "GlobalWindows",
    "SlidingWindows",
    "WindowAssigner",
    "WindowFn",
]
