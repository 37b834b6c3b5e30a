"""Window and pane value types.

Windows are used as set members, so every window is a frozen dataclass with
well-defined equality, hashing and ordering.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from sluice.contracts.enums import PaneTiming

# Timestamps and durations are float seconds.
MIN_TIMESTAMP = -math.inf
MAX_TIMESTAMP = math.inf

# Smallest representable step between two timestamps (one microsecond).
TIMESTAMP_RESOLUTION = 1e-6


class BoundedWindow(ABC):
    """Base class for windows. Every window has an inclusive upper bound."""

    @abstractmethod
    def max_timestamp(self) -> float:
        """Largest timestamp that falls inside this window."""
        ...


@dataclass(frozen=True, order=True)
class GlobalWindow(BoundedWindow):
    """The single window that covers all time."""

    def max_timestamp(self) -> float:
        return MAX_TIMESTAMP

    def __repr__(self) -> str:
        return "GlobalWindow()"


@dataclass(frozen=True, order=True)
class IntervalWindow(BoundedWindow):
    """Half-open window [start, end)."""

    start: float
    end: float

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"IntervalWindow end ({self.end}) must not precede start ({self.start})"
            )

    def max_timestamp(self) -> float:
        return self.end - TIMESTAMP_RESOLUTION

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp < self.end

    def intersects(self, other: "IntervalWindow") -> bool:
        return self.start < other.end and other.start < self.end

    def span(self, other: "IntervalWindow") -> "IntervalWindow":
        """Smallest window covering both windows."""
        return IntervalWindow(min(self.start, other.start), max(self.end, other.end))


@dataclass(frozen=True)
class PaneInfo:
    """Metadata about the trigger firing that produced a record.

    Without triggering, records live in a single on-time pane that is both
    first and last.
    """

    is_first: bool = True
    is_last: bool = True
    timing: PaneTiming = PaneTiming.UNKNOWN
    index: int = 0
    non_speculative_index: int = field(default=0, repr=False)

    NO_FIRING: ClassVar["PaneInfo"]


PaneInfo.NO_FIRING = PaneInfo()
