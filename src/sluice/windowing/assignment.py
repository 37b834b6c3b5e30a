"""Window assignment for emitted records.

Two rules, selected by phase:

- Element scope (process_element): the output inherits the input record's
  windows verbatim. The timestamp is the input's unless one is supplied.
- Bundle scope (start_bundle/finish_bundle): there is no input record, so the
  transform's window function is asked to assign windows with no element
  information. Any attempt by the window function to read the element fails
  with ContextMisuseError. The timestamp is the supplied one, or
  MIN_TIMESTAMP when none was given.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from sluice.contracts import (
    MIN_TIMESTAMP,
    BoundedWindow,
    ContextMisuseError,
    PaneInfo,
    Record,
)


class WindowFn(Protocol):
    """External window-assignment collaborator.

    A pure function of (optional element, timestamp) to a set of windows.
    """

    def assign(self, ctx: "AssignContext") -> Iterable[BoundedWindow]:
        """Return the windows for the element described by ctx."""
        ...


_NO_ELEMENT = object()


class AssignContext:
    """What a window function may read while assigning windows.

    Built either from a real record, or for bundle-scope output where only
    (optionally) a timestamp exists. Reading anything that is not available
    raises ContextMisuseError.
    """

    def __init__(
        self,
        *,
        element: Any = _NO_ELEMENT,
        timestamp: float | None = None,
        windows: frozenset[BoundedWindow] | None = None,
    ) -> None:
        self._element = element
        self._timestamp = timestamp
        self._windows = windows

    @classmethod
    def for_record(cls, record: Record[Any]) -> "AssignContext":
        return cls(element=record.value, timestamp=record.timestamp, windows=record.windows)

    @classmethod
    def for_value(cls, value: Any, timestamp: float) -> "AssignContext":
        """Context for a value that has a timestamp but no windows yet."""
        return cls(element=value, timestamp=timestamp)

    @classmethod
    def without_element(cls, timestamp: float | None = None) -> "AssignContext":
        return cls(timestamp=timestamp)

    @property
    def element(self) -> Any:
        if self._element is _NO_ELEMENT:
            raise ContextMisuseError(
                "Window function attempted to access the element while assigning "
                "windows for output from start_bundle/finish_bundle"
            )
        return self._element

    @property
    def timestamp(self) -> float:
        if self._timestamp is None:
            raise ContextMisuseError(
                "Window function attempted to access the element timestamp while "
                "assigning windows for output from start_bundle/finish_bundle"
            )
        return self._timestamp

    @property
    def windows(self) -> frozenset[BoundedWindow]:
        if self._windows is None:
            raise ContextMisuseError(
                "Window function attempted to access the element's existing windows "
                "outside element processing"
            )
        return self._windows


@dataclass(frozen=True)
class Assignment:
    """Timestamp and windows computed for one emitted value."""

    timestamp: float
    windows: frozenset[BoundedWindow]
    pane: PaneInfo = PaneInfo.NO_FIRING

    def record(self, value: Any) -> Record[Any]:
        return Record(value=value, timestamp=self.timestamp, windows=self.windows, pane=self.pane)


class WindowAssigner:
    """Computes the Assignment for output, given what the current phase has.

    Example:
        assigner = WindowAssigner(FixedWindows(60))
        assigner.for_element(record)             # inherits record.windows
        assigner.for_bundle(timestamp=120.0)     # asks FixedWindows
    """

    def __init__(self, window_fn: WindowFn) -> None:
        self._window_fn = window_fn

    @property
    def window_fn(self) -> WindowFn:
        return self._window_fn

    def for_element(self, record: Record[Any], timestamp: float | None = None) -> Assignment:
        """Inherit the input record's windows; default to its timestamp."""
        return Assignment(
            timestamp=record.timestamp if timestamp is None else timestamp,
            windows=record.windows,
            pane=record.pane,
        )

    def for_bundle(self, timestamp: float | None = None) -> Assignment:
        """Assign windows with no element. Only the timestamp (if any) is visible."""
        windows = self.assign(AssignContext.without_element(timestamp))
        return Assignment(
            timestamp=MIN_TIMESTAMP if timestamp is None else timestamp,
            windows=windows,
        )

    def assign(self, ctx: AssignContext) -> frozenset[BoundedWindow]:
        """Run the window function and enforce the non-empty result."""
        windows = frozenset(self._window_fn.assign(ctx))
        if not windows:
            raise ContextMisuseError(
                f"Window function {type(self._window_fn).__name__} assigned no windows"
            )
        return windows
