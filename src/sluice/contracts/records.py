"""Records, output tags and side input views.

A Record is what flows between transforms: a value, its event timestamp, and
the windows it belongs to. Records are immutable once produced.
"""

import math
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sluice.contracts.windows import BoundedWindow, GlobalWindow, PaneInfo

V = TypeVar("V")


@dataclass(frozen=True)
class Record(Generic[V]):
    """A timestamped, windowed value.

    The window set is never empty: a record with no windows would be
    silently dropped by every downstream grouping.
    """

    value: V
    timestamp: float
    windows: frozenset[BoundedWindow]
    pane: PaneInfo = field(default=PaneInfo.NO_FIRING, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.windows, frozenset):
            object.__setattr__(self, "windows", frozenset(self.windows))
        if not self.windows:
            raise ValueError("Record must belong to at least one window")
        if isinstance(self.timestamp, float) and math.isnan(self.timestamp):
            raise ValueError("Record timestamp cannot be NaN")

    @classmethod
    def of(
        cls,
        value: V,
        timestamp: float,
        windows: Iterable[BoundedWindow],
    ) -> "Record[V]":
        """Create a record from any iterable of windows."""
        return cls(value=value, timestamp=timestamp, windows=frozenset(windows))

    @classmethod
    def in_global_window(cls, value: V, timestamp: float = 0.0) -> "Record[V]":
        """Create a record in the global window."""
        return cls(value=value, timestamp=timestamp, windows=frozenset({GlobalWindow()}))

    def with_value(self, value: Any) -> "Record[Any]":
        """Same timestamp, windows and pane with a new value."""
        return Record(value=value, timestamp=self.timestamp, windows=self.windows, pane=self.pane)

    def explode(self) -> list["Record[V]"]:
        """Split into one single-window record per window, in window order."""
        ordered = sorted(self.windows, key=_window_sort_key)
        return [
            Record(value=self.value, timestamp=self.timestamp, windows=frozenset({w}), pane=self.pane)
            for w in ordered
        ]


def _window_sort_key(window: BoundedWindow) -> tuple[float, str]:
    return (window.max_timestamp(), repr(window))


@dataclass(frozen=True)
class OutputTag(Generic[V]):
    """Identifies an output channel of a transform.

    Equality is by id, so two tags created with the same id address the same
    channel.
    """

    id: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("OutputTag id cannot be empty")

    def __repr__(self) -> str:
        return f"OutputTag({self.id!r})"


# Reserved tag for the main output channel.
MAIN_OUTPUT: OutputTag[Any] = OutputTag("main")


def as_list(values: Sequence[Any]) -> list[Any]:
    """Materialize a side input as a list."""
    return list(values)


def as_singleton(values: Sequence[Any]) -> Any:
    """Materialize a side input holding exactly one value."""
    if len(values) != 1:
        raise ValueError(
            f"Singleton side input expected exactly one value, found {len(values)}"
        )
    return values[0]


def as_dict(values: Sequence[Any]) -> dict[Hashable, Any]:
    """Materialize a side input of (key, value) pairs as a dict."""
    result: dict[Hashable, Any] = {}
    for key, value in values:
        if key in result:
            raise ValueError(f"Duplicate key {key!r} in dict side input")
        result[key] = value
    return result


@dataclass(frozen=True)
class SideInputView(Generic[V]):
    """A declared side input and how to materialize it.

    view_fn turns the values visible in one window into the value a DoFn
    sees from side_input().
    """

    tag: str
    view_fn: Callable[[Sequence[Any]], V] = field(default=as_list, compare=False, hash=False)

    @classmethod
    def singleton(cls, tag: str) -> "SideInputView[Any]":
        return cls(tag=tag, view_fn=as_singleton)

    @classmethod
    def of_list(cls, tag: str) -> "SideInputView[list[Any]]":
        return cls(tag=tag, view_fn=as_list)

    @classmethod
    def of_dict(cls, tag: str) -> "SideInputView[dict[Hashable, Any]]":
        return cls(tag=tag, view_fn=as_dict)
