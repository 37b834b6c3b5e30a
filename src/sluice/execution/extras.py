"""Extra per-invocation capabilities: keyed state, window, windowing internals.

The ExtraContextFactory protocol is the seam to the scheduling collaborator.
ExtraContextProvider is the default implementation the runtime builds for
every process_element invocation. The lifecycle queries each capability the
DoFn's signature requires exactly once per invocation.
"""

from collections.abc import Hashable
from typing import Any, Protocol

from sluice.contracts import (
    AmbiguousWindowError,
    BoundedWindow,
    NoKeyError,
    PaneInfo,
    Record,
)
from sluice.execution.binding import TransformBinding
from sluice.execution.router import OutputRouter


class KeyedStateStore(Protocol):
    """External keyed-state backend. Persistence format is its own concern."""

    def read(self, key: Hashable, name: str, default: Any = None) -> Any:
        ...

    def write(self, key: Hashable, name: str, value: Any) -> None:
        ...

    def delete(self, key: Hashable, name: str) -> None:
        ...


class InMemoryKeyedStateStore:
    """Keyed state held in a dict. Not shared across processes."""

    def __init__(self) -> None:
        self._data: dict[tuple[Hashable, str], Any] = {}

    def read(self, key: Hashable, name: str, default: Any = None) -> Any:
        return self._data.get((key, name), default)

    def write(self, key: Hashable, name: str, value: Any) -> None:
        self._data[(key, name)] = value

    def delete(self, key: Hashable, name: str) -> None:
        self._data.pop((key, name), None)

    def snapshot(self) -> dict[tuple[Hashable, str], Any]:
        return dict(self._data)


class KeyedState:
    """Handle to keyed state, scoped to the key of the current element."""

    def __init__(self, store: KeyedStateStore, key: Hashable) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> Hashable:
        return self._key

    def get(self, name: str, default: Any = None) -> Any:
        return self._store.read(self._key, name, default)

    def put(self, name: str, value: Any) -> None:
        self._store.write(self._key, name, value)

    def clear(self, name: str) -> None:
        self._store.delete(self._key, name)


class WindowingInternals:
    """Low-level window and pane metadata for advanced DoFns."""

    def __init__(self, record: Record[Any], router: OutputRouter) -> None:
        self._record = record
        self._router = router

    @property
    def windows(self) -> frozenset[BoundedWindow]:
        return self._record.windows

    @property
    def pane(self) -> PaneInfo:
        return self._record.pane

    @property
    def timestamp(self) -> float:
        return self._record.timestamp

    def output_windowed(
        self,
        value: Any,
        timestamp: float,
        windows: frozenset[BoundedWindow],
    ) -> Record[Any]:
        """Emit to the main output with explicit windows, bypassing inheritance."""
        return self._router.emit_windowed(value, timestamp, windows)


class ExtraContextFactory(Protocol):
    """Supplies optional capability objects for one invocation."""

    def keyed_state(self) -> KeyedState:
        ...

    def window(self) -> BoundedWindow:
        ...

    def windowing_internals(self) -> WindowingInternals:
        ...


class ExtraContextProvider:
    """Default ExtraContextFactory built per invocation.

    Pure accessors: nothing here changes the ProcessContext.
    """

    def __init__(
        self,
        record: Record[Any],
        binding: TransformBinding,
        router: OutputRouter,
        state_store: KeyedStateStore | None = None,
    ) -> None:
        self._record = record
        self._binding = binding
        self._router = router
        self._state_store = state_store

    def keyed_state(self) -> KeyedState:
        """Keyed state for the current element's key.

        Raises:
            NoKeyError: If the transform is not keyed.
        """
        if not self._binding.is_keyed:
            raise NoKeyError()
        if self._state_store is None:
            raise RuntimeError("Transform is keyed but no KeyedStateStore was provided")
        return KeyedState(self._state_store, self._binding.key_of(self._record))

    def window(self) -> BoundedWindow:
        """The single window of the current record.

        Raises:
            AmbiguousWindowError: If the record is in more than one window.
        """
        if len(self._record.windows) != 1:
            raise AmbiguousWindowError(self._record.windows)
        (window,) = self._record.windows
        return window

    def windowing_internals(self) -> WindowingInternals:
        return WindowingInternals(self._record, self._router)
