"""Side input reader collaborator and an in-memory implementation."""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from sluice.contracts import BoundedWindow, GlobalWindow, Record, SideInputView


@runtime_checkable
class SideInputReader(Protocol):
    """Resolves a side input view for one main-input window.

    May block on an external store in a full system. The runtime does not
    manage timeouts; an interruption raised here propagates as a failure of
    the element being processed.
    """

    def get(self, view: SideInputView[Any], window: BoundedWindow) -> Any:
        """Return the materialized view value visible in window."""
        ...


class InMemorySideInputReader:
    """Side input contents held in memory, keyed by view tag.

    A side input record is visible in a main-input window if it belongs to
    that window or to the global window.
    """

    def __init__(self, contents: Mapping[str, Iterable[Record[Any]]] | None = None) -> None:
        self._contents: dict[str, list[Record[Any]]] = {
            tag: list(records) for tag, records in (contents or {}).items()
        }

    def put(self, view: SideInputView[Any], records: Iterable[Record[Any]]) -> None:
        self._contents[view.tag] = list(records)

    def put_values(self, view: SideInputView[Any], values: Iterable[Any]) -> None:
        """Store values in the global window."""
        self._contents[view.tag] = [Record.in_global_window(v) for v in values]

    def get(self, view: SideInputView[Any], window: BoundedWindow) -> Any:
        records = self._contents.get(view.tag, [])
        visible = [
            r.value
            for r in records
            if window in r.windows or GlobalWindow() in r.windows
        ]
        return view.view_fn(visible)
