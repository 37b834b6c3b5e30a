"""Sink collaborator interface and an in-memory implementation.

The router hands every record to a sink before the emitting call returns.
What the sink does afterwards (buffering, batching, committing) is its own
business, including what happens to records of a bundle that later fails.
"""

from typing import Any, Protocol, runtime_checkable

from sluice.contracts import Record


@runtime_checkable
class OutputSink(Protocol):
    """Consumes records pushed by the OutputRouter for one channel."""

    def receive(self, record: Record[Any]) -> None:
        """Accept one record. Called synchronously from the emitting call."""
        ...


class CollectingSink:
    """Keeps every received record in memory, in arrival order."""

    def __init__(self) -> None:
        self.records: list[Record[Any]] = []

    def receive(self, record: Record[Any]) -> None:
        self.records.append(record)

    @property
    def values(self) -> list[Any]:
        return [r.value for r in self.records]

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)
