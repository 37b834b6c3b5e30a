"""Aggregators: named, instance-scoped combiners a DoFn can update.

Each DoFn instance owns one AggregatorRegistry for its whole lifetime. It is
not shared, not global, and not reset between bundles. Names are unique
within the registry; registering after first use is allowed but still checked.

Example:
    class CountWords(DoFn):
        def __init__(self, config):
            super().__init__(config)
            self.empty_lines = self.create_aggregator("empty_lines", SumFn())

        def process_element(self, ctx):
            if not ctx.element().strip():
                self.empty_lines.add_value(1)
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Protocol

from sluice.contracts import DuplicateNameError, NullArgumentError


class CombineFn(ABC):
    """Commutative, associative combining logic."""

    @abstractmethod
    def create_accumulator(self) -> Any:
        ...

    @abstractmethod
    def add_input(self, accumulator: Any, value: Any) -> Any:
        ...

    @abstractmethod
    def merge_accumulators(self, accumulators: Iterable[Any]) -> Any:
        ...

    @abstractmethod
    def extract_output(self, accumulator: Any) -> Any:
        ...


class SumFn(CombineFn):
    def create_accumulator(self) -> Any:
        return 0

    def add_input(self, accumulator: Any, value: Any) -> Any:
        return accumulator + value

    def merge_accumulators(self, accumulators: Iterable[Any]) -> Any:
        return sum(accumulators)

    def extract_output(self, accumulator: Any) -> Any:
        return accumulator


class CountFn(CombineFn):
    """Counts inputs, ignoring their values."""

    def create_accumulator(self) -> int:
        return 0

    def add_input(self, accumulator: int, value: Any) -> int:
        return accumulator + 1

    def merge_accumulators(self, accumulators: Iterable[int]) -> int:
        return sum(accumulators)

    def extract_output(self, accumulator: int) -> int:
        return accumulator


class _ExtremumFn(CombineFn):
    """Min or max. The output of an empty accumulator is None."""

    _pick: Callable[[Any, Any], Any]

    def create_accumulator(self) -> Any:
        return None

    def add_input(self, accumulator: Any, value: Any) -> Any:
        if accumulator is None:
            return value
        return type(self)._pick(accumulator, value)

    def merge_accumulators(self, accumulators: Iterable[Any]) -> Any:
        result = None
        for acc in accumulators:
            if acc is not None:
                result = self.add_input(result, acc)
        return result

    def extract_output(self, accumulator: Any) -> Any:
        return accumulator


class MinFn(_ExtremumFn):
    _pick = min


class MaxFn(_ExtremumFn):
    _pick = max


class MeanFn(CombineFn):
    """Arithmetic mean. Accumulator is (sum, count)."""

    def create_accumulator(self) -> tuple[float, int]:
        return (0.0, 0)

    def add_input(self, accumulator: tuple[float, int], value: Any) -> tuple[float, int]:
        total, count = accumulator
        return (total + value, count + 1)

    def merge_accumulators(self, accumulators: Iterable[tuple[float, int]]) -> tuple[float, int]:
        totals = list(accumulators)
        return (sum(t for t, _ in totals), sum(c for _, c in totals))

    def extract_output(self, accumulator: tuple[float, int]) -> float | None:
        total, count = accumulator
        if count == 0:
            return None
        return total / count


class SimpleCombineFn(CombineFn):
    """Wraps a function over an iterable of values, e.g. `sum` or `max`.

    Inputs are buffered and compacted through the function once the buffer
    grows past BUFFER_SIZE, so the function must be commutative and
    associative over its own outputs.
    """

    BUFFER_SIZE = 64

    def __init__(self, fn: Callable[[Iterable[Any]], Any]) -> None:
        self._fn = fn

    def create_accumulator(self) -> list[Any]:
        return []

    def add_input(self, accumulator: list[Any], value: Any) -> list[Any]:
        accumulator.append(value)
        if len(accumulator) > self.BUFFER_SIZE:
            accumulator[:] = [self._fn(accumulator)]
        return accumulator

    def merge_accumulators(self, accumulators: Iterable[list[Any]]) -> list[Any]:
        merged: list[Any] = []
        for acc in accumulators:
            merged.extend(acc)
        return [self._fn(merged)] if merged else []

    def extract_output(self, accumulator: list[Any]) -> Any:
        return self._fn(accumulator)


class AggregatorBackend(Protocol):
    """External collector of aggregator updates (metrics backend)."""

    def add_value(self, name: str, value: Any) -> None:
        ...


class Aggregator:
    """Handle returned by create_aggregator. Valid in every phase."""

    def __init__(self, name: str, combine_fn: CombineFn) -> None:
        self.name = name
        self.combine_fn = combine_fn
        self._accumulator = combine_fn.create_accumulator()
        self._backend: AggregatorBackend | None = None

    def add_value(self, value: Any) -> None:
        self._accumulator = self.combine_fn.add_input(self._accumulator, value)
        if self._backend is not None:
            self._backend.add_value(self.name, value)

    def value(self) -> Any:
        """Combined output of every value added so far on this instance."""
        return self.combine_fn.extract_output(self._accumulator)

    def attach(self, backend: AggregatorBackend | None) -> None:
        self._backend = backend

    def __repr__(self) -> str:
        return f"Aggregator({self.name!r}, {type(self.combine_fn).__name__})"


class AggregatorRegistry:
    """Name-keyed table of aggregators owned by one DoFn instance."""

    def __init__(self) -> None:
        self._aggregators: dict[str, Aggregator] = {}
        self._backend: AggregatorBackend | None = None

    def create_aggregator(
        self,
        name: str,
        combine_fn: CombineFn | Callable[[Iterable[Any]], Any],
    ) -> Aggregator:
        """Register a new aggregator and return its handle.

        Args:
            name: Unique name within this registry
            combine_fn: A CombineFn, or a plain function over an iterable
                (wrapped in SimpleCombineFn)

        Raises:
            NullArgumentError: If name or combine_fn is None
            DuplicateNameError: If name is already registered
        """
        if name is None:
            raise NullArgumentError("name")
        if combine_fn is None:
            raise NullArgumentError("combine_fn")
        if name in self._aggregators:
            raise DuplicateNameError(name)

        if not isinstance(combine_fn, CombineFn):
            combine_fn = SimpleCombineFn(combine_fn)

        aggregator = Aggregator(name, combine_fn)
        aggregator.attach(self._backend)
        self._aggregators[name] = aggregator
        return aggregator

    def attach_backend(self, backend: AggregatorBackend | None) -> None:
        """Route every future add_value of every aggregator to backend."""
        self._backend = backend
        for aggregator in self._aggregators.values():
            aggregator.attach(backend)

    def get(self, name: str) -> Aggregator | None:
        return self._aggregators.get(name)

    def values(self) -> dict[str, Any]:
        """Current combined value per aggregator name."""
        return {name: agg.value() for name, agg in self._aggregators.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._aggregators

    def __iter__(self) -> Iterator[Aggregator]:
        return iter(self._aggregators.values())

    def __len__(self) -> int:
        return len(self._aggregators)
