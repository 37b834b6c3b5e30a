"""Execution contexts passed to DoFn methods.

BundleContext is passed to start_bundle/finish_bundle; ProcessContext to
process_element. Both own an OutputRouter for emission. A context is valid
only for the call it was passed to: once the lifecycle tears it down, every
operation raises StaleContextError.

Example:
    def process_element(self, ctx: ElementContext) -> None:
        word = ctx.element()
        if ctx.get("lowercase", default=False):
            word = word.lower()
        ctx.emit(word)
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from sluice.contracts import (
    AmbiguousWindowError,
    ContextMisuseError,
    NotASideInputError,
    OutputTag,
    Record,
    SideInputView,
    StaleContextError,
)
from sluice.execution.binding import TransformBinding
from sluice.execution.router import OutputRouter
from sluice.execution.side_inputs import SideInputReader


class _RoutedContext:
    """Emission operations shared by both context kinds."""

    def __init__(
        self,
        router: OutputRouter,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self._router = router
        self._options: Mapping[str, Any] = MappingProxyType(dict(options or {}))
        self._live = True

    @property
    def is_live(self) -> bool:
        return self._live

    def close(self) -> None:
        """Tear the context and its router down. Called by the lifecycle, never by DoFns."""
        self._live = False
        self._router.close()

    def _ensure_live(self, operation: str) -> None:
        if not self._live:
            raise StaleContextError(operation)

    @property
    def options(self) -> Mapping[str, Any]:
        self._ensure_live("options")
        return self._options

    def get(self, key: str, *, default: Any = None) -> Any:
        """Get an option value by dotted path.

        Args:
            key: Dotted path like "nested.key"
            default: Value if key not found

        Returns:
            Option value or default
        """
        self._ensure_live("get")
        value: Any = self._options
        for part in key.split("."):
            if isinstance(value, Mapping) and part in value:
                value = value[part]
            else:
                return default
        return value

    def emit(self, value: Any) -> Record[Any]:
        self._ensure_live("emit")
        return self._router.emit(value)

    def emit_with_timestamp(self, value: Any, timestamp: float) -> Record[Any]:
        self._ensure_live("emit_with_timestamp")
        return self._router.emit_with_timestamp(value, timestamp)

    def emit_tagged(self, tag: OutputTag[Any], value: Any) -> Record[Any]:
        self._ensure_live("emit_tagged")
        return self._router.emit_tagged(tag, value)

    def emit_tagged_with_timestamp(
        self,
        tag: OutputTag[Any],
        value: Any,
        timestamp: float,
    ) -> Record[Any]:
        self._ensure_live("emit_tagged_with_timestamp")
        return self._router.emit_tagged_with_timestamp(tag, value, timestamp)


class BundleContext(_RoutedContext):
    """Context for start_bundle and finish_bundle. There is no element.

    The element accessors exist only to fail loudly when a DoFn reaches for
    element state from bundle scope.
    """

    def element(self) -> Any:
        self._ensure_live("element")
        raise ContextMisuseError("element() is not available in start_bundle/finish_bundle")

    def timestamp(self) -> float:
        self._ensure_live("timestamp")
        raise ContextMisuseError("timestamp() is not available in start_bundle/finish_bundle")

    def side_input(self, view: SideInputView[Any]) -> Any:
        self._ensure_live("side_input")
        raise ContextMisuseError("side_input() is not available in start_bundle/finish_bundle")


class ProcessContext(_RoutedContext):
    """Context for one process_element invocation, bound to one record."""

    def __init__(
        self,
        record: Record[Any],
        router: OutputRouter,
        binding: TransformBinding,
        side_input_reader: SideInputReader | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(router, options)
        self._record = record
        self._binding = binding
        self._side_inputs = side_input_reader

    @property
    def record(self) -> Record[Any]:
        """The full input record (value, timestamp, windows)."""
        self._ensure_live("record")
        return self._record

    def element(self) -> Any:
        self._ensure_live("element")
        return self._record.value

    def timestamp(self) -> float:
        self._ensure_live("timestamp")
        return self._record.timestamp

    def side_input(self, view: SideInputView[Any]) -> Any:
        """Resolve view for the record's window.

        Raises:
            NotASideInputError: If view was not declared for this transform.
            AmbiguousWindowError: If the record is in more than one window.
        """
        self._ensure_live("side_input")
        if not self._binding.declares_side_input(view):
            raise NotASideInputError(view)
        if len(self._record.windows) != 1:
            raise AmbiguousWindowError(self._record.windows)
        if self._side_inputs is None:
            raise RuntimeError(
                f"Side input {view.tag!r} is declared but no SideInputReader was provided"
            )
        (window,) = self._record.windows
        return self._side_inputs.get(view, window)
