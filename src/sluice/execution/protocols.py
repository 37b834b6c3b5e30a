"""Context protocols a DoFn is written against.

Two capability-tagged interfaces:

- OutputContext: emission only. This is what start_bundle and
  finish_bundle receive.
- ElementContext: OutputContext plus the current element, its timestamp and
  side inputs. Only process_element receives one.

They're used for type checking; the runtime passes BundleContext or
ProcessContext (sluice.execution.context) depending on phase.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from sluice.contracts import OutputTag, Record, SideInputView


class OutputContext(Protocol):
    """Emission operations available in every phase."""

    @property
    def options(self) -> Mapping[str, Any]:
        """Read-only DoFn options."""
        ...

    def get(self, key: str, *, default: Any = None) -> Any:
        """Read a DoFn option by dotted path."""
        ...

    def emit(self, value: Any) -> "Record[Any]":
        """Emit to the main output with default timestamp and windows."""
        ...

    def emit_with_timestamp(self, value: Any, timestamp: float) -> "Record[Any]":
        """Emit to the main output with an explicit timestamp."""
        ...

    def emit_tagged(self, tag: "OutputTag[Any]", value: Any) -> "Record[Any]":
        """Emit to a declared side output."""
        ...

    def emit_tagged_with_timestamp(
        self,
        tag: "OutputTag[Any]",
        value: Any,
        timestamp: float,
    ) -> "Record[Any]":
        """Emit to a declared side output with an explicit timestamp."""
        ...


class ElementContext(OutputContext, Protocol):
    """Per-element context: emission plus access to the element."""

    def element(self) -> Any:
        """The input value being processed."""
        ...

    def timestamp(self) -> float:
        """The input record's timestamp."""
        ...

    def side_input(self, view: "SideInputView[Any]") -> Any:
        """Materialized side input value for the current window."""
        ...
