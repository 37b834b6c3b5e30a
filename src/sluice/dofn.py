"""Base class for per-element processing functions (DoFns).

Subclass and implement process_element() to create a DoFn. start_bundle()
and finish_bundle() are optional hooks.

Example:
    class SplitWords(DoFn):
        name = "split_words"
        allowed_timestamp_skew = 2.0

        def process_element(self, ctx: ElementContext) -> None:
            for word in ctx.element().split():
                ctx.emit(word)
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from sluice.aggregators import Aggregator, AggregatorRegistry, CombineFn
from sluice.plugins.config_base import DoFnConfig
from sluice.signature import DoFnSignature

if TYPE_CHECKING:
    from sluice.execution.protocols import ElementContext, OutputContext


class DoFn(ABC):
    """Base class for DoFns.

    Class attributes:
        name: Registration name, unique per DoFnManager
        plugin_version: Version string recorded in DoFnSpec
        allowed_timestamp_skew: Seconds an explicit output timestamp may lag
            the input timestamp. 0 means timestamps may only move forward;
            math.inf (UNBOUNDED_SKEW) allows any shift.
        signature: Capabilities each lifecycle method consumes
        config_model: Pydantic model the constructor config is parsed with
    """

    name: ClassVar[str]
    plugin_version: ClassVar[str] = "0.0.0"
    allowed_timestamp_skew: ClassVar[float] = 0.0
    signature: ClassVar[DoFnSignature] = DoFnSignature()
    config_model: ClassVar[type[DoFnConfig]] = DoFnConfig

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialize with configuration.

        Raises:
            PluginConfigError: If config fails validation against config_model.
        """
        self.config = self.config_model.from_dict(config or {})
        self._aggregators = AggregatorRegistry()

    # === Execution contract ===

    @abstractmethod
    def process_element(self, ctx: "ElementContext", **extras: Any) -> None:
        """Process one element.

        Args:
            ctx: Per-element context (element, timestamp, side inputs, emit)
            **extras: Capabilities requested by signature.process_element,
                passed by Capability value (keyed_state, window,
                windowing_internals)
        """
        ...

    def start_bundle(self, ctx: "OutputContext") -> None:  # noqa: B027
        """Called once before the first element of a bundle."""

    def finish_bundle(self, ctx: "OutputContext") -> None:  # noqa: B027
        """Called once after the last element of a bundle."""

    # === Skew ===

    def get_allowed_timestamp_skew(self) -> float:
        """Configured skew if set, else the class default. Read-only during execution."""
        configured = self.config.allowed_timestamp_skew
        if configured is not None:
            return configured
        return float(type(self).allowed_timestamp_skew)

    # === Aggregators ===

    @property
    def aggregators(self) -> AggregatorRegistry:
        return self._aggregators

    def create_aggregator(
        self,
        name: str,
        combine_fn: CombineFn | Callable[[Iterable[Any]], Any],
    ) -> Aggregator:
        """Create an aggregator scoped to this DoFn instance.

        Raises:
            NullArgumentError: If name or combine_fn is None
            DuplicateNameError: If name collides with another aggregator
                on this instance
        """
        return self._aggregators.create_aggregator(name, combine_fn)

    # === Lifecycle hooks outside bundles ===

    def setup(self) -> None:  # noqa: B027
        """Called once per instance before its first bundle."""

    def teardown(self) -> None:  # noqa: B027
        """Called once per instance after its last bundle, including on failure."""
