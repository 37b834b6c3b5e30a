"""OutputRouter: validates emitted values and forwards them to sinks.

One router serves one context. During element processing it is bound to the
input record, which fixes the windows every output inherits and the lower
bound on explicit output timestamps. In bundle scope there is no input
record: windows come from the window function and explicit timestamps are
taken as given.

Every check runs before anything is forwarded, so a call that raises has
emitted nothing and used up no side output slot. Once the lifecycle closes a
router, every emit raises StaleContextError, including emits through
handles (such as WindowingInternals) that outlived their invocation.
"""

import math
from collections import Counter
from collections.abc import Mapping
from typing import Any

from sluice.contracts import (
    OutputTag,
    Record,
    SkewViolationError,
    StaleContextError,
    TooManyOutputsError,
    UnknownTagError,
)
from sluice.core.logging import get_logger
from sluice.execution.binding import TransformBinding
from sluice.execution.sinks import OutputSink
from sluice.windowing import Assignment, WindowAssigner

logger = get_logger(__name__)


class OutputRouter:
    """Routes records to the main channel or to declared side output channels.

    Example:
        router = OutputRouter(binding, sinks, assigner, skew=2.0, input_record=rec)
        router.emit("out")                          # rec.timestamp, rec.windows
        router.emit_with_timestamp("late", 99.0)    # checked against skew
        router.emit_tagged(errors_tag, {"bad": 1})  # to the errors sink
    """

    def __init__(
        self,
        binding: TransformBinding,
        sinks: Mapping[OutputTag[Any], OutputSink],
        assigner: WindowAssigner,
        *,
        skew: float = 0.0,
        input_record: Record[Any] | None = None,
        used_tags: set[OutputTag[Any]] | None = None,
        max_side_output_tags: int | None = None,
    ) -> None:
        """Initialize router.

        Args:
            binding: Declared outputs of the transform
            sinks: Sink per output tag (main tag included)
            assigner: Window assignment for emitted values
            skew: Allowed backward timestamp shift, in seconds
            input_record: Record being processed, None in bundle scope
            used_tags: Distinct side output tags used so far; shared across
                every router of one DoFn instance so the limit counts all of
                its bundles
            max_side_output_tags: Emit-time limit, defaults to the binding's
        """
        self._binding = binding
        self._sinks = sinks
        self._assigner = assigner
        self._skew = skew
        self._input = input_record
        self._used_tags = used_tags if used_tags is not None else set()
        self._max_tags = (
            max_side_output_tags
            if max_side_output_tags is not None
            else binding.max_side_output_tags
        )
        self._counts: Counter[str] = Counter()
        self._live = True

    @property
    def in_element_scope(self) -> bool:
        return self._input is not None

    @property
    def is_live(self) -> bool:
        return self._live

    def close(self) -> None:
        """Reject every further emit. Called when the owning context is torn down."""
        self._live = False

    # === Main output ===

    def emit(self, value: Any) -> Record[Any]:
        """Emit to the main output with the default timestamp and windows."""
        self._ensure_live("emit")
        return self._forward(self._binding.main_tag, value, self._assign(None))

    def emit_with_timestamp(self, value: Any, timestamp: float) -> Record[Any]:
        """Emit to the main output with an explicit timestamp.

        Raises:
            SkewViolationError: During element processing, if timestamp is
                older than the input timestamp minus the allowed skew.
        """
        self._ensure_live("emit_with_timestamp")
        return self._forward(self._binding.main_tag, value, self._assign(timestamp))

    # === Side outputs ===

    def emit_tagged(self, tag: OutputTag[Any], value: Any) -> Record[Any]:
        """Emit to the side output identified by tag.

        Raises:
            UnknownTagError: If tag was not declared for this transform.
            TooManyOutputsError: If using tag exceeds the side output limit.
        """
        self._ensure_live("emit_tagged")
        self._check_tag(tag)
        return self._forward(tag, value, self._assign(None))

    def emit_tagged_with_timestamp(
        self,
        tag: OutputTag[Any],
        value: Any,
        timestamp: float,
    ) -> Record[Any]:
        """Emit to a side output with an explicit timestamp."""
        self._ensure_live("emit_tagged_with_timestamp")
        self._check_tag(tag)
        return self._forward(tag, value, self._assign(timestamp))

    def emit_windowed(
        self,
        value: Any,
        timestamp: float,
        windows: frozenset[Any],
    ) -> Record[Any]:
        """Emit to the main output with explicit windows.

        Only reachable through WindowingInternals. The skew rule still
        applies during element processing.
        """
        self._ensure_live("output_windowed")
        self._check_skew(timestamp)
        return self._forward(self._binding.main_tag, value, Assignment(timestamp, frozenset(windows)))

    # === Accounting ===

    def emitted_counts(self) -> dict[str, int]:
        """Records forwarded by this router, keyed by tag id."""
        return dict(self._counts)

    # === Internals ===

    def _ensure_live(self, operation: str) -> None:
        if not self._live:
            raise StaleContextError(operation)

    def _assign(self, timestamp: float | None) -> Assignment:
        if timestamp is not None:
            if isinstance(timestamp, float) and math.isnan(timestamp):
                raise ValueError("Output timestamp cannot be NaN")
            self._check_skew(timestamp)
        if self._input is not None:
            return self._assigner.for_element(self._input, timestamp)
        return self._assigner.for_bundle(timestamp)

    def _check_skew(self, timestamp: float) -> None:
        # No input timestamp to compare against in bundle scope
        if self._input is None:
            return
        if timestamp < self._input.timestamp - self._skew:
            raise SkewViolationError(timestamp, self._input.timestamp, self._skew)

    def _check_tag(self, tag: OutputTag[Any]) -> None:
        if tag == self._binding.main_tag:
            return
        if tag not in self._binding.side_output_tags:
            raise UnknownTagError(tag, self._binding.side_output_tags)
        if tag not in self._used_tags:
            if len(self._used_tags) + 1 > self._max_tags:
                raise TooManyOutputsError(len(self._used_tags) + 1, self._max_tags)

    def _forward(self, tag: OutputTag[Any], value: Any, assignment: Assignment) -> Record[Any]:
        record = assignment.record(value)
        self._sinks[tag].receive(record)
        if tag != self._binding.main_tag:
            self._used_tags.add(tag)
        self._counts[tag.id] += 1
        logger.debug(
            "Record emitted",
            tag=tag.id,
            record_timestamp=record.timestamp,
            window_count=len(record.windows),
        )
        return record
