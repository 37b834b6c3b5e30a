"""CountPerBundle DoFn: emits the element count of each bundle from finish_bundle."""

from typing import Any

from sluice.aggregators import SumFn
from sluice.dofn import DoFn
from sluice.execution.protocols import ElementContext, OutputContext


class CountPerBundle(DoFn):
    """Count elements and emit the count when the bundle finishes.

    The count is emitted from bundle scope, so its windows come from the
    input's window function and its timestamp is MIN_TIMESTAMP.
    """

    name = "count_per_bundle"
    plugin_version = "1.0.0"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self._count = 0
        self.total = self.create_aggregator("elements", SumFn())

    def start_bundle(self, ctx: OutputContext) -> None:
        self._count = 0

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        self._count += 1
        self.total.add_value(1)

    def finish_bundle(self, ctx: OutputContext) -> None:
        ctx.emit(self._count)
