"""KeyedCounter DoFn: running count per key, kept in keyed state."""

from typing import Any

from sluice.contracts import Capability
from sluice.dofn import DoFn
from sluice.execution.extras import KeyedState
from sluice.execution.protocols import ElementContext
from sluice.signature import DoFnSignature

_COUNT = "count"


class KeyedCounter(DoFn):
    """For each (key, value) element, emit (key, number of elements seen for key).

    The transform must be keyed (binding.key_fn set); otherwise every
    element fails with NoKeyError.
    """

    name = "keyed_counter"
    plugin_version = "1.0.0"
    signature = DoFnSignature.for_process(Capability.KEYED_STATE)

    def process_element(
        self,
        ctx: ElementContext,
        *,
        keyed_state: KeyedState,
        **extras: Any,
    ) -> None:
        count = keyed_state.get(_COUNT, 0) + 1
        keyed_state.put(_COUNT, count)
        ctx.emit((keyed_state.key, count))
