"""PassThrough DoFn.

Emits every element unchanged. Useful for testing and debugging pipelines.
"""

from typing import Any

from sluice.dofn import DoFn
from sluice.execution.protocols import ElementContext


class PassThrough(DoFn):
    """Emit elements unchanged with their input timestamp and windows.

    Config options:
        None (accepts empty config)
    """

    name = "passthrough"
    plugin_version = "1.0.0"

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        ctx.emit(ctx.element())
