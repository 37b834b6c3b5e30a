"""WindowTagger DoFn: pairs each element with the window it is processed in."""

from typing import Any

from sluice.contracts import BoundedWindow, Capability
from sluice.dofn import DoFn
from sluice.execution.protocols import ElementContext
from sluice.signature import DoFnSignature


class WindowTagger(DoFn):
    """Emit (window, element) once per window the element belongs to.

    Requests the WINDOW capability, so an element in several windows is
    processed once per window.
    """

    name = "window_tagger"
    plugin_version = "1.0.0"
    signature = DoFnSignature.for_process(Capability.WINDOW)

    def process_element(self, ctx: ElementContext, *, window: BoundedWindow, **extras: Any) -> None:
        ctx.emit((window, ctx.element()))
