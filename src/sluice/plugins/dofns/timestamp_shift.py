"""TimestampShift DoFn: re-emits elements with a shifted event timestamp."""

from typing import Any

from pydantic import Field

from sluice.dofn import DoFn
from sluice.execution.protocols import ElementContext
from sluice.plugins.config_base import DoFnConfig


class TimestampShiftConfig(DoFnConfig):
    """Configuration for timestamp shift.

    A negative shift moves timestamps backward and fails unless
    allowed_timestamp_skew covers it.
    """

    shift_seconds: float = Field(..., description="Seconds added to each timestamp")


class TimestampShift(DoFn):
    """Emit each element at input timestamp + shift_seconds."""

    name = "timestamp_shift"
    plugin_version = "1.0.0"
    config_model = TimestampShiftConfig

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        assert isinstance(self.config, TimestampShiftConfig)
        self._shift = self.config.shift_seconds

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        ctx.emit_with_timestamp(ctx.element(), ctx.timestamp() + self._shift)
