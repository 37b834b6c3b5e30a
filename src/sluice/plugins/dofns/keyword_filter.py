"""Keyword filter DoFn: diverts elements matching regex patterns to a side output."""

import re
from typing import Any

from pydantic import Field, field_validator

from sluice.aggregators import SumFn
from sluice.contracts import OutputTag
from sluice.dofn import DoFn
from sluice.execution.protocols import ElementContext
from sluice.plugins.config_base import DoFnConfig

# Side output receiving blocked elements.
BLOCKED = OutputTag("blocked")


class KeywordFilterConfig(DoFnConfig):
    """Configuration for keyword filter.

    Requires:
        blocked_patterns: Regex patterns that divert an element
    Optional:
        field: Key to scan when elements are dicts; None scans str(element)
    """

    blocked_patterns: list[str] = Field(
        ...,  # Required, no default
        description="Regex patterns that trigger blocking",
    )
    field: str | None = Field(
        default=None,
        description="Dict key to scan; None scans the whole element",
    )

    @field_validator("blocked_patterns")
    @classmethod
    def validate_patterns_not_empty(cls, v: list[str]) -> list[str]:
        """Ensure at least one pattern is provided."""
        if not v:
            raise ValueError("blocked_patterns cannot be empty")
        return v


class KeywordFilter(DoFn):
    """Route elements containing blocked patterns to the BLOCKED side output.

    Elements without a match go to the main output. The binding must declare
    BLOCKED as a side output.

    Example YAML:
        dofn: keyword_filter
        options:
          field: message
          blocked_patterns:
            - "\\\\bpassword\\\\b"
            - "(?i)confidential"
    """

    name = "keyword_filter"
    plugin_version = "1.0.0"
    config_model = KeywordFilterConfig

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        assert isinstance(self.config, KeywordFilterConfig)
        self._field = self.config.field
        # Compile patterns at init - fail fast on invalid regex
        self._patterns = [re.compile(p) for p in self.config.blocked_patterns]
        self.blocked_count = self.create_aggregator("blocked", SumFn())

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        element = ctx.element()
        text = element[self._field] if self._field is not None else element
        if isinstance(text, str) and any(p.search(text) for p in self._patterns):
            self.blocked_count.add_value(1)
            ctx.emit_tagged(BLOCKED, element)
            return
        ctx.emit(element)
