# tests/conftest.py
"""Shared test fixtures and helpers.

Provides small DoFns, bindings and sinks reused across the suite.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from sluice.contracts import MAIN_OUTPUT, IntervalWindow, OutputTag, Record
from sluice.dofn import DoFn
from sluice.execution import CollectingSink, ElementContext, OutputContext, TransformBinding

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


ERRORS = OutputTag("errors")
W1 = IntervalWindow(90.0, 110.0)
W2 = IntervalWindow(100.0, 120.0)


class RecordingDoFn(DoFn):
    """DoFn that records every lifecycle call and echoes elements.

    Usage:
        dofn = RecordingDoFn()
        ... run a bundle ...
        assert dofn.calls == ["start_bundle", "process_element", "finish_bundle"]
    """

    name = "recording"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self.calls: list[str] = []
        self.contexts: list[Any] = []

    def start_bundle(self, ctx: OutputContext) -> None:
        self.calls.append("start_bundle")
        self.contexts.append(ctx)

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        self.calls.append("process_element")
        self.contexts.append(ctx)
        ctx.emit(ctx.element())

    def finish_bundle(self, ctx: OutputContext) -> None:
        self.calls.append("finish_bundle")
        self.contexts.append(ctx)


@pytest.fixture
def main_sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def error_sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def binding() -> TransformBinding:
    """Binding with one declared side output, ERRORS."""
    return TransformBinding.create(side_outputs=[ERRORS])


@pytest.fixture
def sinks(main_sink: CollectingSink, error_sink: CollectingSink) -> dict[OutputTag[Any], CollectingSink]:
    return {MAIN_OUTPUT: main_sink, ERRORS: error_sink}


@pytest.fixture
def record_in_w1() -> Record[str]:
    """The record ("a", t=100, {W1})."""
    return Record.of("a", 100.0, {W1})


@pytest.fixture
def recording_dofn() -> RecordingDoFn:
    return RecordingDoFn()
