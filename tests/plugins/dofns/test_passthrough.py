# tests/plugins/dofns/test_passthrough.py
"""Tests for PassThrough DoFn."""

from sluice.contracts import IntervalWindow, Record
from sluice.plugins.dofns import PassThrough
from sluice.testing import DoFnHarness


class TestPassThrough:
    def test_emits_unchanged(self) -> None:
        harness = DoFnHarness(PassThrough())
        harness.process_values([{"a": 1}, "b", None], timestamp=7.0)

        assert harness.outputs() == [{"a": 1}, "b", None]
        assert all(r.timestamp == 7.0 for r in harness.records())

    def test_preserves_windows(self) -> None:
        w = IntervalWindow(0.0, 10.0)
        harness = DoFnHarness(PassThrough())
        harness.process_records([Record.of("a", 3.0, {w})])

        assert harness.records() == [Record.of("a", 3.0, {w})]
