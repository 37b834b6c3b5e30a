# tests/execution/test_side_inputs.py
"""Tests for InMemorySideInputReader."""

from sluice.contracts import GlobalWindow, IntervalWindow, Record, SideInputView
from sluice.execution import InMemorySideInputReader, SideInputReader


class TestInMemorySideInputReader:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemorySideInputReader(), SideInputReader)

    def test_global_values_visible_in_every_window(self) -> None:
        view = SideInputView.of_list("xs")
        reader = InMemorySideInputReader()
        reader.put_values(view, [1, 2])

        assert reader.get(view, GlobalWindow()) == [1, 2]
        assert reader.get(view, IntervalWindow(0.0, 10.0)) == [1, 2]

    def test_windowed_values_visible_only_in_their_window(self) -> None:
        view = SideInputView.of_list("xs")
        w1 = IntervalWindow(0.0, 10.0)
        w2 = IntervalWindow(10.0, 20.0)
        reader = InMemorySideInputReader({"xs": [Record.of(1, 0.0, {w1}), Record.of(2, 10.0, {w2})]})

        assert reader.get(view, w1) == [1]
        assert reader.get(view, w2) == [2]

    def test_missing_view_materializes_empty(self) -> None:
        assert InMemorySideInputReader().get(SideInputView.of_list("xs"), GlobalWindow()) == []
