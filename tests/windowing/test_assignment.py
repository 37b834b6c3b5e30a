# tests/windowing/test_assignment.py
"""Tests for window assignment and the element-access guard."""

from collections.abc import Iterable

import pytest

from sluice.contracts import (
    MIN_TIMESTAMP,
    BoundedWindow,
    ContextMisuseError,
    GlobalWindow,
    IntervalWindow,
    Record,
)
from sluice.windowing import AssignContext, FixedWindows, GlobalWindows, WindowAssigner


class ElementReadingWindowFn:
    """Window function that derives the window from the element itself."""

    def assign(self, ctx: AssignContext) -> Iterable[BoundedWindow]:
        start = float(ctx.element)
        return (IntervalWindow(start, start + 1.0),)


class EmptyWindowFn:
    def assign(self, ctx: AssignContext) -> Iterable[BoundedWindow]:
        return ()


class TestAssignContext:
    """What a window function may read."""

    def test_record_context_exposes_everything(self) -> None:
        record = Record.in_global_window("a", 5.0)
        ctx = AssignContext.for_record(record)
        assert ctx.element == "a"
        assert ctx.timestamp == 5.0
        assert ctx.windows == record.windows

    def test_bundle_context_element_raises(self) -> None:
        ctx = AssignContext.without_element()
        with pytest.raises(ContextMisuseError, match="element"):
            _ = ctx.element

    def test_bundle_context_timestamp_raises_when_absent(self) -> None:
        with pytest.raises(ContextMisuseError):
            _ = AssignContext.without_element().timestamp

    def test_bundle_context_with_timestamp(self) -> None:
        ctx = AssignContext.without_element(42.0)
        assert ctx.timestamp == 42.0
        with pytest.raises(ContextMisuseError):
            _ = ctx.windows

    def test_value_context_has_no_windows(self) -> None:
        ctx = AssignContext.for_value("a", 1.0)
        assert ctx.element == "a"
        with pytest.raises(ContextMisuseError):
            _ = ctx.windows

    def test_none_is_a_valid_element(self) -> None:
        ctx = AssignContext.for_value(None, 1.0)
        assert ctx.element is None


class TestWindowAssigner:
    """Element-scope inheritance vs bundle-scope assignment."""

    def test_for_element_inherits_windows(self) -> None:
        w = IntervalWindow(0.0, 10.0)
        record = Record.of("a", 3.0, {w})
        assigner = WindowAssigner(FixedWindows(60.0))

        assignment = assigner.for_element(record)

        assert assignment.windows == {w}
        assert assignment.timestamp == 3.0

    def test_for_element_explicit_timestamp_keeps_input_windows(self) -> None:
        w = IntervalWindow(0.0, 10.0)
        record = Record.of("a", 3.0, {w})
        assignment = WindowAssigner(FixedWindows(60.0)).for_element(record, 500.0)

        # Inherited, not recomputed from the new timestamp
        assert assignment.windows == {w}
        assert assignment.timestamp == 500.0

    def test_for_bundle_uses_window_fn(self) -> None:
        assignment = WindowAssigner(FixedWindows(60.0)).for_bundle(125.0)
        assert assignment.windows == {IntervalWindow(120.0, 180.0)}
        assert assignment.timestamp == 125.0

    def test_for_bundle_default_timestamp_is_min(self) -> None:
        assignment = WindowAssigner(GlobalWindows()).for_bundle()
        assert assignment.timestamp == MIN_TIMESTAMP
        assert assignment.windows == {GlobalWindow()}

    def test_for_bundle_element_reading_fn_raises(self) -> None:
        assigner = WindowAssigner(ElementReadingWindowFn())
        with pytest.raises(ContextMisuseError):
            assigner.for_bundle(10.0)

    def test_empty_assignment_rejected(self) -> None:
        with pytest.raises(ContextMisuseError, match="no windows"):
            WindowAssigner(EmptyWindowFn()).for_bundle()

    def test_assignment_builds_record(self) -> None:
        record = WindowAssigner(GlobalWindows()).for_bundle(7.0).record("x")
        assert record == Record.in_global_window("x", 7.0)
