# tests/contracts/test_windows.py
"""Tests for window value types."""

import math

import pytest

from sluice.contracts import (
    MAX_TIMESTAMP,
    TIMESTAMP_RESOLUTION,
    BoundedWindow,
    GlobalWindow,
    IntervalWindow,
    PaneInfo,
    PaneTiming,
)


class TestBoundedWindow:
    def test_base_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            BoundedWindow()  # type: ignore[abstract]

    def test_subclass_must_define_max_timestamp(self) -> None:
        class Unbounded(BoundedWindow):
            pass

        with pytest.raises(TypeError, match="max_timestamp"):
            Unbounded()  # type: ignore[abstract]


class TestGlobalWindow:
    def test_singleton_equality(self) -> None:
        assert GlobalWindow() == GlobalWindow()
        assert hash(GlobalWindow()) == hash(GlobalWindow())

    def test_max_timestamp_is_end_of_time(self) -> None:
        assert GlobalWindow().max_timestamp() == MAX_TIMESTAMP
        assert math.isinf(GlobalWindow().max_timestamp())


class TestIntervalWindow:
    """Half-open interval windows."""

    def test_contains_is_half_open(self) -> None:
        w = IntervalWindow(0.0, 10.0)
        assert w.contains(0.0)
        assert w.contains(9.999)
        assert not w.contains(10.0)

    def test_max_timestamp_is_just_before_end(self) -> None:
        assert IntervalWindow(0.0, 10.0).max_timestamp() == 10.0 - TIMESTAMP_RESOLUTION

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValueError):
            IntervalWindow(10.0, 0.0)

    def test_intersects_and_span(self) -> None:
        a = IntervalWindow(0.0, 10.0)
        b = IntervalWindow(5.0, 15.0)
        c = IntervalWindow(10.0, 20.0)

        assert a.intersects(b)
        assert not a.intersects(c)
        assert a.span(c) == IntervalWindow(0.0, 20.0)

    def test_windows_are_ordered(self) -> None:
        assert sorted([IntervalWindow(5.0, 6.0), IntervalWindow(1.0, 2.0)]) == [
            IntervalWindow(1.0, 2.0),
            IntervalWindow(5.0, 6.0),
        ]


class TestPaneInfo:
    def test_no_firing_is_single_pane(self) -> None:
        pane = PaneInfo.NO_FIRING
        assert pane.is_first
        assert pane.is_last
        assert pane.index == 0
        assert pane.timing == PaneTiming.UNKNOWN
