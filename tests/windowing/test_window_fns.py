# tests/windowing/test_window_fns.py
"""Tests for built-in window functions."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sluice.contracts import GlobalWindow, IntervalWindow
from sluice.windowing import AssignContext, FixedWindows, GlobalWindows, SlidingWindows


def assign(fn: object, timestamp: float) -> set[object]:
    return set(fn.assign(AssignContext.for_value("x", timestamp)))  # type: ignore[attr-defined]


class TestGlobalWindows:
    def test_assigns_global_window_without_reading_anything(self) -> None:
        assert set(GlobalWindows().assign(AssignContext.without_element())) == {GlobalWindow()}


class TestFixedWindows:
    def test_assigns_containing_window(self) -> None:
        assert assign(FixedWindows(10.0), 23.0) == {IntervalWindow(20.0, 30.0)}

    def test_boundary_goes_to_next_window(self) -> None:
        assert assign(FixedWindows(10.0), 30.0) == {IntervalWindow(30.0, 40.0)}

    def test_offset(self) -> None:
        assert assign(FixedWindows(10.0, offset=5.0), 23.0) == {IntervalWindow(15.0, 25.0)}

    def test_negative_timestamp(self) -> None:
        assert assign(FixedWindows(10.0), -3.0) == {IntervalWindow(-10.0, 0.0)}

    @pytest.mark.parametrize("size,offset", [(0.0, 0.0), (-1.0, 0.0), (10.0, 10.0)])
    def test_invalid_parameters(self, size: float, offset: float) -> None:
        with pytest.raises(ValueError):
            FixedWindows(size, offset)

    @given(timestamp=st.integers(min_value=-10**6, max_value=10**6))
    def test_window_contains_timestamp(self, timestamp: int) -> None:
        (window,) = assign(FixedWindows(60.0), float(timestamp))
        assert isinstance(window, IntervalWindow)
        assert window.contains(float(timestamp))


class TestSlidingWindows:
    def test_each_timestamp_in_size_over_period_windows(self) -> None:
        windows = assign(SlidingWindows(size=10.0, period=5.0), 12.0)
        assert windows == {IntervalWindow(5.0, 15.0), IntervalWindow(10.0, 20.0)}

    def test_invalid_period(self) -> None:
        with pytest.raises(ValueError):
            SlidingWindows(size=10.0, period=0.0)

    @given(timestamp=st.integers(min_value=-10**6, max_value=10**6))
    def test_all_windows_contain_timestamp(self, timestamp: int) -> None:
        windows = assign(SlidingWindows(size=60.0, period=20.0), float(timestamp))
        assert len(windows) == 3
        assert all(w.contains(float(timestamp)) for w in windows)  # type: ignore[attr-defined]
