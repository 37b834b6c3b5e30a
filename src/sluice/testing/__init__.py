"""Helpers for testing DoFns in-process."""

from sluice.testing.harness import DoFnHarness

__all__ = ["DoFnHarness"]
