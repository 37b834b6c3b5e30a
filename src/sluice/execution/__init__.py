"""Execution: bundle lifecycle, contexts, output routing and extras."""

from sluice.execution.binding import TransformBinding, key_of_pair
from sluice.execution.context import BundleContext, ProcessContext
from sluice.execution.extras import (
    ExtraContextFactory,
    ExtraContextProvider,
    InMemoryKeyedStateStore,
    KeyedState,
    KeyedStateStore,
    WindowingInternals,
)
from sluice.execution.lifecycle import BundleLifecycle
from sluice.execution.protocols import ElementContext, OutputContext
from sluice.execution.router import OutputRouter
from sluice.execution.runner import DoFnRunner
from sluice.execution.side_inputs import InMemorySideInputReader, SideInputReader
from sluice.execution.sinks import CollectingSink, OutputSink

__all__ = [
    "BundleContext",
    "BundleLifecycle",
    "CollectingSink",
    "DoFnRunner",
    "ElementContext",
    "ExtraContextFactory",
    "ExtraContextProvider",
    "InMemoryKeyedStateStore",
    "InMemorySideInputReader",
    "KeyedState",
    "KeyedStateStore",
    "OutputContext",
    "OutputRouter",
    "OutputSink",
    "ProcessContext",
    "SideInputReader",
    "TransformBinding",
    "WindowingInternals",
    "key_of_pair",
]
