"""Shared contracts for cross-boundary data types.

Records, windows, tags, enums and the error taxonomy live here so that
every subsystem imports them from one place.

Import pattern:
    from sluice.contracts import Record, OutputTag, SkewViolationError
"""

from sluice.contracts.enums import BundlePhase, Capability, PaneTiming
from sluice.contracts.errors import (
    AmbiguousWindowError,
    ContextMisuseError,
    ContractViolationError,
    DuplicateNameError,
    InvalidSignatureError,
    LifecycleViolationError,
    NoKeyError,
    NotASideInputError,
    NullArgumentError,
    SkewViolationError,
    SluiceError,
    StaleContextError,
    TooManyOutputsError,
    UnknownTagError,
    UsageError,
)
from sluice.contracts.windows import (
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    TIMESTAMP_RESOLUTION,
    BoundedWindow,
    GlobalWindow,
    IntervalWindow,
    PaneInfo,
)
from sluice.contracts.records import (
    MAIN_OUTPUT,
    OutputTag,
    Record,
    SideInputView,
)

__all__ = [
    # enums
    "BundlePhase",
    "Capability",
    "PaneTiming",
    # errors
    "AmbiguousWindowError",
    "ContextMisuseError",
    "ContractViolationError",
    "DuplicateNameError",
    "InvalidSignatureError",
    "LifecycleViolationError",
    "NoKeyError",
    "NotASideInputError",
    "NullArgumentError",
    "SkewViolationError",
    "SluiceError",
    "StaleContextError",
    "TooManyOutputsError",
    "UnknownTagError",
    "UsageError",
    # windows
    "MAX_TIMESTAMP",
    "MIN_TIMESTAMP",
    "TIMESTAMP_RESOLUTION",
    "BoundedWindow",
    "GlobalWindow",
    "IntervalWindow",
    "PaneInfo",
    # records
    "MAIN_OUTPUT",
    "OutputTag",
    "Record",
    "SideInputView",
]
