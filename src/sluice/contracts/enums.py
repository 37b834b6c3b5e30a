"""Phases, capabilities, and pane timings used across subsystem boundaries.

These are the canonical definitions - use them everywhere instead of strings.
"""

from enum import Enum


class BundlePhase(str, Enum):
    """Phase of a bundle's lifecycle.

    NOT_STARTED -> IN_BUNDLE -> FINISHED, with PROCESSING_ELEMENT entered and
    exited once per element while IN_BUNDLE. FAILED is terminal: it is entered
    when the DoFn raises and no further calls are accepted.

    Uses (str, Enum) so phases render directly in structured logs.
    """

    NOT_STARTED = "not_started"
    IN_BUNDLE = "in_bundle"
    PROCESSING_ELEMENT = "processing_element"
    FINISHED = "finished"
    FAILED = "failed"


class Capability(str, Enum):
    """Optional per-invocation capabilities a process method can request.

    The value is the keyword argument name the capability is passed under.
    """

    KEYED_STATE = "keyed_state"
    WINDOW = "window"
    WINDOWING_INTERNALS = "windowing_internals"


class PaneTiming(str, Enum):
    """When a pane fired relative to the watermark."""

    EARLY = "early"
    ON_TIME = "on_time"
    LATE = "late"
    UNKNOWN = "unknown"
