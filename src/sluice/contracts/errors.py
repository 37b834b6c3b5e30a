"""Error taxonomy for the element-processing runtime.

Two families, both fatal to the call that detected them:

- UsageError: a caller or collaborator misused the runtime (wrong phase,
  stale context, undeclared tag or side input, missing key, ...).
- ContractViolationError: the DoFn broke a documented contract (timestamp
  skew, side output cardinality, element access from bundle scope).

Nothing here is retried or recovered internally. Output already forwarded
before a failure is NOT rolled back - delivery semantics belong to the sink.
"""

from typing import Any


class SluiceError(Exception):
    """Base class for all runtime errors raised by sluice."""


class UsageError(SluiceError):
    """A caller or collaborator misused the runtime."""


class ContractViolationError(SluiceError):
    """The DoFn violated a documented execution contract."""


# === Usage errors ===


class LifecycleViolationError(UsageError):
    """Raised when a bundle lifecycle call arrives in the wrong phase."""

    def __init__(self, operation: str, phase: Any) -> None:
        self.operation = operation
        self.phase = phase
        super().__init__(
            f"Cannot call {operation}() while bundle is in phase '{getattr(phase, 'value', phase)}'"
        )


class StaleContextError(UsageError):
    """Raised when a context is used after its invocation returned."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"Context used for {operation}() after its invocation completed. "
            "Contexts must not be retained beyond the call they were passed to."
        )


class UnknownTagError(UsageError):
    """Raised when emitting to an output tag the transform did not declare."""

    def __init__(self, tag: Any, declared: Any) -> None:
        self.tag = tag
        self.declared = declared
        super().__init__(f"Output tag {tag!r} was not declared for this transform")


class NotASideInputError(UsageError):
    """Raised when reading a view that is not a declared side input."""

    def __init__(self, view: Any) -> None:
        self.view = view
        super().__init__(f"{view!r} is not a side input of this transform")


class NoKeyError(UsageError):
    """Raised when keyed state is requested by a transform that is not keyed."""

    def __init__(self) -> None:
        super().__init__("Keyed state requested but the transform is not keyed")


class AmbiguousWindowError(UsageError):
    """Raised when a single window is requested for a multi-window record.

    Never resolved by picking a window: request the WINDOW capability to get
    per-window invocation instead.
    """

    def __init__(self, windows: Any) -> None:
        self.windows = windows
        super().__init__(
            f"Record is in {len(windows)} windows; a single window is ambiguous. "
            "Declare Capability.WINDOW to process one window at a time."
        )


class DuplicateNameError(UsageError, ValueError):
    """Raised when an aggregator name is already registered on the instance."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Cannot create aggregator with name '{name}'. "
            "An aggregator with that name already exists within this scope."
        )


class NullArgumentError(UsageError, TypeError):
    """Raised when a required argument is None."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"{argument} cannot be None")


class InvalidSignatureError(UsageError):
    """Raised at registration when a DoFn's declared signature is invalid."""


# === Contract violations ===


class SkewViolationError(ContractViolationError):
    """Raised when an output timestamp is older than input timestamp minus skew."""

    def __init__(self, timestamp: float, input_timestamp: float, skew: float) -> None:
        self.timestamp = timestamp
        self.input_timestamp = input_timestamp
        self.skew = skew
        super().__init__(
            f"Cannot output with timestamp {timestamp}. Output timestamps must be "
            f"no earlier than the timestamp of the current input ({input_timestamp}) "
            f"minus the allowed skew ({skew}s)."
        )


class TooManyOutputsError(ContractViolationError):
    """Raised when a transform uses more side output tags than allowed."""

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"Transform uses {count} side output tags; the limit is {limit}"
        )


class ContextMisuseError(ContractViolationError):
    """Raised when element data is read where no element exists.

    Typical cause: a window function reading the element while assigning
    windows for output from start_bundle/finish_bundle.
    """
