"""BundleLifecycle: drives one DoFn instance through one bundle.

States:

    NOT_STARTED --start()--> IN_BUNDLE --finish()--> FINISHED
                                 |   ^
                process_element()|   |returns
                                 v   |
                          PROCESSING_ELEMENT

Any exception escaping the DoFn (including an interruption raised into the
call by the scheduler) moves the bundle to FAILED and is re-raised
unchanged. A FAILED bundle accepts no further calls; retry policy belongs to
the scheduler.

Exactly one context is live at any moment: a bundle-scope context during
start/finish, a per-element context during process_element. Each is torn
down when the DoFn method returns, whether or not it raised.

Calls into the lifecycle are strictly sequential. There is no locking; a
re-entrant call made from inside a DoFn method is rejected as a lifecycle
violation.
"""

from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sluice.contracts import (
    BundlePhase,
    LifecycleViolationError,
    OutputTag,
    Record,
)
from sluice.core.config import format_skew
from sluice.core.logging import get_logger
from sluice.dofn import DoFn
from sluice.execution.binding import TransformBinding
from sluice.execution.context import BundleContext, ProcessContext
from sluice.execution.extras import (
    ExtraContextFactory,
    ExtraContextProvider,
    KeyedStateStore,
)
from sluice.execution.router import OutputRouter
from sluice.execution.side_inputs import SideInputReader
from sluice.execution.sinks import OutputSink
from sluice.signature import DoFnSignature
from sluice.windowing import WindowAssigner

logger = get_logger(__name__)

# Builds the extra-context factory for one invocation: (record, router) -> factory
ExtrasFactory = Callable[[Record[Any], OutputRouter], ExtraContextFactory]


class BundleLifecycle:
    """Phase state machine for one bundle of one DoFn instance.

    Example:
        lifecycle = BundleLifecycle(dofn, binding, sinks)
        lifecycle.start()
        for record in bundle:
            lifecycle.process_element(record)
        lifecycle.finish()
    """

    def __init__(
        self,
        dofn: DoFn,
        binding: TransformBinding,
        sinks: Mapping[OutputTag[Any], OutputSink],
        *,
        signature: DoFnSignature | None = None,
        side_input_reader: SideInputReader | None = None,
        state_store: KeyedStateStore | None = None,
        extras_factory: ExtrasFactory | None = None,
        max_side_output_tags: int | None = None,
        used_tags: set[OutputTag[Any]] | None = None,
        bundle_id: str | None = None,
    ) -> None:
        """Initialize lifecycle.

        Args:
            dofn: DoFn instance to drive
            binding: Declared outputs, side inputs and keying
            sinks: Sink per output tag; must cover every declared tag
            signature: Resolved signature, resolved from the DoFn class if None
            side_input_reader: Required if the binding declares side inputs
            state_store: Keyed-state backend for keyed transforms
            extras_factory: Override for building per-invocation capabilities
            max_side_output_tags: Emit-time side output limit, defaults to
                the binding's limit
            used_tags: Distinct side output tags the DoFn instance has used so
                far. Pass the same set to every bundle of one instance so the
                limit spans bundles; a fresh set is used if None.
            bundle_id: Identifier used in log events

        Raises:
            ValueError: If a declared output tag has no sink, or side inputs
                are declared without a reader.
        """
        missing = [tag for tag in binding.output_tags if tag not in sinks]
        if missing:
            raise ValueError(
                f"No sink provided for output tags: {sorted(t.id for t in missing)}"
            )
        if binding.side_inputs and side_input_reader is None:
            raise ValueError("Binding declares side inputs but no SideInputReader was provided")

        self._dofn = dofn
        self._binding = binding
        self._sinks = sinks
        self._signature = signature if signature is not None else DoFnSignature.resolve(type(dofn))
        self._side_inputs = side_input_reader
        self._state_store = state_store
        self._extras_factory = extras_factory or self._default_extras
        self._max_tags = max_side_output_tags
        self._assigner = WindowAssigner(binding.window_fn)
        self._skew = dofn.get_allowed_timestamp_skew()
        self._options = dofn.config.options()

        self._phase = BundlePhase.NOT_STARTED
        self._in_call = False
        self._used_tags: set[OutputTag[Any]] = used_tags if used_tags is not None else set()
        self._emitted: Counter[str] = Counter()
        self._elements = 0
        self._log = logger.bind(dofn=getattr(dofn, "name", type(dofn).__name__), bundle_id=bundle_id)

    # === State ===

    @property
    def phase(self) -> BundlePhase:
        return self._phase

    @property
    def elements_processed(self) -> int:
        return self._elements

    def emitted_counts(self) -> dict[str, int]:
        """Records forwarded during this bundle, keyed by tag id."""
        return dict(self._emitted)

    # === Transitions ===

    def start(self) -> None:
        """NOT_STARTED -> IN_BUNDLE, running start_bundle with a bundle context.

        Raises:
            LifecycleViolationError: If the bundle was already started.
        """
        self._require("start", BundlePhase.NOT_STARTED)
        self._phase = BundlePhase.IN_BUNDLE
        self._log.debug("Bundle started", skew=format_skew(self._skew))
        self._run_bundle_method("start_bundle", self._dofn.start_bundle)

    def process_element(self, record: Record[Any]) -> None:
        """Invoke process_element for record, once per window if requested.

        Raises:
            LifecycleViolationError: If the bundle is not IN_BUNDLE.
        """
        self._require("process_element", BundlePhase.IN_BUNDLE)
        invocations: Iterable[Record[Any]] = (
            record.explode() if self._signature.observes_window else (record,)
        )
        for single in invocations:
            self._invoke(single)
        self._elements += 1

    def finish(self) -> None:
        """IN_BUNDLE -> FINISHED, running finish_bundle with a bundle context.

        Raises:
            LifecycleViolationError: If the bundle is not IN_BUNDLE.
        """
        self._require("finish", BundlePhase.IN_BUNDLE)
        self._run_bundle_method("finish_bundle", self._dofn.finish_bundle)
        self._phase = BundlePhase.FINISHED
        self._log.info(
            "Bundle finished",
            elements=self._elements,
            emitted=dict(self._emitted),
        )

    # === Internals ===

    def _require(self, operation: str, expected: BundlePhase) -> None:
        if self._in_call or self._phase != expected:
            raise LifecycleViolationError(operation, self._phase)

    def _router(self, record: Record[Any] | None) -> OutputRouter:
        return OutputRouter(
            self._binding,
            self._sinks,
            self._assigner,
            skew=self._skew,
            input_record=record,
            used_tags=self._used_tags,
            max_side_output_tags=self._max_tags,
        )

    def _run_bundle_method(self, method_name: str, method: Callable[[BundleContext], None]) -> None:
        router = self._router(None)
        ctx = BundleContext(router, self._options)
        self._in_call = True
        try:
            method(ctx)
        except BaseException as e:
            self._fail(method_name, e)
            raise
        finally:
            self._in_call = False
            ctx.close()
            self._emitted.update(router.emitted_counts())

    def _invoke(self, record: Record[Any]) -> None:
        router = self._router(record)
        ctx = ProcessContext(
            record,
            router,
            self._binding,
            side_input_reader=self._side_inputs,
            options=self._options,
        )
        self._phase = BundlePhase.PROCESSING_ELEMENT
        self._in_call = True
        try:
            extras = self._resolve_extras(record, router)
            self._dofn.process_element(ctx, **extras)
        except BaseException as e:
            self._fail("process_element", e, element_timestamp=record.timestamp)
            raise
        finally:
            self._in_call = False
            ctx.close()
            self._emitted.update(router.emitted_counts())
        self._phase = BundlePhase.IN_BUNDLE

    def _resolve_extras(self, record: Record[Any], router: OutputRouter) -> dict[str, Any]:
        """Query each required capability exactly once."""
        required = self._signature.process_element.requires
        if not required:
            return {}
        factory = self._extras_factory(record, router)
        return {
            capability.value: getattr(factory, capability.value)()
            for capability in sorted(required, key=lambda c: c.value)
        }

    def _default_extras(self, record: Record[Any], router: OutputRouter) -> ExtraContextFactory:
        return ExtraContextProvider(record, self._binding, router, self._state_store)

    def _fail(self, method_name: str, error: BaseException, **details: Any) -> None:
        self._phase = BundlePhase.FAILED
        self._log.warning(
            "Bundle failed",
            method=method_name,
            error=str(error),
            error_type=type(error).__name__,
            elements=self._elements,
            **details,
        )
