"""DoFnRunner: runs bundles against one long-lived DoFn instance.

The runner owns the instance for its whole life: setup() before the first
bundle, a fresh BundleLifecycle per bundle, teardown() at close. The DoFn's
aggregators live on the instance, so they accumulate across bundles, and so
does the set of side output tags counted against max_side_output_tags.
"""

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from sluice.aggregators import AggregatorBackend
from sluice.contracts import OutputTag, Record
from sluice.core.config import RuntimeSettings
from sluice.core.logging import get_logger
from sluice.dofn import DoFn
from sluice.execution.binding import TransformBinding
from sluice.execution.extras import KeyedStateStore
from sluice.execution.lifecycle import BundleLifecycle, ExtrasFactory
from sluice.execution.side_inputs import SideInputReader
from sluice.execution.sinks import OutputSink
from sluice.signature import DoFnSignature

logger = get_logger(__name__)


class DoFnRunner:
    """Runs bundles of records through one DoFn instance.

    Example:
        runner = DoFnRunner(SplitWords(), binding, {MAIN_OUTPUT: sink})
        runner.run_bundle(records_a)
        runner.run_bundle(records_b)
        runner.close()
    """

    def __init__(
        self,
        dofn: DoFn,
        binding: TransformBinding,
        sinks: Mapping[OutputTag[Any], OutputSink],
        *,
        settings: RuntimeSettings | None = None,
        signature: DoFnSignature | None = None,
        side_input_reader: SideInputReader | None = None,
        state_store: KeyedStateStore | None = None,
        extras_factory: ExtrasFactory | None = None,
        aggregator_backend: AggregatorBackend | None = None,
    ) -> None:
        self._dofn = dofn
        self._binding = binding
        self._sinks = sinks
        self._settings = settings or RuntimeSettings()
        self._signature = signature if signature is not None else DoFnSignature.resolve(type(dofn))
        self._side_inputs = side_input_reader
        self._state_store = state_store
        self._extras_factory = extras_factory
        self._set_up = False
        self._closed = False
        self._bundles = 0
        # Side output tags count against the limit for the instance lifetime
        self._used_tags: set[OutputTag[Any]] = set()
        if aggregator_backend is not None:
            dofn.aggregators.attach_backend(aggregator_backend)

    @property
    def dofn(self) -> DoFn:
        return self._dofn

    @property
    def bundles_run(self) -> int:
        return self._bundles

    def new_bundle(self) -> BundleLifecycle:
        """Create the lifecycle for the next bundle (not yet started)."""
        if self._closed:
            raise RuntimeError("DoFnRunner is closed")
        if not self._set_up:
            self._dofn.setup()
            self._set_up = True
        self._bundles += 1
        return BundleLifecycle(
            self._dofn,
            self._binding,
            self._sinks,
            signature=self._signature,
            side_input_reader=self._side_inputs,
            state_store=self._state_store,
            extras_factory=self._extras_factory,
            max_side_output_tags=self._settings.max_side_output_tags,
            used_tags=self._used_tags,
            bundle_id=uuid.uuid4().hex[:12],
        )

    def run_bundle(self, records: Iterable[Record[Any]]) -> BundleLifecycle:
        """Run start, every record, finish. Exceptions propagate unchanged.

        Returns:
            The finished lifecycle, for its counts.
        """
        lifecycle = self.new_bundle()
        lifecycle.start()
        for record in records:
            lifecycle.process_element(record)
        lifecycle.finish()
        return lifecycle

    def close(self) -> None:
        """Call teardown() once, if setup() ran."""
        if self._closed:
            return
        self._closed = True
        if self._set_up:
            self._dofn.teardown()
            logger.debug(
                "DoFn torn down",
                dofn=getattr(self._dofn, "name", type(self._dofn).__name__),
                bundles=self._bundles,
                aggregators=self._dofn.aggregators.values(),
            )

    def __enter__(self) -> "DoFnRunner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
