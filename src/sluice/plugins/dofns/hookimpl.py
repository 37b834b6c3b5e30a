"""Hook implementation for built-in DoFns."""

from typing import Any

from sluice.plugins.hookspecs import hookimpl


class SluiceBuiltinDoFns:
    """Hook implementer for built-in DoFns."""

    @hookimpl
    def sluice_get_dofns(self) -> list[type[Any]]:
        """Return built-in DoFn classes."""
        from sluice.plugins.dofns.count_per_bundle import CountPerBundle
        from sluice.plugins.dofns.keyed_counter import KeyedCounter
        from sluice.plugins.dofns.keyword_filter import KeywordFilter
        from sluice.plugins.dofns.passthrough import PassThrough
        from sluice.plugins.dofns.timestamp_shift import TimestampShift
        from sluice.plugins.dofns.window_tagger import WindowTagger

        return [
            PassThrough,
            KeywordFilter,
            TimestampShift,
            WindowTagger,
            KeyedCounter,
            CountPerBundle,
        ]


# Singleton instance for registration
builtin_dofns = SluiceBuiltinDoFns()
