"""Built-in DoFns.

Each DoFn processes one element at a time through an ElementContext and
emits to the main output or to declared side outputs.
"""

from sluice.plugins.dofns.count_per_bundle import CountPerBundle
from sluice.plugins.dofns.keyed_counter import KeyedCounter
from sluice.plugins.dofns.keyword_filter import BLOCKED, KeywordFilter
from sluice.plugins.dofns.passthrough import PassThrough
from sluice.plugins.dofns.timestamp_shift import TimestampShift
from sluice.plugins.dofns.window_tagger import WindowTagger

__all__ = [
    "BLOCKED",
    "CountPerBundle",
    "KeyedCounter",
    "KeywordFilter",
    "PassThrough",
    "TimestampShift",
    "WindowTagger",
]
