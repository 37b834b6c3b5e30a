"""pluggy hook specifications for sluice DoFn plugins.

Plugins implement these hooks to make DoFn classes available by name.
The DoFnManager calls them when a hook implementer is registered.

Usage (implementing a plugin):
    from sluice.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def sluice_get_dofns(self):
            return [SplitWords, CountWords]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from sluice.dofn import DoFn

# Project name for pluggy
PROJECT_NAME = "sluice"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for plugins to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class SluiceDoFnSpec:
    """Hook specifications for DoFn plugins."""

    @hookspec
    def sluice_get_dofns(self) -> list[type["DoFn"]]:  # type: ignore[empty-body]
        """Return DoFn classes.

        Returns:
            List of DoFn classes (not instances)
        """
