"""Plugin system: DoFns registered via pluggy.

- Config base classes: Pydantic models for DoFn configuration
- Hookspecs: pluggy hook definitions
- Manager: DoFn discovery, registration and signature resolution
- dofns: built-in DoFns
"""

from sluice.plugins.config_base import DoFnConfig, PluginConfig, PluginConfigError
from sluice.plugins.hookspecs import hookimpl, hookspec
from sluice.plugins.manager import DoFnManager, DoFnSpec

__all__ = [
    # Config base classes
    "DoFnConfig",
    "PluginConfig",
    "PluginConfigError",
    # Manager
    "DoFnManager",
    "DoFnSpec",
    # Hookspecs
    "hookimpl",
    "hookspec",
]
