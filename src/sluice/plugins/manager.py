"""DoFn manager for discovery, registration and signature resolution.

Uses pluggy for hook-based plugin registration. Each DoFn class's declared
signature is resolved and validated here, once, when it is registered;
nothing is inspected again at execution time.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pluggy

from sluice.core.logging import get_logger
from sluice.plugins.hookspecs import PROJECT_NAME, SluiceDoFnSpec
from sluice.signature import DoFnSignature

if TYPE_CHECKING:
    from sluice.dofn import DoFn

logger = get_logger(__name__)


@dataclass(frozen=True)
class DoFnSpec:
    """Registration record for a DoFn class.

    Frozen for immutability - specs shouldn't change after registration.
    """

    name: str
    version: str
    signature: DoFnSignature
    dofn_cls: type["DoFn"]

    @classmethod
    def from_dofn(cls, dofn_cls: type["DoFn"]) -> "DoFnSpec":
        """Create spec from a DoFn class, resolving its signature.

        Raises:
            ValueError: If the class is missing its 'name' attribute
            InvalidSignatureError: If the declared signature is invalid
        """
        try:
            name = dofn_cls.name
        except AttributeError:
            raise ValueError(
                f"DoFn {dofn_cls.__name__} must define 'name' attribute. "
                f"Add: name = 'your_dofn_name' to the class."
            ) from None

        return cls(
            name=name,
            version=dofn_cls.plugin_version,
            signature=DoFnSignature.resolve(dofn_cls),
            dofn_cls=dofn_cls,
        )


class DoFnManager:
    """Manages DoFn discovery, registration and lookup.

    Usage:
        manager = DoFnManager()
        manager.register_builtin_dofns()
        manager.register(MyPlugin())

        spec = manager.get_spec("split_words")
        dofn = manager.create("split_words", {"allowed_timestamp_skew": 5})
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SluiceDoFnSpec)
        self._specs: dict[str, DoFnSpec] = {}

    def register_builtin_dofns(self) -> None:
        """Register the built-in DoFn hook implementer."""
        from sluice.plugins.dofns.hookimpl import builtin_dofns

        self.register(builtin_dofns)

    def register(self, plugin: Any) -> None:
        """Register a hook implementer and resolve the DoFns it provides.

        If resolution fails, the implementer is unregistered again so the
        manager stays consistent.

        Raises:
            ValueError: On duplicate DoFn names or missing 'name'
            InvalidSignatureError: If a DoFn declares an invalid signature
        """
        self._pm.register(plugin)
        try:
            self._refresh_specs()
        except Exception:
            self._pm.unregister(plugin)
            raise

    def _refresh_specs(self) -> None:
        new_specs: dict[str, DoFnSpec] = {}
        for dofns in self._pm.hook.sluice_get_dofns():
            for dofn_cls in dofns:
                spec = DoFnSpec.from_dofn(dofn_cls)
                if spec.name in new_specs:
                    raise ValueError(
                        f"Duplicate DoFn name: '{spec.name}'. "
                        f"Already registered by {new_specs[spec.name].dofn_cls.__name__}"
                    )
                new_specs[spec.name] = spec

        # All validated, update cache
        self._specs = new_specs
        logger.debug("DoFn registry refreshed", dofns=sorted(new_specs))

    # === Lookup ===

    def get_specs(self) -> list[DoFnSpec]:
        """Get all registered DoFn specs."""
        return list(self._specs.values())

    def get_spec(self, name: str) -> DoFnSpec | None:
        """Get DoFn spec by name."""
        return self._specs.get(name)

    def create(self, name: str, config: dict[str, Any] | None = None) -> "DoFn":
        """Instantiate a registered DoFn.

        Raises:
            KeyError: If no DoFn is registered under name
            PluginConfigError: If config is invalid for the DoFn
        """
        spec = self._specs.get(name)
        if spec is None:
            raise KeyError(f"No DoFn registered with name '{name}'")
        return spec.dofn_cls(config)
