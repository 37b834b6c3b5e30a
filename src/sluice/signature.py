"""Declarative DoFn signatures.

A DoFn states up front which optional capabilities each lifecycle method
consumes. The runtime reads the declaration once, when the DoFn class is
registered, and never inspects method parameters at call time.

Example:
    class PerWindowCount(DoFn):
        name = "per_window_count"
        signature = DoFnSignature.for_process(Capability.WINDOW)

        def process_element(self, ctx, *, window):
            ctx.emit((window, 1))
"""

from dataclasses import dataclass, field
from typing import Any

from sluice.contracts import Capability, InvalidSignatureError


@dataclass(frozen=True)
class MethodSignature:
    """Capabilities one lifecycle method consumes."""

    requires: frozenset[Capability] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "requires", frozenset(self.requires))
        for capability in self.requires:
            if not isinstance(capability, Capability):
                raise InvalidSignatureError(
                    f"Unknown capability {capability!r}; expected a Capability member"
                )

    def needs(self, capability: Capability) -> bool:
        return capability in self.requires


@dataclass(frozen=True)
class DoFnSignature:
    """Per-phase capability declaration for a DoFn class."""

    start_bundle: MethodSignature = field(default_factory=MethodSignature)
    process_element: MethodSignature = field(default_factory=MethodSignature)
    finish_bundle: MethodSignature = field(default_factory=MethodSignature)

    @classmethod
    def for_process(cls, *capabilities: Capability) -> "DoFnSignature":
        """Signature whose process_element consumes the given capabilities."""
        return cls(process_element=MethodSignature(frozenset(capabilities)))

    @property
    def observes_window(self) -> bool:
        """True if process_element wants one invocation per window."""
        return self.process_element.needs(Capability.WINDOW)

    @classmethod
    def resolve(cls, dofn_cls: type[Any]) -> "DoFnSignature":
        """Read and validate the signature declared on a DoFn class.

        Raises:
            InvalidSignatureError: If the declaration is not a DoFnSignature,
                if start_bundle/finish_bundle request capabilities (they have
                no element to scope them to), or if process_element is not
                implemented.
        """
        signature = getattr(dofn_cls, "signature", None)
        if signature is None:
            signature = cls()
        if not isinstance(signature, DoFnSignature):
            raise InvalidSignatureError(
                f"{dofn_cls.__name__}.signature must be a DoFnSignature, "
                f"got {type(signature).__name__}"
            )

        for phase in ("start_bundle", "finish_bundle"):
            method_sig: MethodSignature = getattr(signature, phase)
            if method_sig.requires:
                names = sorted(c.value for c in method_sig.requires)
                raise InvalidSignatureError(
                    f"{dofn_cls.__name__}.{phase} cannot request {names}: "
                    "bundle methods only receive a bundle context"
                )

        abstract = getattr(dofn_cls, "__abstractmethods__", frozenset())
        if "process_element" in abstract or not callable(
            getattr(dofn_cls, "process_element", None)
        ):
            raise InvalidSignatureError(
                f"{dofn_cls.__name__} must implement process_element()"
            )
        return signature
