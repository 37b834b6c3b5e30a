# tests/plugins/test_manager.py
"""Tests for DoFn manager."""

from typing import Any

import pytest

from sluice.contracts import Capability, InvalidSignatureError
from sluice.dofn import DoFn
from sluice.execution import ElementContext
from sluice.plugins.hookspecs import hookimpl
from sluice.signature import DoFnSignature, MethodSignature


class SplitWords(DoFn):
    name = "split_words"
    plugin_version = "2.1.0"
    allowed_timestamp_skew = 1.5

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        for word in ctx.element().split():
            ctx.emit(word)


class OtherSplitWords(SplitWords):
    pass


class BadSignature(DoFn):
    name = "bad_signature"
    signature = DoFnSignature(finish_bundle=MethodSignature(frozenset({Capability.WINDOW})))

    def process_element(self, ctx: ElementContext, **extras: Any) -> None:
        pass


class Provides:
    """Hook implementer returning a fixed list of DoFn classes."""

    def __init__(self, *dofns: type[DoFn]) -> None:
        self._dofns = list(dofns)

    @hookimpl
    def sluice_get_dofns(self) -> list[type[DoFn]]:
        return self._dofns


class TestDoFnManager:
    """DoFn discovery and registration."""

    def test_create_manager(self) -> None:
        from sluice.plugins.manager import DoFnManager

        assert DoFnManager().get_specs() == []

    def test_register_resolves_spec(self) -> None:
        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        manager.register(Provides(SplitWords))

        spec = manager.get_spec("split_words")
        assert spec is not None
        assert spec.version == "2.1.0"
        assert spec.dofn_cls is SplitWords
        assert spec.signature == DoFnSignature()

    def test_get_unknown_spec_returns_none(self) -> None:
        from sluice.plugins.manager import DoFnManager

        assert DoFnManager().get_spec("nope") is None

    def test_duplicate_name_rejected(self) -> None:
        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        manager.register(Provides(SplitWords))

        with pytest.raises(ValueError, match="Duplicate DoFn name: 'split_words'"):
            manager.register(Provides(OtherSplitWords))

        # Failed registration leaves the manager unchanged
        assert [s.dofn_cls for s in manager.get_specs()] == [SplitWords]

    def test_invalid_signature_rejected_at_registration(self) -> None:
        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        with pytest.raises(InvalidSignatureError, match="finish_bundle"):
            manager.register(Provides(BadSignature))
        assert manager.get_specs() == []

    def test_missing_name_rejected(self) -> None:
        from sluice.plugins.manager import DoFnManager

        class Nameless(DoFn):
            def process_element(self, ctx: ElementContext, **extras: Any) -> None:
                pass

        with pytest.raises(ValueError, match="must define 'name'"):
            DoFnManager().register(Provides(Nameless))

    def test_create_instance(self) -> None:
        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        manager.register(Provides(SplitWords))

        dofn = manager.create("split_words", {"allowed_timestamp_skew": 4})

        assert isinstance(dofn, SplitWords)
        assert dofn.get_allowed_timestamp_skew() == 4.0

    def test_skew_comes_from_instance_not_spec(self) -> None:
        """The class default applies only when config does not override it."""
        import dataclasses

        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        manager.register(Provides(SplitWords))

        spec = manager.get_spec("split_words")
        assert spec is not None
        assert "allowed_timestamp_skew" not in {f.name for f in dataclasses.fields(spec)}
        assert manager.create("split_words").get_allowed_timestamp_skew() == 1.5
        assert manager.create("split_words", {"allowed_timestamp_skew": 9}).get_allowed_timestamp_skew() == 9.0

    def test_create_unknown_raises(self) -> None:
        from sluice.plugins.manager import DoFnManager

        with pytest.raises(KeyError):
            DoFnManager().create("nope")


class TestBuiltinRegistration:
    def test_builtins_register(self) -> None:
        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        manager.register_builtin_dofns()

        names = {spec.name for spec in manager.get_specs()}
        assert names == {
            "passthrough",
            "keyword_filter",
            "timestamp_shift",
            "window_tagger",
            "keyed_counter",
            "count_per_bundle",
        }

    def test_builtin_signatures_resolved(self) -> None:
        from sluice.plugins.manager import DoFnManager

        manager = DoFnManager()
        manager.register_builtin_dofns()

        tagger = manager.get_spec("window_tagger")
        counter = manager.get_spec("keyed_counter")
        assert tagger is not None and tagger.signature.observes_window
        assert counter is not None and counter.signature.process_element.needs(Capability.KEYED_STATE)
