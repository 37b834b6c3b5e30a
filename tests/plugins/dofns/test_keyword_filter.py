# tests/plugins/dofns/test_keyword_filter.py
"""Tests for KeywordFilter DoFn."""

import pytest

from sluice.contracts import UnknownTagError
from sluice.plugins.config_base import PluginConfigError
from sluice.plugins.dofns import BLOCKED, KeywordFilter
from sluice.testing import DoFnHarness


class TestKeywordFilterConfig:
    """Tests for KeywordFilterConfig validation."""

    def test_config_requires_blocked_patterns(self) -> None:
        with pytest.raises(PluginConfigError) as exc_info:
            KeywordFilter({})
        assert "blocked_patterns" in str(exc_info.value)

    def test_config_rejects_empty_patterns(self) -> None:
        with pytest.raises(PluginConfigError, match="cannot be empty"):
            KeywordFilter({"blocked_patterns": []})

    def test_invalid_regex_fails_at_init(self) -> None:
        import re

        with pytest.raises(re.error):
            KeywordFilter({"blocked_patterns": ["(unclosed"]})


class TestKeywordFilter:
    """Matching elements go to BLOCKED, others to the main output."""

    def test_routes_matches_to_side_output(self) -> None:
        harness = DoFnHarness(
            KeywordFilter({"blocked_patterns": [r"\bpassword\b", "(?i)confidential"]}),
            side_outputs=[BLOCKED],
        )

        harness.process_values(["hello", "my password is x", "CONFIDENTIAL memo", "passwords"])

        assert harness.outputs() == ["hello", "passwords"]
        assert harness.outputs(BLOCKED) == ["my password is x", "CONFIDENTIAL memo"]
        assert harness.aggregator_values() == {"blocked": 2}

    def test_scans_configured_field(self) -> None:
        harness = DoFnHarness(
            KeywordFilter({"blocked_patterns": ["secret"], "field": "body"}),
            side_outputs=[BLOCKED],
        )

        harness.process_values([{"title": "secret", "body": "fine"}, {"title": "x", "body": "top secret"}])

        assert harness.outputs() == [{"title": "secret", "body": "fine"}]
        assert harness.outputs(BLOCKED) == [{"title": "x", "body": "top secret"}]

    def test_side_output_must_be_declared(self) -> None:
        harness = DoFnHarness(KeywordFilter({"blocked_patterns": ["x"]}))

        with pytest.raises(UnknownTagError):
            harness.process_values(["x"])
