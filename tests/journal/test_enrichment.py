"""Tests for the optional LLM enrichment layer."""

import pytest

from cli.config_models import EnrichmentConfig
from journal.enrichment import LLMEnrichment
from journal.errors import ServiceUnavailableError
from llm import LLMAuthError, LLMError, LLMRateLimitError


@pytest.fixture
def enrichment(mock_provider):
    return LLMEnrichment(mock_provider, max_attempts=1)


class TestClassifyThemes:
    def test_filters_to_known_labels(self, enrichment, mock_provider):
        mock_provider.reply = "Work, gardening, Health.\nwork"
        assert enrichment.classify_themes("Long day at the office") == ["work", "health"]

    def test_prompt_lists_labels(self, mock_provider):
        mock_provider.reply = "travel"
        enrichment = LLMEnrichment(mock_provider, max_attempts=1, labels=("travel", "food"))
        assert enrichment.classify_themes("Trip to Rome") == ["travel"]
        assert "travel, food" in mock_provider.calls[0]["prompt"]

    def test_nothing_matches(self, enrichment, mock_provider):
        mock_provider.reply = "astronomy"
        assert enrichment.classify_themes("Stars") == []


class TestCorrectGrammar:
    def test_returns_correction(self, enrichment, mock_provider):
        mock_provider.reply = "  I go to work.  "
        assert enrichment.correct_grammar("I goes to work") == "I go to work."

    def test_blank_reply_keeps_sentence(self, enrichment, mock_provider):
        mock_provider.reply = "   "
        assert enrichment.correct_grammar("Fine as is") == "Fine as is"


class TestGenerateCompletion:
    def test_splits_lines(self, enrichment, mock_provider):
        mock_provider.reply = "- Then I rested.\n\n* Tomorrow looks better\nThird\nFourth"
        assert enrichment.generate_completion("Today was long.") == [
            "Then I rested.",
            "Tomorrow looks better",
            "Third",
        ]

    def test_count(self, enrichment, mock_provider):
        mock_provider.reply = "a\nb\nc"
        assert enrichment.generate_completion("text", count=1) == ["a"]
        assert "1" in mock_provider.calls[0]["system"]


class TestFailures:
    def test_provider_error_becomes_service_unavailable(self, enrichment, mock_provider, reset_metrics):
        mock_provider.error = LLMError("down")
        with pytest.raises(ServiceUnavailableError) as exc:
            enrichment.classify_themes("text")
        assert exc.value.status_code == 503
        assert reset_metrics.get("enrichment.unavailable") == 1

    def test_transient_error_is_retried(self, mock_provider):
        attempts = []

        def flaky(system, prompt):
            attempts.append(prompt)
            if len(attempts) == 1:
                raise LLMRateLimitError("slow down")
            return "family"

        mock_provider.reply = flaky
        enrichment = LLMEnrichment(mock_provider, max_attempts=2)
        assert enrichment.classify_themes("Dinner with my sister") == ["family"]
        assert len(attempts) == 2

    def test_auth_error_is_not_retried(self, mock_provider):
        mock_provider.error = LLMAuthError("bad key")
        enrichment = LLMEnrichment(mock_provider, max_attempts=3)
        with pytest.raises(ServiceUnavailableError):
            enrichment.correct_grammar("text")
        assert len(mock_provider.calls) == 1


class TestFromConfig:
    def test_disabled(self):
        assert LLMEnrichment.from_config(EnrichmentConfig()) is None

    def test_no_key_available(self, monkeypatch):
        for var in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GOOGLE_API_KEY"):
            monkeypatch.delenv(var, raising=False)
        assert LLMEnrichment.from_config(EnrichmentConfig(enabled=True)) is None

    def test_enabled(self):
        config = EnrichmentConfig(enabled=True, provider="claude", api_key="sk-ant-test", max_attempts=4)
        enrichment = LLMEnrichment.from_config(config)
        assert enrichment.provider.provider_name == "claude"
