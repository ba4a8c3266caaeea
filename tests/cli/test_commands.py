"""CLI command tests using Click CliRunner.

Strategy: patch get_components at each command module's import point with
components built on a temp store, so commands run end to end without
touching real config or the home directory.
"""

import os
from contextlib import ExitStack
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cli.config_models import JournalConfig
from cli.main import cli

COMMAND_MODULES = ("entries", "analyze", "stats", "text", "categories")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def components(store):
    from journal import AnalyticsAggregator, SentimentPipeline
    from journal.sentiment import SentimentScorer

    scorer = SentimentScorer()
    return {
        "config_model": JournalConfig(),
        "store": store,
        "scorer": scorer,
        "pipeline": SentimentPipeline(store, scorer),
        "aggregator": AnalyticsAggregator(store),
        "enrichment": None,
        "user_id": "local",
    }


@pytest.fixture
def invoke(runner, components, tmp_path):
    """Run the CLI against the temp components."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging:\n  level: WARNING\n")

    def _invoke(*args, **kwargs):
        with ExitStack() as stack:
            stack.enter_context(patch.dict(os.environ, {"REFLECT_CONFIG": str(config_path)}))
            for module in COMMAND_MODULES:
                stack.enter_context(
                    patch(f"cli.commands.{module}.get_components", return_value=components)
                )
            return runner.invoke(cli, list(args), **kwargs)

    return _invoke


class TestEntries:
    def test_add_scores_inline(self, invoke, store):
        result = invoke("entries", "add", "--title", "Good day", "I am very happy today!")
        assert result.exit_code == 0, result.output
        assert "Created:" in result.output
        assert "very_positive" in result.output

        [entry] = store.list_entries("local")
        assert entry.metadata.mood == "very_positive"

    def test_add_validation_error(self, invoke):
        result = invoke("entries", "add", "--title", "  ", "Some content")
        assert result.exit_code == 1
        assert "Title is required" in result.output

    def test_add_empty_editor_cancels(self, invoke, store):
        with patch("cli.commands.entries.click.edit", return_value=None):
            result = invoke("entries", "add", "--title", "Draft")
        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert store.list_entries("local") == []

    def test_list_empty(self, invoke):
        result = invoke("entries", "list")
        assert result.exit_code == 0
        assert "No entries found." in result.output

    def test_list(self, invoke, store):
        store.create_entry("local", "Morning pages", "Words words words.")
        result = invoke("entries", "list")
        assert result.exit_code == 0
        assert "Morning pages" in result.output

    def test_show(self, invoke, store):
        entry = store.create_entry("local", "Shown", "Body text here.")
        result = invoke("entries", "show", entry.id)
        assert result.exit_code == 0
        assert "Body text here." in result.output
        assert "3 words" in result.output

    def test_show_missing(self, invoke):
        result = invoke("entries", "show", "nope")
        assert result.exit_code == 1
        assert "Journal entry not found" in result.output

    def test_delete(self, invoke, store):
        entry = store.create_entry("local", "Gone", "Soon deleted.")
        result = invoke("entries", "delete", entry.id, "-y")
        assert result.exit_code == 0
        assert store.list_entries("local") == []

    def test_delete_declined(self, invoke, store):
        entry = store.create_entry("local", "Kept", "Stays.")
        result = invoke("entries", "delete", entry.id, input="n\n")
        assert "Cancelled." in result.output
        assert len(store.list_entries("local")) == 1


class TestAnalyze:
    def test_analyze_one(self, invoke, store):
        entry = store.create_entry("local", "Mixed", "I love this. I hate that!")
        result = invoke("analyze", entry.id)
        assert result.exit_code == 0, result.output
        assert "neutral" in result.output
        assert "Sentences" in result.output
        assert store.get_metadata(entry.id).mood == "neutral"

    def test_analyze_other_users_entry(self, invoke, store):
        entry = store.create_entry("someone-else", "Private", "Not yours.")
        result = invoke("analyze", entry.id)
        assert result.exit_code == 1
        assert store.get_metadata(entry.id).mood is None

    def test_analyze_all(self, invoke, store):
        store.create_entry("local", "A", "Happy.")
        store.create_entry("local", "B", "Sad.")
        result = invoke("analyze-all")
        assert result.exit_code == 0
        assert "Processed: 2" in result.output
        assert "Failed: 0" in result.output

    def test_analyze_all_missing(self, invoke, store, components):
        done = store.create_entry("local", "A", "Happy.")
        store.create_entry("local", "B", "Sad.")
        components["pipeline"].analyze(done.id)
        result = invoke("analyze-all", "--missing")
        assert "Processed: 1" in result.output
        assert "Skipped: 1" in result.output


class TestStats:
    def test_stats(self, invoke, store, components):
        entry = store.create_entry("local", "Counted", "one two three four")
        components["pipeline"].analyze(entry.id)
        result = invoke("stats", "-r", "week")
        assert result.exit_code == 0, result.output
        assert "Entries: 1" in result.output
        assert "Words: 4" in result.output
        assert "Current streak: 1 day(s)" in result.output

    def test_stats_busiest_period(self, invoke, store):
        yesterday = datetime.now() - timedelta(days=1)
        store.create_entry("local", "Early", "Coffee first.", created_at=yesterday.replace(hour=9))
        result = invoke("stats", "-r", "week")
        assert result.exit_code == 0, result.output
        assert "Most entries written in the morning" in result.output

    def test_stats_no_sentiment(self, invoke):
        result = invoke("stats")
        assert result.exit_code == 0
        assert "Entries: 0" in result.output
        assert "No analyzed entries" in result.output

    def test_stats_bad_range(self, invoke):
        result = invoke("stats", "-r", "decade")
        assert result.exit_code == 2

    def test_mood_empty(self, invoke):
        result = invoke("mood")
        assert "No entries found. Add journal entries to track mood." in result.output

    def test_mood(self, invoke, store, components):
        entry = store.create_entry("local", "Upbeat", "Wonderful.")
        components["pipeline"].analyze(entry.id)
        result = invoke("mood", "-r", "day")
        assert result.exit_code == 0
        assert "very_positive" in result.output
        assert "Analyzed: 1/1" in result.output


class TestText:
    def test_text_argument(self, invoke):
        result = invoke("text", "I'm feeling quite sad and disappointed today.")
        assert result.exit_code == 0, result.output
        assert "very_negative" in result.output
        assert "Themes:" in result.output

    def test_text_file(self, invoke, tmp_path):
        path = tmp_path / "note.txt"
        path.write_text("Breakfast was good this morning.")
        result = invoke("text", "--file", str(path))
        assert result.exit_code == 0
        assert "morning" in result.output

    def test_text_missing(self, invoke):
        result = invoke("text")
        assert result.exit_code == 1
        assert "Provide text" in result.output


class TestCategories:
    def test_add_and_list(self, invoke, store):
        result = invoke("categories", "add", "Work", "--color", "#3B82F6")
        assert result.exit_code == 0
        assert "Created:" in result.output

        parent = store.list_categories("local")[0]
        invoke("categories", "add", "Meetings", "--parent", parent.id)
        result = invoke("categories", "list")
        assert "Work" in result.output
        assert "Meetings" in result.output

    def test_list_empty(self, invoke):
        assert "No categories yet." in invoke("categories", "list").output

    def test_duplicate(self, invoke):
        invoke("categories", "add", "Work")
        result = invoke("categories", "add", "Work")
        assert result.exit_code == 1
        assert "already exists" in result.output


def test_invalid_config(runner, tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("analysis:\n  score_divisor: 0\n")
    with patch.dict(os.environ, {"REFLECT_CONFIG": str(config_path)}):
        result = runner.invoke(cli, ["entries", "list"])
    assert result.exit_code == 1
    assert "Config validation failed" in result.output
