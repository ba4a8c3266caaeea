"""Shared test fixtures for the reflect journal."""

import sys
from datetime import datetime
from pathlib import Path
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def store(tmp_path):
    """Fresh sqlite-backed store per test."""
    from journal.store import JournalStore

    return JournalStore(tmp_path / "journal.db")


@pytest.fixture
def user_id(store):
    store.ensure_user("user-1", email="one@example.com", name="One")
    return "user-1"


@pytest.fixture
def make_entry(store, user_id):
    """Create entries with explicit timestamps: make_entry(content, created_at=...)."""

    def _make(content="Plain words here.", created_at=None, title="Entry", user=None, **kwargs):
        return store.create_entry(
            user or user_id,
            title,
            content,
            created_at=created_at,
            **kwargs,
        )

    return _make


@pytest.fixture
def now():
    """Fixed clock for analytics: Wednesday 2024-05-15 18:00."""
    return datetime(2024, 5, 15, 18, 0, 0)


@pytest.fixture
def mock_provider():
    """LLMProvider double. Set .reply (str or callable(system, prompt)) or .error per test."""
    from llm import LLMProvider

    class ScriptedProvider(LLMProvider):
        provider_name = "mock"

        def __init__(self):
            self.reply = ""
            self.error = None
            self.calls = []

        def generate(self, messages, system=None, max_tokens=500):
            prompt = messages[-1]["content"]
            self.calls.append({"system": system, "prompt": prompt, "max_tokens": max_tokens})
            if self.error is not None:
                raise self.error
            return self.reply(system, prompt) if callable(self.reply) else self.reply

    return ScriptedProvider()


@pytest.fixture
def reset_metrics():
    from observability import metrics

    metrics.reset()
    yield metrics
    metrics.reset()
