"""Tests for the sentiment pipeline and the background analysis queue."""

from unittest.mock import MagicMock

import pytest

from journal.errors import DatabaseError, NotFoundError
from journal.pipeline import AnalysisQueue, SentimentPipeline
from journal.store import EntryMetadata
from shared_types import Mood


@pytest.fixture
def pipeline(store):
    return SentimentPipeline(store)


class TestSentimentPipeline:
    def test_analyze_persists_metadata(self, store, make_entry, pipeline):
        entry = make_entry("I am very happy and excited about this project!")
        result = pipeline.analyze(entry.id)

        assert result.mood == Mood.VERY_POSITIVE
        meta = store.get_metadata(entry.id)
        assert meta.sentiment_score == pytest.approx(result.score)
        assert meta.sentiment_magnitude == pytest.approx(6.0)
        assert meta.mood == "very_positive"
        assert meta.word_count == 9

    def test_returns_sentences_without_storing_them(self, make_entry, pipeline):
        entry = make_entry("Good day. Bad night.")
        result = pipeline.analyze(entry.id)
        assert len(result.sentences) == 2

    def test_idempotent(self, store, make_entry, pipeline):
        entry = make_entry("Sad and disappointed.")
        pipeline.analyze(entry.id)
        first = store.get_metadata(entry.id)
        pipeline.analyze(entry.id)
        assert store.get_metadata(entry.id) == first

    def test_reanalyze_after_edit(self, store, make_entry, pipeline):
        entry = make_entry("A wonderful time.")
        pipeline.analyze(entry.id)
        store.update_entry(entry.id, "user-1", content="I hate this.")
        pipeline.analyze(entry.id)
        assert store.get_metadata(entry.id).mood == "very_negative"

    def test_missing_entry(self, pipeline, reset_metrics):
        with pytest.raises(NotFoundError):
            pipeline.analyze("does-not-exist")
        assert reset_metrics.get("sentiment.failed") == 1

    def test_failed_write_keeps_previous_metadata(self, store, make_entry, pipeline, monkeypatch):
        entry = make_entry("A wonderful time.")
        pipeline.analyze(entry.id)
        store.update_entry(entry.id, "user-1", content="Terrible awful day.")
        before = store.get_metadata(entry.id)

        def boom(self, entry_id, metadata):
            self.conn.execute("SELECT * FROM missing_table")

        monkeypatch.setattr("journal.store.JournalTransaction.upsert_metadata", boom)
        with pytest.raises(DatabaseError):
            pipeline.analyze(entry.id)
        assert store.get_metadata(entry.id) == before

    def test_metrics(self, make_entry, pipeline, reset_metrics):
        entry = make_entry("Fine.")
        pipeline.analyze(entry.id)
        assert reset_metrics.get("sentiment.analyzed") == 1
        assert reset_metrics.summary()["timers"]["sentiment.pipeline"]["count"] == 1

    def test_analyze_all(self, make_entry, pipeline):
        make_entry("Happy.")
        make_entry("Sad.")
        make_entry("Other user's words.", user="user-2")
        assert pipeline.analyze_all("user-1") == {"processed": 2, "failed": 0, "skipped": 0}
        assert pipeline.analyze_all() == {"processed": 3, "failed": 0, "skipped": 0}

    def test_analyze_all_only_missing(self, make_entry, pipeline):
        done = make_entry("Happy.")
        make_entry("Sad.")
        pipeline.analyze(done.id)
        stats = pipeline.analyze_all("user-1", only_missing=True)
        assert stats == {"processed": 1, "failed": 0, "skipped": 1}

    def test_analyze_all_counts_failures(self, store, make_entry):
        make_entry("Happy.")
        scorer = MagicMock()
        scorer.analyze.side_effect = DatabaseError("disk full")
        stats = SentimentPipeline(store, scorer=scorer).analyze_all("user-1")
        assert stats == {"processed": 0, "failed": 1, "skipped": 0}


class TestAnalysisQueue:
    def test_submit_and_drain(self, store, make_entry, pipeline):
        queue = AnalysisQueue(pipeline)
        entries = [make_entry("Good."), make_entry("Bad.")]
        futures = [queue.submit(e.id) for e in entries]
        queue.drain(timeout=10)

        assert all(f.done() for f in futures)
        assert queue.pending == 0
        assert store.get_metadata(entries[0].id).mood == "very_positive"
        assert store.get_metadata(entries[1].id).mood == "very_negative"
        queue.shutdown()

    def test_errors_are_swallowed(self, pipeline):
        queue = AnalysisQueue(pipeline)
        future = queue.submit("missing")
        assert future.result(timeout=10) is None
        queue.shutdown()

    def test_submit_after_shutdown(self, pipeline):
        queue = AnalysisQueue(pipeline)
        queue.shutdown()
        assert queue.submit("anything") is None

    def test_unexpected_errors_are_swallowed(self):
        broken = MagicMock()
        broken.analyze.side_effect = RuntimeError("bug")
        queue = AnalysisQueue(broken, max_workers=1)
        assert queue.submit("x").result(timeout=10) is None
        queue.shutdown()


def test_upsert_helper_matches_pipeline_shape(store, make_entry):
    entry = make_entry("two words")
    store.upsert_metadata(entry.id, EntryMetadata(2, 1, 0.0, 0.0, "neutral"))
    assert store.get_entry(entry.id).metadata.analyzed
