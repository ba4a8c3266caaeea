"""Entry sentiment pipeline: fetch content -> score -> upsert metadata.

Also hosts the fire-and-forget queue used by the entry write path.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait

import structlog

from observability import metrics

from .errors import JournalError, NotFoundError
from .sentiment import SentimentScorer, TextSentiment
from .store import EntryMetadata, JournalStore
from .tokenizer import WORDS_PER_MINUTE, reading_time, word_count

logger = structlog.get_logger()


class SentimentPipeline:
    """Analyzes one entry at a time and persists the result as entry metadata."""

    def __init__(
        self,
        store: JournalStore,
        scorer: SentimentScorer | None = None,
        words_per_minute: int = WORDS_PER_MINUTE,
    ):
        self.store = store
        self.scorer = scorer or SentimentScorer()
        self.words_per_minute = words_per_minute

    def analyze(self, entry_id: str) -> TextSentiment:
        """Score the entry's current content and upsert its metadata.

        The content read and the metadata write share one transaction, so a
        failure anywhere leaves the previous metadata row untouched. The
        per-sentence breakdown is returned but never stored.

        Raises:
            NotFoundError: entry does not exist.
            DatabaseError: the read or the upsert failed.
        """
        try:
            with metrics.timer("sentiment.pipeline"), self.store.transaction() as tx:
                content = tx.get_entry_content(entry_id)
                result = self.scorer.analyze(content)
                words = word_count(content)
                tx.upsert_metadata(
                    entry_id,
                    EntryMetadata(
                        word_count=words,
                        reading_time=reading_time(words, self.words_per_minute),
                        sentiment_score=result.score,
                        sentiment_magnitude=result.magnitude,
                        mood=str(result.mood),
                    ),
                )
        except JournalError as e:
            metrics.counter("sentiment.failed")
            logger.warning("sentiment.failed", entry_id=entry_id, error=str(e), code=e.code)
            raise

        metrics.counter("sentiment.analyzed")
        logger.info(
            "sentiment.analyzed",
            entry_id=entry_id,
            score=round(result.score, 4),
            mood=str(result.mood),
            word_count=words,
        )
        return result

    def analyze_all(self, user_id: str | None = None, only_missing: bool = False) -> dict:
        """Backfill sentiment for every entry (or only unanalyzed ones).

        Returns ``{"processed", "failed", "skipped"}``. Entries already
        analyzed under ``only_missing`` and entries deleted mid-run count as
        skipped.
        """
        all_ids = self.store.list_entry_ids(user_id)
        todo = (
            self.store.list_entry_ids(user_id, only_unanalyzed=True) if only_missing else all_ids
        )
        stats = {"processed": 0, "failed": 0, "skipped": len(all_ids) - len(todo)}

        for entry_id in todo:
            try:
                self.analyze(entry_id)
                stats["processed"] += 1
            except NotFoundError:
                stats["skipped"] += 1
            except JournalError:
                stats["failed"] += 1

        logger.info("sentiment.backfill_complete", user_id=user_id, **stats)
        return stats


class AnalysisQueue:
    """Hands entry ids to a worker pool; the caller never waits or sees errors."""

    def __init__(self, pipeline: SentimentPipeline, max_workers: int = 2):
        self.pipeline = pipeline
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="sentiment"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def submit(self, entry_id: str) -> Future | None:
        try:
            future = self._executor.submit(self._run, entry_id)
        except RuntimeError:
            # Executor already shut down (process exiting)
            logger.warning("sentiment.queue_closed", entry_id=entry_id)
            return None
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        logger.debug("sentiment.queued", entry_id=entry_id)
        return future

    def _run(self, entry_id: str) -> TextSentiment | None:
        try:
            return self.pipeline.analyze(entry_id)
        except Exception:
            logger.error("sentiment.background_failed", entry_id=entry_id, exc_info=True)
            return None

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def drain(self, timeout: float | None = None) -> None:
        """Block until everything submitted so far has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
