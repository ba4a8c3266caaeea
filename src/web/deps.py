"""Dependency injection for FastAPI routes.

Each provider is cached for the process; tests swap them through
``app.dependency_overrides``.
"""

from functools import lru_cache

import structlog

from cli.config import load_config_model
from cli.config_models import JournalConfig
from journal import AnalysisQueue, AnalyticsAggregator, JournalStore, SentimentPipeline
from journal.enrichment import LLMEnrichment
from journal.lexicon import load_lexicon
from journal.sentiment import SentimentScorer

logger = structlog.get_logger()


@lru_cache
def get_config() -> JournalConfig:
    """Load shared config (``$REFLECT_CONFIG``, ./config.yaml, ~/.reflect/config.yaml)."""
    return load_config_model()


@lru_cache
def get_store() -> JournalStore:
    config = get_config()
    return JournalStore(config.paths.db_path, words_per_minute=config.analysis.words_per_minute)


@lru_cache
def get_scorer() -> SentimentScorer:
    analysis = get_config().analysis
    return SentimentScorer(
        lexicon=load_lexicon(analysis.lexicon_path),
        divisor=analysis.score_divisor,
        exponent=analysis.score_exponent,
    )


@lru_cache
def get_pipeline() -> SentimentPipeline:
    return SentimentPipeline(
        get_store(), get_scorer(), words_per_minute=get_config().analysis.words_per_minute
    )


@lru_cache
def get_queue() -> AnalysisQueue:
    return AnalysisQueue(get_pipeline(), max_workers=get_config().analysis.queue_workers)


@lru_cache
def get_aggregator() -> AnalyticsAggregator:
    return AnalyticsAggregator(
        get_store(), frequency_months=get_config().analytics.frequency_months
    )


@lru_cache
def get_enrichment() -> LLMEnrichment | None:
    return LLMEnrichment.from_config(get_config().enrichment)


def shutdown_queue() -> None:
    """Finish queued analyses and stop the worker pool, if one was started."""
    if get_queue.cache_info().currsize:
        get_queue().shutdown(wait=True)
        get_queue.cache_clear()
        logger.info("web.queue_stopped")
