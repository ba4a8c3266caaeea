"""Shared CLI utilities."""

import os
import sys
from typing import NoReturn

import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()

DEFAULT_CLI_USER = "local"


def get_user_id() -> str:
    """CLI acts on one local user; override with $REFLECT_USER."""
    return os.getenv("REFLECT_USER", DEFAULT_CLI_USER)


def get_components(with_enrichment: bool = False):
    """Initialize store, pipeline and aggregator from config.

    Args:
        with_enrichment: Also build the optional LLM enrichment (None when disabled)
    """
    from cli.config import load_config_model
    from journal import AnalyticsAggregator, JournalStore, SentimentPipeline, SentimentScorer
    from journal.enrichment import LLMEnrichment
    from journal.lexicon import load_lexicon

    config = load_config_model()
    analysis = config.analysis

    store = JournalStore(config.paths.db_path, words_per_minute=analysis.words_per_minute)
    scorer = SentimentScorer(
        lexicon=load_lexicon(analysis.lexicon_path),
        divisor=analysis.score_divisor,
        exponent=analysis.score_exponent,
    )
    pipeline = SentimentPipeline(store, scorer, words_per_minute=analysis.words_per_minute)
    aggregator = AnalyticsAggregator(store, frequency_months=config.analytics.frequency_months)

    return {
        "config_model": config,
        "store": store,
        "scorer": scorer,
        "pipeline": pipeline,
        "aggregator": aggregator,
        "enrichment": LLMEnrichment.from_config(config.enrichment) if with_enrichment else None,
        "user_id": get_user_id(),
    }


def fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/] {message}")
    sys.exit(1)


MOOD_STYLE = {
    "very_positive": "bold green",
    "positive": "green",
    "neutral": "dim",
    "negative": "yellow",
    "very_negative": "red",
}


def mood_label(mood: str | None) -> str:
    if not mood:
        return "[dim]-[/]"
    style = MOOD_STYLE.get(mood, "dim")
    return f"[{style}]██ {mood}[/]"
