"""Text insights for the editor: style, themes, summary, patterns, enrichment."""

import structlog

from .enrichment import LLMEnrichment
from .errors import ServiceUnavailableError, ValidationError
from .readability import writing_style
from .sentiment import SentimentScorer, analyze_sentiment
from .themes import DEFAULT_THEME_COUNT, extract_themes, summarize
from .tokenizer import split_sentences, tokenize

logger = structlog.get_logger()

_TIME_OF_DAY_WORDS = {
    "morning": ("morning", "breakfast", "wake", "early"),
    "afternoon": ("afternoon", "lunch", "midday"),
    "evening": ("evening", "dinner", "night", "late"),
}

# Grammar checks are one LLM call per sentence
MAX_GRAMMAR_SENTENCES = 5


def emotion_from_sentiment(score: float) -> str:
    if score > 0.5:
        return "joy"
    if score > 0:
        return "contentment"
    if score == 0:
        return "neutral"
    if score > -0.5:
        return "sadness"
    return "anger"


def detect_time_of_day(content: str) -> str:
    """morning/afternoon/evening by keyword hits; "unknown" when none wins outright."""
    words = {t.lower() for t in tokenize(content)}
    hits = {
        period: sum(1 for keyword in keywords if keyword in words)
        for period, keywords in _TIME_OF_DAY_WORDS.items()
    }
    best = max(hits.values())
    winners = [period for period, count in hits.items() if count == best]
    if best == 0 or len(winners) > 1:
        return "unknown"
    return winners[0]


def suggest_categories(content: str, categories, count: int = DEFAULT_THEME_COUNT) -> list[str]:
    """Names of existing categories that contain one of the entry's top themes.

    Matching is a case-insensitive substring test, so "run" suggests "Running".
    """
    themes = list(extract_themes(content, count))
    suggested = []
    for category in categories:
        name = category.name.lower()
        if any(term in name for term in themes):
            suggested.append(category.name)
    return suggested


def _grammar_suggestions(content: str, enrichment: LLMEnrichment) -> list[dict]:
    suggestions = []
    for sentence in split_sentences(content)[:MAX_GRAMMAR_SENTENCES]:
        original = sentence.strip()
        replacement = enrichment.correct_grammar(original)
        if replacement and replacement.rstrip(".!?") != original:
            suggestions.append({"original": original, "replacement": replacement})
    return suggestions


def analyze_text(
    content: str,
    enrichment: LLMEnrichment | None = None,
    theme_count: int = DEFAULT_THEME_COUNT,
    summary_sentences: int = 3,
    scorer: SentimentScorer | None = None,
) -> dict:
    """Full insight bundle for a piece of text.

    The lexicon-based parts always succeed. Enrichment parts fall back to
    empty lists when no enrichment is configured or the service fails.

    Raises:
        ValidationError: empty content.
    """
    if not content or not content.strip():
        raise ValidationError("Content is required", field="content")

    themes = list(extract_themes(content, theme_count))
    sentiment = analyze_sentiment(content, scorer)

    result = {
        "writing_style": writing_style(content).to_dict(),
        "sentiment": {
            "score": sentiment.score,
            "magnitude": sentiment.magnitude,
            "mood": str(sentiment.mood),
        },
        "themes": themes,
        "summary": summarize(content, summary_sentences),
        "patterns": {
            "topics": themes,
            "emotion": emotion_from_sentiment(sentiment.score),
            "time_of_day": detect_time_of_day(content),
        },
        "suggestions": [],
        "auto_completions": [],
        "categories": [],
    }
    if enrichment is None:
        return result

    for key, call in (
        ("suggestions", lambda: _grammar_suggestions(content, enrichment)),
        ("auto_completions", lambda: enrichment.generate_completion(content)),
        ("categories", lambda: enrichment.classify_themes(content)),
    ):
        try:
            result[key] = call()
        except ServiceUnavailableError as e:
            logger.info("insights.enrichment_skipped", part=key, error=str(e))
    return result
