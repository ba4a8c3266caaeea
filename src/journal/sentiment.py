"""Lexicon-based sentiment scoring for journal entries.

tokenize -> sum word weights -> scale and clamp to [-1, 1] -> power stretch
-> mood bucket. Raw sums for ordinary prose cluster near zero; the
sub-linear exponent spreads that cluster so the mood buckets discriminate.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Iterable

from shared_types import Mood

from .lexicon import Lexicon, load_default_lexicon
from .tokenizer import split_sentences, tokenize

SCORE_DIVISOR = 2.0
SCORE_EXPONENT = 0.7


def normalize_score(
    raw_score: float,
    divisor: float = SCORE_DIVISOR,
    exponent: float = SCORE_EXPONENT,
) -> float:
    """Map a raw lexicon sum into [-1, 1].

    ``clamped = max(-1, min(1, raw / divisor))`` then
    ``sign(clamped) * abs(clamped) ** exponent``.
    """
    clamped = max(-1.0, min(1.0, raw_score / divisor))
    if clamped == 0:
        return 0.0
    return math.copysign(abs(clamped) ** exponent, clamped)


def classify_mood(normalized: float) -> Mood:
    """Bucket a normalized score. First matching rule wins.

    0.1 and -0.1 fall into neutral; -0.3 is still negative.
    """
    if normalized >= 0.3:
        return Mood.VERY_POSITIVE
    if normalized > 0.1:
        return Mood.POSITIVE
    if abs(normalized) <= 0.1:
        return Mood.NEUTRAL
    if normalized >= -0.3:
        return Mood.NEGATIVE
    return Mood.VERY_NEGATIVE


@dataclass
class SentenceSentiment:
    content: str
    score: float
    magnitude: float


@dataclass
class TextSentiment:
    score: float
    magnitude: float
    mood: Mood
    raw_score: float = 0.0
    sentences: list[SentenceSentiment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "magnitude": self.magnitude,
            "mood": str(self.mood),
            "sentences": [asdict(s) for s in self.sentences],
        }


class SentimentScorer:
    """Scores token sequences against a fixed lexicon."""

    def __init__(
        self,
        lexicon: Lexicon | None = None,
        divisor: float = SCORE_DIVISOR,
        exponent: float = SCORE_EXPONENT,
    ):
        if divisor <= 0:
            raise ValueError(f"divisor must be positive, got {divisor}")
        self.lexicon = lexicon if lexicon is not None else load_default_lexicon()
        self.divisor = divisor
        self.exponent = exponent

    def score(self, tokens: Iterable[str]) -> int:
        """Sum of token weights; unknown tokens contribute 0."""
        return sum(self.lexicon.weight(t) for t in tokens)

    @staticmethod
    def magnitude(raw_score: float) -> float:
        return float(abs(raw_score))

    def normalize_and_classify(self, raw_score: float) -> tuple[float, Mood]:
        normalized = normalize_score(raw_score, self.divisor, self.exponent)
        return normalized, classify_mood(normalized)

    def analyze_sentences(self, text: str) -> list[SentenceSentiment]:
        """Per-sentence scores. Recomputed on demand, never stored."""
        breakdown = []
        for sentence in split_sentences(text):
            raw = self.score(tokenize(sentence))
            breakdown.append(
                SentenceSentiment(
                    content=sentence,
                    score=normalize_score(raw, self.divisor, self.exponent),
                    magnitude=self.magnitude(raw),
                )
            )
        return breakdown

    def analyze(self, text: str, sentences: bool = True) -> TextSentiment:
        raw = self.score(tokenize(text))
        normalized, mood = self.normalize_and_classify(raw)
        return TextSentiment(
            score=normalized,
            magnitude=self.magnitude(raw),
            mood=mood,
            raw_score=raw,
            sentences=self.analyze_sentences(text) if sentences else [],
        )


def analyze_sentiment(text: str, scorer: SentimentScorer | None = None) -> TextSentiment:
    """Score ``text`` with the bundled lexicon unless a scorer is given."""
    return (scorer or SentimentScorer()).analyze(text)
