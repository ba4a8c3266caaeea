"""Readability and complexity metrics (Flesch Reading Ease variant)."""

import re
from dataclasses import dataclass, field

from .tokenizer import split_sentences, split_words

_NON_LETTERS = re.compile(r"[^a-z]")
_VOWEL_GROUPS = re.compile(r"[aeiouy]+")

LONG_WORD_LENGTH = 6
READABILITY_HINT_BELOW = 60
SENTENCE_LENGTH_HINT_ABOVE = 20
COMPLEXITY_HINT_ABOVE = 7


def count_syllables(word: str) -> int:
    """Vowel groups in the lowercased, letters-only word.

    A word with no vowel group counts 0; there is no per-word minimum.
    """
    letters = _NON_LETTERS.sub("", word.lower())
    return len(_VOWEL_GROUPS.findall(letters))


def readability(text: str) -> float:
    """206.835 - 1.015 * words/sentences - 84.6 * syllables/words.

    Returns 0.0 when there are no sentences or no words. Not clamped: very
    short or very dense text lands outside 0..100.
    """
    sentences = split_sentences(text)
    words = split_words(text)
    if not sentences or not words:
        return 0.0
    syllables = sum(count_syllables(w) for w in words)
    return 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))


def complexity(text: str) -> float:
    """Share of words longer than six characters, scaled to 0..10."""
    words = split_words(text)
    if not words:
        return 0.0
    long_words = sum(1 for w in words if len(w) > LONG_WORD_LENGTH)
    return (long_words / len(words)) * 10


def average_sentence_length(text: str) -> float:
    sentences = split_sentences(text)
    words = split_words(text)
    if not sentences:
        return 0.0
    return len(words) / len(sentences)


@dataclass
class WritingStyle:
    readability: float
    complexity: float
    average_sentence_length: float
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "readability": round(self.readability, 2),
            "complexity": round(self.complexity, 2),
            "average_sentence_length": round(self.average_sentence_length, 2),
            "suggestions": list(self.suggestions),
        }


def writing_style(text: str) -> WritingStyle:
    """Metrics plus plain-language hints for the editor UI."""
    score = readability(text)
    dense = complexity(text)
    sentence_length = average_sentence_length(text)

    suggestions = []
    if sentence_length > SENTENCE_LENGTH_HINT_ABOVE:
        suggestions.append("Consider breaking down longer sentences for better readability.")
    if score < READABILITY_HINT_BELOW:
        suggestions.append("Try using simpler words and shorter sentences.")
    if dense > COMPLEXITY_HINT_ABOVE:
        suggestions.append("Your writing might be too complex. Try more straightforward language.")

    return WritingStyle(
        readability=score,
        complexity=dense,
        average_sentence_length=sentence_length,
        suggestions=suggestions,
    )
