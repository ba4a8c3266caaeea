"""Word and sentence splitting shared by every analyzer."""

import math
import re
from typing import Iterator

WORDS_PER_MINUTE = 200

_WORD_RE = re.compile(r"[A-Za-z0-9_]+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def tokenize(text: str) -> list[str]:
    """Split text into word tokens on any non-word ASCII character.

    Case is preserved; callers lowercase for lexicon lookups.
    """
    return _WORD_RE.findall(text or "")


def iter_sentences(text: str) -> Iterator[str]:
    for fragment in _SENTENCE_SPLIT_RE.split(text or ""):
        if fragment.strip():
            yield fragment


def split_sentences(text: str) -> list[str]:
    """Split on runs of . ! ? and drop empty or whitespace-only fragments.

    Fragments are returned untrimmed, exactly as they appear between
    terminators.
    """
    return list(iter_sentences(text))


def split_words(text: str) -> list[str]:
    """Whitespace-delimited words (punctuation stays attached)."""
    return (text or "").split()


def word_count(text: str) -> int:
    return len(split_words(text))


def reading_time(words: int, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Minutes to read ``words`` words, rounded up."""
    if words <= 0:
        return 0
    return math.ceil(words / words_per_minute)
