"""Keyword surfacing for a single entry.

The entry is the whole corpus, so inverse document frequency is the same
constant for every term and drops out of the ranking: weights are plain term
frequencies over non-stopword tokens. This is intentional, not a missing IDF.
"""

from collections import Counter
from typing import Iterator

from .tokenizer import split_sentences, tokenize

DEFAULT_THEME_COUNT = 5
MIN_TERM_LENGTH = 2

STOPWORDS = frozenset("""
a about above after again against all also am an and any are aren as at be because
been before being below between both but by can cannot could couldn d did didn do
does doesn doing don down during each even ever few for from further get got had
hadn has hasn have haven having he her here hers herself him himself his how i if
in into is isn it its itself just ll m me more most much must mustn my myself no
nor not now of off on once one only or other ought our ours ourselves out over own
re really s same shan she should shouldn so some such t than that the their theirs
them themselves then there these they this those through to too under until up
upon us ve very was wasn we were weren what when where which while who whom why
will with won would wouldn y yet you your yours yourself yourselves
""".split())


def _terms(text: str) -> list[str]:
    return [
        t
        for t in (token.lower() for token in tokenize(text))
        if len(t) >= MIN_TERM_LENGTH and t not in STOPWORDS and not t.isdigit()
    ]


def term_weights(text: str) -> dict[str, float]:
    """Relative frequency of each term, in first-seen order."""
    terms = _terms(text)
    if not terms:
        return {}
    total = len(terms)
    return {term: count / total for term, count in Counter(terms).items()}


def extract_themes(text: str, count: int = DEFAULT_THEME_COUNT) -> Iterator[str]:
    """Yield the ``count`` heaviest terms; ties keep first-seen order."""
    weights = term_weights(text)
    ranked = sorted(weights.items(), key=lambda kv: -kv[1])
    for term, _ in ranked[: max(count, 0)]:
        yield term


def summarize(text: str, sentence_count: int = 3) -> str:
    """Pick the sentences whose terms carry the most entry-level weight.

    Selected sentences keep their original order.
    """
    sentences = [s.strip() for s in split_sentences(text)]
    if len(sentences) <= sentence_count:
        return " ".join(sentences)

    weights = term_weights(text)

    def _score(sentence: str) -> float:
        terms = _terms(sentence)
        if not terms:
            return 0.0
        return sum(weights.get(t, 0.0) for t in terms) / len(terms)

    ranked = sorted(range(len(sentences)), key=lambda i: -_score(sentences[i]))
    keep = sorted(ranked[:sentence_count])
    return " ".join(sentences[i] for i in keep)
