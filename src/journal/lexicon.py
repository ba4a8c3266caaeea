"""AFINN-style word polarity table.

The table is a read-only mapping from lowercase word to an integer weight
(-5..+5). The default is the English AFINN-165 list shipped with the ``afinn``
distribution, parsed once per process on first use and shared by every
scorer. Tests and callers with their own table build a ``Lexicon`` directly
and pass it in.
"""

from collections.abc import Iterator, Mapping
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType

import structlog

logger = structlog.get_logger()

AFINN_PACKAGE = "afinn"
AFINN_WORD_FILE = "data/AFINN-en-165.txt"


class Lexicon(Mapping):
    """Immutable word -> weight mapping. Lookups are case-insensitive."""

    def __init__(self, weights: Mapping[str, int]):
        self._weights = MappingProxyType({w.lower(): int(v) for w, v in weights.items()})

    def __getitem__(self, word: str) -> int:
        return self._weights[word.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._weights

    def weight(self, word: str) -> int:
        """Weight for ``word``; unknown words weigh 0."""
        return self._weights.get(word.lower(), 0)

    @classmethod
    def parse(cls, lines) -> "Lexicon":
        """Parse ``word<TAB>weight`` lines, skipping blanks and # comments."""
        weights: dict[str, int] = {}
        for lineno, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.rsplit("\t", 1)
            if len(parts) != 2:
                raise ValueError(f"Malformed lexicon line {lineno}: {raw!r}")
            word, score = parts
            weights[word.strip().lower()] = int(score)
        return cls(weights)

    @classmethod
    def from_file(cls, path: str | Path) -> "Lexicon":
        with open(Path(path).expanduser(), encoding="utf-8") as f:
            lexicon = cls.parse(f)
        logger.debug("lexicon.loaded", path=str(path), words=len(lexicon))
        return lexicon


@lru_cache(maxsize=None)
def load_default_lexicon() -> Lexicon:
    """AFINN-165, loaded on first call and cached for the process.

    Multi-word phrases are dropped; scoring looks at one token at a time.
    """
    text = resources.files(AFINN_PACKAGE).joinpath(AFINN_WORD_FILE).read_text("utf-8")
    parsed = Lexicon.parse(text.splitlines())
    lexicon = Lexicon({word: weight for word, weight in parsed.items() if " " not in word})
    logger.debug("lexicon.loaded", path=AFINN_WORD_FILE, words=len(lexicon))
    return lexicon


def load_lexicon(path: str | Path | None = None) -> Lexicon:
    """Load an override table from ``path``, or AFINN-165."""
    if path:
        return Lexicon.from_file(path)
    return load_default_lexicon()
