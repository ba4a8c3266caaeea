"""Optional LLM enrichment: theme labels, grammar fixes, completions.

Every public method raises ``ServiceUnavailableError`` on any provider
failure; callers fall back to empty results.
"""

import structlog

from cli.retry import llm_retry
from llm import LLMAuthError, LLMError, LLMProvider, create_llm_provider
from observability import metrics

from .errors import ServiceUnavailableError

logger = structlog.get_logger()

DEFAULT_THEME_LABELS = (
    "work",
    "family",
    "health",
    "relationships",
    "personal growth",
    "travel",
    "hobbies",
    "finance",
    "gratitude",
    "stress",
)

_THEMES_SYSTEM = (
    "You label journal entries. Reply with the matching labels from the given list, "
    "comma-separated, most relevant first. Output ONLY labels."
)
_THEMES_PROMPT = "Labels: {labels}\n\nEntry:\n{text}"

_GRAMMAR_SYSTEM = (
    "You fix grammar and spelling. Output ONLY the corrected sentence. "
    "If it is already correct, output it unchanged."
)

_COMPLETION_SYSTEM = (
    "You suggest how a journal writer might continue. Output up to {count} short "
    "continuations, one per line, without numbering or quotes."
)

# Keep prompts small; entries can be long
_MAX_INPUT_CHARS = 2000


class LLMEnrichment:
    """Thin prompt layer over an ``LLMProvider`` with retries."""

    def __init__(
        self,
        provider: LLMProvider,
        max_attempts: int = 2,
        labels: tuple[str, ...] = DEFAULT_THEME_LABELS,
    ):
        self.provider = provider
        self.labels = labels
        self._generate = llm_retry(
            max_attempts=max_attempts,
            min_wait=0.5,
            max_wait=4.0,
            exceptions=(LLMError,),
            exclude=(LLMAuthError,),
        )(self.provider.generate)

    @classmethod
    def from_config(cls, config) -> "LLMEnrichment | None":
        """Build from an ``EnrichmentConfig``; None when disabled or unconfigured."""
        if not config.enabled:
            return None
        try:
            provider = create_llm_provider(
                provider=config.provider,
                api_key=config.api_key,
                model=config.model,
                timeout=config.timeout,
            )
        except LLMError as e:
            logger.warning("enrichment.disabled", error=str(e))
            return None
        logger.info("enrichment.enabled", provider=provider.provider_name)
        return cls(provider, max_attempts=config.max_attempts)

    def _call(self, operation: str, prompt: str, system: str, max_tokens: int) -> str:
        try:
            return self._generate(
                messages=[{"role": "user", "content": prompt}],
                system=system,
                max_tokens=max_tokens,
            )
        except LLMError as e:
            metrics.counter("enrichment.unavailable")
            logger.warning("enrichment.unavailable", operation=operation, error=str(e))
            raise ServiceUnavailableError(f"{operation} unavailable: {e}") from e

    def classify_themes(self, text: str) -> list[str]:
        """Labels from ``self.labels`` that fit the text, most relevant first."""
        raw = self._call(
            "classify_themes",
            _THEMES_PROMPT.format(labels=", ".join(self.labels), text=text[:_MAX_INPUT_CHARS]),
            _THEMES_SYSTEM,
            max_tokens=60,
        )
        allowed = {label.lower(): label for label in self.labels}
        themes = []
        for part in raw.replace("\n", ",").split(","):
            label = allowed.get(part.strip().strip(".").lower())
            if label and label not in themes:
                themes.append(label)
        return themes

    def correct_grammar(self, sentence: str) -> str:
        corrected = self._call(
            "correct_grammar", sentence[:_MAX_INPUT_CHARS], _GRAMMAR_SYSTEM, max_tokens=200
        )
        return corrected.strip() or sentence

    def generate_completion(self, text: str, count: int = 3) -> list[str]:
        raw = self._call(
            "generate_completion",
            text[-_MAX_INPUT_CHARS:],
            _COMPLETION_SYSTEM.format(count=count),
            max_tokens=150,
        )
        lines = [line.strip().lstrip("-*").strip() for line in raw.splitlines()]
        return [line for line in lines if line][:count]
