"""Provider interface used by the optional enrichment layer."""

from abc import ABC, abstractmethod


class LLMError(Exception):
    """Any provider failure; enrichment treats it as "no result"."""


class LLMRateLimitError(LLMError):
    pass


class LLMAuthError(LLMError):
    """Bad or missing key. Never retried."""


class LLMProvider(ABC):
    provider_name: str = "base"

    @abstractmethod
    def generate(
        self, messages: list[dict], system: str | None = None, max_tokens: int = 500
    ) -> str:
        """Reply text for a ``[{"role", "content"}]`` conversation.

        Implementations raise ``LLMError`` subclasses, never SDK exceptions.
        """
        ...

    def complete(self, prompt: str, system: str | None = None, max_tokens: int = 500) -> str:
        """One user turn in, reply text out."""
        return self.generate([{"role": "user", "content": prompt}], system=system, max_tokens=max_tokens)
