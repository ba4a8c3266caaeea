"""Build the enrichment provider from config, an explicit key or the environment."""

import os
from importlib import import_module

from .base import LLMError, LLMProvider

# name -> (key env var, provider class path, default model)
_PROVIDERS = {
    "claude": ("ANTHROPIC_API_KEY", "llm.providers.claude:ClaudeProvider", "claude-3-5-haiku-latest"),
    "openai": ("OPENAI_API_KEY", "llm.providers.openai:OpenAIProvider", "gpt-4o-mini"),
    "gemini": ("GOOGLE_API_KEY", "llm.providers.gemini:GeminiProvider", "gemini-2.0-flash"),
}

# "sk-ant-" must be tested before "sk-"
_KEY_PREFIXES = (("sk-ant-", "claude"), ("sk-", "openai"), ("AI", "gemini"))


def create_llm_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    timeout: float | None = None,
    client=None,
) -> LLMProvider:
    """Instantiate ``provider`` ("claude", "openai", "gemini" or "auto").

    Without ``api_key`` or ``client`` the key comes from the provider's env
    var. Enrichment prompts are short, so each provider defaults to its small
    model. Raises ``LLMError`` for an unknown name or when auto-detection
    finds no key.
    """
    name = provider or "auto"
    if name == "auto":
        name = _auto_detect_provider(api_key)
    if name not in _PROVIDERS:
        raise LLMError(f"Unknown provider: {name}. Use: {', '.join(_PROVIDERS)}")

    env_var, class_path, default_model = _PROVIDERS[name]
    if not api_key and not client:
        api_key = os.getenv(env_var)

    module_name, class_name = class_path.split(":")
    provider_cls = getattr(import_module(module_name), class_name)
    return provider_cls(
        api_key=api_key, model=model or default_model, timeout=timeout, client=client
    )


def _detect_provider_from_key(api_key: str) -> str | None:
    for prefix, name in _KEY_PREFIXES:
        if api_key.startswith(prefix):
            return name
    return None


def _auto_detect_provider(api_key: str | None = None) -> str:
    """Key prefix first, then whichever env var is set (claude, openai, gemini)."""
    if api_key:
        inferred = _detect_provider_from_key(api_key)
        if inferred:
            return inferred

    for name, (env_var, _, _) in _PROVIDERS.items():
        if os.getenv(env_var):
            return name
    env_vars = ", ".join(env for env, _, _ in _PROVIDERS.values())
    raise LLMError(f"No LLM API key found. Set one of: {env_vars}")
