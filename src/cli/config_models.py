"""Pydantic configuration models for the reflect journal."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from shared_types import TimeRange

VALID_LLM_PROVIDERS = {"auto", "claude", "openai", "gemini"}


class PathsConfig(BaseModel):
    """File paths configuration."""

    db_path: Path = Path("~/.reflect/journal.db")
    log_file: Optional[Path] = None

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ in all paths."""
        self.db_path = self.db_path.expanduser()
        if self.log_file is not None:
            self.log_file = self.log_file.expanduser()
        return self


class AnalysisConfig(BaseModel):
    """Sentiment and text-analysis tuning."""

    words_per_minute: int = Field(default=200, gt=0)
    score_divisor: float = 2.0
    score_exponent: float = 0.7
    theme_count: int = Field(default=5, ge=1)
    summary_sentences: int = Field(default=3, ge=1)
    lexicon_path: Optional[Path] = None
    queue_workers: int = Field(default=2, ge=1)

    @field_validator("score_divisor")
    @classmethod
    def validate_divisor(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"score_divisor must be positive, got {v}")
        return v

    @field_validator("score_exponent")
    @classmethod
    def validate_exponent(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError(f"score_exponent must be in (0, 1], got {v}")
        return v

    @field_validator("lexicon_path")
    @classmethod
    def expand_lexicon_path(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else None


class EnrichmentConfig(BaseModel):
    """Optional LLM enrichment (themes, grammar, completions)."""

    enabled: bool = False
    provider: str = "auto"
    model: Optional[str] = None  # None = provider's small default
    api_key: Optional[str] = None
    timeout: float = Field(default=10.0, gt=0)
    max_attempts: int = Field(default=2, ge=1)

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v


class AnalyticsConfig(BaseModel):
    """Analytics defaults."""

    default_time_range: TimeRange = TimeRange.MONTH
    frequency_months: int = Field(default=6, ge=1)


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_mode: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class JournalConfig(BaseModel):
    """Main configuration model."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in API keys."""
        key = self.enrichment.api_key
        if key and key.startswith("${") and key.endswith("}"):
            self.enrichment.api_key = os.getenv(key[2:-1], "")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "JournalConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
