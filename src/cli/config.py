"""Configuration loading."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .config_models import JournalConfig

CONFIG_ENV_VAR = "REFLECT_CONFIG"


def find_config() -> Optional[Path]:
    """Find config file: $REFLECT_CONFIG, then standard locations."""
    explicit = os.getenv(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    locations = [
        Path.cwd() / "config.yaml",
        Path.home() / ".reflect" / "config.yaml",
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config_model(config_path: Optional[Path] = None) -> JournalConfig:
    """Load configuration as Pydantic model with validation.

    Raises:
        ValueError: invalid YAML or a value that fails validation.
    """
    base_config = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        if not isinstance(base_config, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

    try:
        return JournalConfig.from_dict(base_config)
    except ValidationError as e:
        raise ValueError(f"Config validation failed: {e}")


def load_config(config_path: Optional[Path] = None) -> dict:
    """Dict view of ``load_config_model``."""
    return load_config_model(config_path).to_dict()
