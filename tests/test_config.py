"""Tests for config loading and validation."""

from pathlib import Path

import pytest

from cli.config import find_config, load_config, load_config_model
from cli.config_models import JournalConfig
from shared_types import TimeRange


def test_defaults():
    config = JournalConfig()
    assert config.analysis.words_per_minute == 200
    assert config.analysis.score_divisor == 2.0
    assert config.analysis.score_exponent == 0.7
    assert config.analytics.default_time_range == TimeRange.MONTH
    assert config.enrichment.enabled is False
    assert config.paths.db_path == Path("~/.reflect/journal.db").expanduser()


def test_load_from_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "analysis:\n"
        "  words_per_minute: 250\n"
        "analytics:\n"
        "  default_time_range: week\n"
        "logging:\n"
        "  level: debug\n"
        "  json: true\n"
    )
    config = load_config_model(path)
    assert config.analysis.words_per_minute == 250
    assert config.analytics.default_time_range == TimeRange.WEEK
    assert config.logging.level == "DEBUG"
    assert config.logging.json_mode is True


def test_missing_file_gives_defaults(tmp_path):
    assert load_config_model(tmp_path / "absent.yaml") == JournalConfig()


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config_model(path) == JournalConfig()


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("analysis: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config_model(path)


def test_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_config_model(path)


@pytest.mark.parametrize(
    "yaml_text",
    [
        "analysis:\n  score_divisor: 0\n",
        "analysis:\n  score_exponent: 1.5\n",
        "analysis:\n  words_per_minute: 0\n",
        "enrichment:\n  provider: llama\n",
        "logging:\n  level: LOUD\n",
        "analytics:\n  default_time_range: decade\n",
    ],
)
def test_validation_errors(tmp_path, yaml_text):
    path = tmp_path / "config.yaml"
    path.write_text(yaml_text)
    with pytest.raises(ValueError, match="Config validation failed"):
        load_config_model(path)


def test_api_key_env_expansion(monkeypatch):
    monkeypatch.setenv("MY_LLM_KEY", "sk-ant-secret")
    config = JournalConfig.from_dict({"enrichment": {"api_key": "${MY_LLM_KEY}"}})
    assert config.enrichment.api_key == "sk-ant-secret"


def test_paths_expand_user():
    config = JournalConfig.from_dict({"paths": {"db_path": "~/x/j.db", "log_file": "~/x/log"}})
    assert "~" not in str(config.paths.db_path)
    assert "~" not in str(config.paths.log_file)


def test_find_config_env_override(monkeypatch, tmp_path):
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv("REFLECT_CONFIG", str(target))
    assert find_config() == target


def test_find_config_cwd(monkeypatch, tmp_path):
    monkeypatch.delenv("REFLECT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("{}\n")
    assert find_config() == tmp_path / "config.yaml"


def test_load_config_dict(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("analysis:\n  theme_count: 3\n")
    assert load_config(path)["analysis"]["theme_count"] == 3
