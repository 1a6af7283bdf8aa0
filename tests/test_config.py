from __future__ import annotations

import pytest
from pydantic import ValidationError

from serenity.config.app_config import AppConfig
from serenity.config.llm_config import LlmConfig


def test_log_level_is_normalised_to_upper_case() -> None:
    config = AppConfig(app_env="test", log_level="debug")

    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "overrides",
    [
        {"app_env": "qa"},
        {"log_level": "verbose"},
        {"pipeline_max_attempts": 0},
        {"pipeline_retry_delay": -1},
    ],
)
def test_invalid_app_settings_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        AppConfig(**{"app_env": "test", **overrides})


def test_app_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("DATA_DIR", "/var/lib/serenity")
    monkeypatch.setenv("PIPELINE_MAX_ATTEMPTS", "5")

    config = AppConfig()

    assert config.app_env == "staging"
    assert config.data_dir == "/var/lib/serenity"
    assert config.pipeline_max_attempts == 5


def test_llm_settings_use_prefixed_environment_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_API_KEY", "secret")
    monkeypatch.setenv("LLM_MODEL", "gemini-2.0-flash-lite")
    monkeypatch.setenv("LLM_MAX_TOKENS", "512")

    config = LlmConfig()

    assert config.api_key == "secret"
    assert config.model == "gemini-2.0-flash-lite"
    assert config.max_tokens == 512


@pytest.mark.parametrize(
    "overrides",
    [
        {"LLM_TEMPERATURE": 1.5},
        {"LLM_TIMEOUT": 0},
        {"LLM_MAX_TOKENS": -10},
    ],
)
def test_invalid_llm_settings_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        LlmConfig(LLM_API_KEY="secret", **overrides)
