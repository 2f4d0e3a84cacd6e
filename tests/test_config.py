"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from talae_memory.core.config import Settings, load_settings
from talae_memory.core.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "EMBEDDING_PROVIDER",
        "OLLAMA_BASE_URL",
        "OLLAMA_MODEL",
        "OPENAI_EMBEDDING_MODEL",
        "VOYAGE_MODEL",
        "LOG_LEVEL",
        "MEMORY_DEFAULT_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.embedding_provider == "ollama"
        assert settings.ollama_base_url == "http://localhost:11434"
        assert settings.ollama_model == "nomic-embed-text"
        assert settings.embedding_model == "nomic-embed-text"
        assert settings.memory_default_limit == 10
        assert settings.response_memory_limit == 8
        assert settings.evolution_memory_limit == 5
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMBEDDING_PROVIDER", "voyage")
        monkeypatch.setenv("VOYAGE_MODEL", "voyage-3-large")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.embedding_model == "voyage-3-large"
        assert settings.log_level == "DEBUG"

    def test_reads_env_file(self, tmp_path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("EMBEDDING_PROVIDER=openai\nOPENAI_EMBEDDING_MODEL=text-embedding-3-large\nUNRELATED=1\n")

        settings = Settings(_env_file=env_file)

        assert settings.embedding_model == "text-embedding-3-large"


class TestLoadSettings:
    def test_invalid_value_raises_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMBEDDING_PROVIDER", "carrier-pigeon")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(_env_file=None)

        assert "embedding_provider" in exc_info.value.message
        assert exc_info.value.details.source == "config"

    def test_negative_limit_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            load_settings(_env_file=None, memory_default_limit=-1)

    def test_overrides(self) -> None:
        assert load_settings(_env_file=None, ollama_model="llama3").embedding_model == "llama3"
