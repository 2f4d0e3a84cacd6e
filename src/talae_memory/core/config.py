"""Configuration management."""

from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from talae_memory.core import constants
from talae_memory.core.errors import ConfigurationError

EmbeddingProviderName = Literal["ollama", "openai", "voyage"]


class Settings(BaseSettings):
    # Embedding provider selection
    embedding_provider: EmbeddingProviderName = "ollama"
    embedding_timeout_seconds: float = Field(default=30.0, gt=0)

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "nomic-embed-text"

    # OpenAI
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_embedding_model: str = "text-embedding-3-small"

    # Voyage AI
    voyage_api_key: str = ""
    voyage_model: str = "voyage-3"

    # In-process embedding cache
    embedding_cache_enabled: bool = True
    embedding_cache_size: int = Field(default=1024, ge=1)

    # Retrieval limits
    memory_default_limit: int = Field(default=constants.DEFAULT_MEMORY_LIMIT, ge=0)
    response_memory_limit: int = Field(default=constants.RESPONSE_MEMORY_LIMIT, ge=0)
    evolution_memory_limit: int = Field(default=constants.EVOLUTION_MEMORY_LIMIT, ge=0)

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    environment: str = "development"
    logfire_token: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # Ignore extra fields in .env file
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def embedding_model(self) -> str:
        """Model name of the configured embedding provider."""
        return {
            "ollama": self.ollama_model,
            "openai": self.openai_embedding_model,
            "voyage": self.voyage_model,
        }[self.embedding_provider]


def load_settings(**overrides: object) -> Settings:
    """Build a fresh Settings instance from the environment.

    Raises:
        ConfigurationError: If any value fails validation
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        issues = ", ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(
            message=f"Invalid environment configuration: {issues}",
            details={"source": "config", "operation": "load_settings", "error_count": e.error_count()},
        ) from e


settings = Settings()
