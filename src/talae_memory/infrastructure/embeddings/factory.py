"""Construction of embedding providers from settings.

Providers are built and injected rather than held as module singletons, so
each process (or test) decides which provider and cache it runs with.
"""

from __future__ import annotations

from talae_memory.core.config import Settings, settings as default_settings
from talae_memory.core.decorators import with_error_handling
from talae_memory.core.errors import AuthenticationError
from talae_memory.core.logging import get_logger
from talae_memory.domain.services import EmbeddingProvider
from talae_memory.infrastructure.embeddings.cache import CachedEmbeddingProvider, EmbeddingCache
from talae_memory.infrastructure.embeddings.ollama import OllamaEmbeddingProvider
from talae_memory.infrastructure.embeddings.openai import OpenAIEmbeddingProvider
from talae_memory.infrastructure.embeddings.voyage import VoyageEmbeddingProvider

logger = get_logger(__name__)


class EmbeddingProviderBuilder:
    """Builder for configured embedding provider instances."""

    def __init__(self, settings: Settings | None = None):
        """Initialize the builder.

        Args:
            settings: Settings to build from; defaults to the process settings
        """
        self.settings = settings or default_settings
        self._use_cache = self.settings.embedding_cache_enabled
        self._cache_size = self.settings.embedding_cache_size
        self._model: str | None = None

    def with_cache(self, enabled: bool = True, max_size: int | None = None) -> EmbeddingProviderBuilder:
        """Configure whether to wrap the provider in an in-process cache.

        Returns:
            Self for method chaining
        """
        self._use_cache = enabled
        if max_size is not None:
            self._cache_size = max_size
        return self

    def with_model(self, model: str) -> EmbeddingProviderBuilder:
        """Override the model configured for the selected provider.

        Returns:
            Self for method chaining
        """
        self._model = model
        return self

    @with_error_handling(reraise=True)
    def build(self) -> EmbeddingProvider:
        """Build the configured embedding provider.

        Raises:
            AuthenticationError: If the selected provider needs an API key and none is set
        """
        name = self.settings.embedding_provider
        model = self._model or self.settings.embedding_model
        timeout = self.settings.embedding_timeout_seconds

        provider: EmbeddingProvider
        if name == "ollama":
            provider = OllamaEmbeddingProvider(model, self.settings.ollama_base_url, timeout=timeout)
        elif name == "openai":
            if not self.settings.openai_api_key:
                raise AuthenticationError(
                    message="OPENAI_API_KEY not configured",
                    details={"source": "embedding_builder", "operation": "build", "provider": name},
                )
            provider = OpenAIEmbeddingProvider(
                model,
                self.settings.openai_api_key,
                self.settings.openai_base_url,
                timeout=timeout,
            )
        else:
            if not self.settings.voyage_api_key:
                raise AuthenticationError(
                    message="VOYAGE_API_KEY not configured",
                    details={"source": "embedding_builder", "operation": "build", "provider": name},
                )
            provider = VoyageEmbeddingProvider(self.settings.voyage_api_key, model)

        logger.info("Created embedding provider", provider=name, model=model, cache=self._use_cache)

        if not self._use_cache:
            return provider
        return CachedEmbeddingProvider(provider, EmbeddingCache(self._cache_size), model)


def create_embedding_provider(
    settings: Settings | None = None,
    use_cache: bool | None = None,
    model: str | None = None,
) -> EmbeddingProvider:
    """Convenience function to build an embedding provider.

    Example:
        ```python
        embeddings = create_embedding_provider()
        store = CharacterMemoryStore(embeddings, VectorIndex())
        ```
    """
    builder = EmbeddingProviderBuilder(settings)
    if use_cache is not None:
        builder.with_cache(use_cache)
    if model:
        builder.with_model(model)
    return builder.build()
