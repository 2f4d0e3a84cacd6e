"""Embedding provider clients."""

from .cache import CachedEmbeddingProvider, EmbeddingCache
from .factory import EmbeddingProviderBuilder, create_embedding_provider
from .http import HttpEmbeddingProvider
from .ollama import OllamaEmbeddingProvider
from .openai import OpenAIEmbeddingProvider
from .voyage import VoyageEmbeddingProvider

__all__ = [
    "CachedEmbeddingProvider",
    "EmbeddingCache",
    "EmbeddingProviderBuilder",
    "HttpEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "VoyageEmbeddingProvider",
    "create_embedding_provider",
]
