import hashlib
from collections import OrderedDict

from talae_memory.core.logging import get_logger
from talae_memory.domain.services import EmbeddingProvider

logger = get_logger(__name__)


class EmbeddingCache:
    """In-process LRU cache for embedding vectors with model awareness.

    Entries are keyed by model and text so switching models never serves a
    vector produced by another model. Contents live for the process lifetime.
    """

    def __init__(self, max_size: int = 1024):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._entries: OrderedDict[str, list[float]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def cache_key(text: str, model: str) -> str:
        # Include model in cache key to prevent cross-model contamination
        return hashlib.md5(f"{model}::{text}".encode()).hexdigest()

    async def get_cached(self, text: str, model: str) -> list[float] | None:
        """Retrieve a cached embedding, marking it most recently used.

        Returns:
            A copy of the cached vector, or None on a miss
        """
        key = self.cache_key(text, model)
        embedding = self._entries.get(key)
        if embedding is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return list(embedding)

    async def store(self, text: str, model: str, embedding: list[float]) -> None:
        """Store an embedding, evicting the least recently used entry when full."""
        key = self.cache_key(text, model)
        self._entries[key] = list(embedding)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0


class CachedEmbeddingProvider:
    """Wraps a provider so repeated texts are embedded once."""

    def __init__(self, provider: EmbeddingProvider, cache: EmbeddingCache, model: str):
        self.provider = provider
        self.cache = cache
        self.model = model

    async def embed(self, text: str) -> list[float]:
        cached = await self.cache.get_cached(text, self.model)
        if cached is not None:
            logger.debug(f"Embedding cache hit for text: {text[:50]}... (model: {self.model})")
            return cached

        embedding = await self.provider.embed(text)
        await self.cache.store(text, self.model, embedding)
        return embedding
