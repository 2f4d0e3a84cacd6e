"""Domain service protocols."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from talae_memory.domain.models.memory import MemoryEntry


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Turns text into a fixed-length vector. May fail; failures propagate."""

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding for a single text."""
        ...


@runtime_checkable
class MemoryRanker(Protocol):
    """Ranks memories by relevance to a set of query fragments."""

    async def rank(
        self,
        entity_id: str,
        memories: Sequence[MemoryEntry],
        query_texts: Sequence[str],
        *,
        limit: int | None = None,
    ) -> list[MemoryEntry]:
        """Return at most ``limit`` memories, most relevant first; None means the configured default."""
        ...
