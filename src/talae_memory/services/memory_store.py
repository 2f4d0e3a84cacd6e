"""Embedding-backed memory stores for characters and universes.

Each entity gets its own vector partition, named ``"<kind>:<entity_id>"``.
Adding a memory embeds its content and indexes the resulting entry; searching
embeds the query and returns stored entries in similarity order. A provider
failure propagates to the caller and leaves the partition untouched.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from talae_memory.core.base import ErrorLevel
from talae_memory.core.decorators import with_error_handling
from talae_memory.core.logging import get_logger, memory_log_context
from talae_memory.domain.models.memory import MemoryDraft, MemoryEntry, MemoryKind
from talae_memory.domain.models.vector import MemoryRecordMetadata, VectorRecord
from talae_memory.domain.services import EmbeddingProvider
from talae_memory.infrastructure.vector import VectorIndex, VectorPartition

logger = get_logger(__name__)


class MemoryStoreAdapter:
    """Memory storage and semantic search for one kind of entity."""

    def __init__(self, kind: MemoryKind, embeddings: EmbeddingProvider, index: VectorIndex):
        self.kind = MemoryKind(kind)
        self.embeddings = embeddings
        self.index = index

    def partition_name(self, entity_id: str) -> str:
        return f"{self.kind.value}:{entity_id}"

    def _partition(self, entity_id: str) -> VectorPartition[MemoryRecordMetadata]:
        return self.index.get_or_create(self.partition_name(entity_id))

    @with_error_handling(error_level=ErrorLevel.ERROR, reraise=True)
    async def add_memory(self, entity_id: str, draft: MemoryDraft) -> MemoryEntry:
        """Embed and store a new memory for an entity.

        Args:
            entity_id: Owning character or universe id
            draft: Content, salience and tags of the memory

        Returns:
            The stored entry, with a fresh id and creation time

        Raises:
            EmbeddingError: Or another provider error, if embedding fails
        """
        with memory_log_context(entity_id, kind=self.kind.value):
            embedding = await self.embeddings.embed(draft.content)

            entry = MemoryEntry.from_draft(draft)
            partition = self._partition(entity_id)
            partition.upsert(
                VectorRecord[MemoryRecordMetadata](
                    id=str(entry.id),
                    vector=embedding,
                    metadata=MemoryRecordMetadata(entity_id=entity_id, entry=entry),
                )
            )
            logger.debug(
                "Stored memory",
                partition=partition.name,
                memory_id=str(entry.id),
                salience=entry.salience,
                partition_size=len(partition),
            )
        return entry

    @with_error_handling(error_level=ErrorLevel.WARNING, reraise=True)
    async def search_memories(
        self,
        entity_id: str,
        query: str,
        *,
        limit: int | None = None,
        tags: Iterable[str] | None = None,
    ) -> list[MemoryEntry]:
        """Find an entity's memories most similar to a query.

        Args:
            entity_id: Owning character or universe id
            query: Free text to embed and compare against
            limit: Maximum number of memories; None returns all
            tags: Only consider memories carrying every one of these tags

        Returns:
            Entries in descending similarity order. Salience is not blended in.

        Raises:
            ValueError: If limit is negative
            EmbeddingError: Or another provider error, if embedding fails
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        with memory_log_context(entity_id, kind=self.kind.value):
            embedding = await self.embeddings.embed(query)

            required = frozenset(tags or ())
            matches = self._partition(entity_id).query(
                embedding,
                limit=limit,
                filter=(lambda metadata: required <= metadata.entry.tags) if required else None,
            )
            logger.debug(
                "Searched memories",
                partition=self.partition_name(entity_id),
                results=len(matches),
                limit=limit,
            )
        return [match.metadata.entry for match in matches]

    def remove_memory(self, entity_id: str, memory_id: UUID | str) -> None:
        """Drop a memory from the index. Unknown ids are ignored."""
        self._partition(entity_id).delete(str(memory_id))

    def count(self, entity_id: str) -> int:
        return len(self._partition(entity_id))


class CharacterMemoryStore(MemoryStoreAdapter):
    """Per-character memories, partitioned as ``character:<id>``."""

    def __init__(self, embeddings: EmbeddingProvider, index: VectorIndex):
        super().__init__(MemoryKind.CHARACTER, embeddings, index)


class UniverseHistoryStore(MemoryStoreAdapter):
    """Per-universe history, partitioned as ``universe:<id>``."""

    def __init__(self, embeddings: EmbeddingProvider, index: VectorIndex):
        super().__init__(MemoryKind.UNIVERSE, embeddings, index)

    async def add_entry(self, universe_id: str, draft: MemoryDraft) -> MemoryEntry:
        return await self.add_memory(universe_id, draft)

    async def search_history(
        self,
        universe_id: str,
        query: str,
        *,
        limit: int | None = None,
    ) -> list[MemoryEntry]:
        return await self.search_memories(universe_id, query, limit=limit)
