"""Memory ranking.

Two strategies rank memories for a query:

- lexical: ``MemoryRankingEngine`` scores an already-loaded memory list by
  bag-of-words cosine similarity blended with salience. No embedding call.
- semantic: ``SemanticMemoryRanker`` embeds the query and searches the
  entity's vector partition. Similarity only, salience is not blended in.

Both fall back to salience order when the query carries no signal.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from talae_memory.core.config import settings
from talae_memory.core.constants import SALIENCE_WEIGHT, SIMILARITY_WEIGHT
from talae_memory.core.decorators import error_context
from talae_memory.core.logging import get_logger
from talae_memory.domain.models.memory import MemoryEntry
from talae_memory.domain.services import MemoryRanker
from talae_memory.services.lexical import cosine_similarity, term_frequency, tokenize

if TYPE_CHECKING:
    from talae_memory.services.memory_store import MemoryStoreAdapter

logger = get_logger(__name__)


class ScoredMemory(BaseModel):
    """A memory with its lexical similarity and blended score."""

    model_config = ConfigDict(frozen=True)

    memory: MemoryEntry
    similarity: float
    score: float


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")


def rank_by_salience(memories: Sequence[MemoryEntry], limit: int) -> list[MemoryEntry]:
    """Memories ordered by salience, highest first, truncated to ``limit``."""
    _check_limit(limit)
    return sorted(memories, key=lambda memory: memory.salience, reverse=True)[:limit]


def blend_score(similarity: float, salience: float) -> float:
    return similarity * SIMILARITY_WEIGHT + salience * SALIENCE_WEIGHT


class MemoryRankingEngine:
    """Lexical relevance ranking over an in-memory list of memories."""

    def score_memories(
        self,
        memories: Sequence[MemoryEntry],
        query_texts: Sequence[str],
    ) -> list[ScoredMemory]:
        """Score every memory against the joined query fragments.

        Returns:
            Scored memories, highest score first; equal scores are ordered
            newest first. Empty when the query has no tokens.
        """
        query_tokens = tokenize(" ".join(query_texts))
        if not query_tokens:
            return []
        return self._score(memories, term_frequency(query_tokens))

    def _score(self, memories: Sequence[MemoryEntry], query_tf: Counter[str]) -> list[ScoredMemory]:
        scored = []
        for memory in memories:
            similarity = cosine_similarity(query_tf, term_frequency(tokenize(memory.searchable_text)))
            scored.append(
                ScoredMemory(
                    memory=memory,
                    similarity=similarity,
                    score=blend_score(similarity, memory.salience),
                )
            )

        scored.sort(key=lambda item: (item.score, item.memory.created_at), reverse=True)
        return scored

    @error_context()
    def find_relevant_memories(
        self,
        memories: Sequence[MemoryEntry],
        query_texts: Sequence[str],
        *,
        limit: int | None = None,
    ) -> list[MemoryEntry]:
        """Return up to ``limit`` memories most relevant to the query.

        Each memory scores ``0.7 * similarity + 0.3 * salience``. When the
        query has no tokens after stopword removal the memories are returned
        by salience alone.

        Args:
            memories: Candidate memories
            query_texts: Query fragments, joined with spaces
            limit: Maximum number of memories to return; defaults to
                ``settings.memory_default_limit``

        Raises:
            ValueError: If limit is negative
        """
        if limit is None:
            limit = settings.memory_default_limit
        _check_limit(limit)
        if limit == 0 or not memories:
            return []

        query_tokens = tokenize(" ".join(query_texts))
        if not query_tokens:
            return rank_by_salience(memories, limit)

        scored = self._score(memories, term_frequency(query_tokens))
        logger.debug(
            "Ranked memories lexically",
            candidates=len(memories),
            top_score=round(scored[0].score, 4),
            limit=limit,
        )
        return [item.memory for item in scored[:limit]]


class LexicalMemoryRanker:
    """``MemoryRanker`` backed by the lexical engine. Ignores the entity id."""

    def __init__(self, engine: MemoryRankingEngine | None = None):
        self.engine = engine or MemoryRankingEngine()

    async def rank(
        self,
        entity_id: str,
        memories: Sequence[MemoryEntry],
        query_texts: Sequence[str],
        *,
        limit: int | None = None,
    ) -> list[MemoryEntry]:
        return self.engine.find_relevant_memories(memories, query_texts, limit=limit)


class SemanticMemoryRanker:
    """``MemoryRanker`` backed by an entity's vector partition.

    The supplied memory list is only used for the salience fallback when the
    query is blank; otherwise results come from the store, so memories that
    were never added through the store are not found.
    """

    def __init__(self, store: MemoryStoreAdapter):
        self.store = store

    async def rank(
        self,
        entity_id: str,
        memories: Sequence[MemoryEntry],
        query_texts: Sequence[str],
        *,
        limit: int | None = None,
    ) -> list[MemoryEntry]:
        if limit is None:
            limit = settings.memory_default_limit
        _check_limit(limit)
        if limit == 0:
            return []

        query = " ".join(query_texts).strip()
        if not query:
            return rank_by_salience(memories, limit)
        return await self.store.search_memories(entity_id, query, limit=limit)


class RankingStrategy(str, Enum):
    LEXICAL = "lexical"
    SEMANTIC = "semantic"


def create_ranker(
    strategy: RankingStrategy | str,
    *,
    engine: MemoryRankingEngine | None = None,
    store: MemoryStoreAdapter | None = None,
) -> MemoryRanker:
    """Build the ranker for a strategy.

    Raises:
        ValueError: If the strategy is unknown, or semantic ranking is
            requested without a store
    """
    strategy = RankingStrategy(strategy)
    if strategy is RankingStrategy.LEXICAL:
        return LexicalMemoryRanker(engine)
    if store is None:
        raise ValueError("Semantic ranking requires a memory store")
    return SemanticMemoryRanker(store)
