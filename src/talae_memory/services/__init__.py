"""Memory ranking, storage and selection services."""

from .context import format_memory_block, select_evolution_memories, select_response_memories
from .lexical import STOPWORDS, cosine_similarity, term_frequency, tokenize
from .memory_store import CharacterMemoryStore, MemoryStoreAdapter, UniverseHistoryStore
from .ranking import (
    LexicalMemoryRanker,
    MemoryRankingEngine,
    RankingStrategy,
    ScoredMemory,
    SemanticMemoryRanker,
    create_ranker,
    rank_by_salience,
)

__all__ = [
    "STOPWORDS",
    "CharacterMemoryStore",
    "LexicalMemoryRanker",
    "MemoryRankingEngine",
    "MemoryStoreAdapter",
    "RankingStrategy",
    "ScoredMemory",
    "SemanticMemoryRanker",
    "UniverseHistoryStore",
    "cosine_similarity",
    "create_ranker",
    "format_memory_block",
    "rank_by_salience",
    "select_evolution_memories",
    "select_response_memories",
    "term_frequency",
    "tokenize",
]
