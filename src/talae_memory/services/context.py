"""Memory selection and formatting for prompt building."""

from collections.abc import Sequence

from talae_memory.core.config import settings
from talae_memory.core.constants import EMPTY_MEMORY_PLACEHOLDER
from talae_memory.domain.models.entities import Character, Universe
from talae_memory.domain.models.memory import MemoryEntry
from talae_memory.services.ranking import MemoryRankingEngine


def select_response_memories(
    character: Character,
    message_texts: Sequence[str],
    *,
    engine: MemoryRankingEngine | None = None,
    limit: int | None = None,
) -> list[MemoryEntry]:
    """Pick the character memories most relevant to the recent conversation.

    ``limit`` defaults to ``settings.response_memory_limit``.
    """
    engine = engine or MemoryRankingEngine()
    if limit is None:
        limit = settings.response_memory_limit
    return engine.find_relevant_memories(character.memories, message_texts, limit=limit)


def select_evolution_memories(
    universe: Universe,
    *,
    engine: MemoryRankingEngine | None = None,
    limit: int | None = None,
) -> list[MemoryEntry]:
    """Pick the universe's most salient history for world evolution.

    The engine is given no query, so selection is by salience alone.
    ``limit`` defaults to ``settings.evolution_memory_limit``.
    """
    engine = engine or MemoryRankingEngine()
    if limit is None:
        limit = settings.evolution_memory_limit
    return engine.find_relevant_memories(universe.memories, [], limit=limit)


def format_memory_block(memories: Sequence[MemoryEntry], *, include_salience: bool = False) -> str:
    """Render memories as a bulleted prompt section.

    Example:
        >>> format_memory_block([])
        'No significant memories yet.'
    """
    if not memories:
        return EMPTY_MEMORY_PLACEHOLDER
    if include_salience:
        return "\n".join(f"- {memory.content} (importance: {memory.salience})" for memory in memories)
    return "\n".join(f"- {memory.content}" for memory in memories)
