#!/usr/bin/env python3
"""Rank a file of memories against a query.

Useful for checking how the lexical and semantic strategies order a
character's memories before wiring them into prompt building.

The memories file is a JSON array (or an object with a ``memories`` key) of
``{"content": ..., "salience": ..., "tags": [...]}`` objects.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from talae_memory.core.config import settings
from talae_memory.core.logging import configure_logfire, get_logger, setup_logging
from talae_memory.domain.models.memory import MemoryDraft, MemoryEntry
from talae_memory.infrastructure.embeddings import create_embedding_provider
from talae_memory.infrastructure.vector import VectorIndex
from talae_memory.services.memory_store import CharacterMemoryStore
from talae_memory.services.ranking import MemoryRankingEngine, RankingStrategy

logger = get_logger(__name__)


def load_drafts(memories_file: Path) -> list[MemoryDraft]:
    with open(memories_file) as f:
        data = json.load(f)

    # Handle both array and object with memories key
    if isinstance(data, dict) and "memories" in data:
        data = data["memories"]
    if not isinstance(data, list):
        raise ValueError(f"Unexpected format in {memories_file}")

    drafts = []
    for item in data:
        try:
            drafts.append(MemoryDraft.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid memory: {e.error_count()} validation errors", item=item)
    return drafts


def print_lexical(drafts: list[MemoryDraft], query: str, limit: int) -> None:
    memories = [MemoryEntry.from_draft(draft) for draft in drafts]
    engine = MemoryRankingEngine()
    scored = engine.score_memories(memories, [query])
    if not scored:
        print("Query has no searchable terms; ranking by salience")
        for memory in engine.find_relevant_memories(memories, [query], limit=limit):
            print(f"  salience={memory.salience:.2f}  {memory.content}")
        return

    for item in scored[:limit]:
        print(f"  score={item.score:.3f} similarity={item.similarity:.3f} salience={item.memory.salience:.2f}  {item.memory.content}")


async def print_semantic(drafts: list[MemoryDraft], query: str, limit: int) -> None:
    store = CharacterMemoryStore(create_embedding_provider(), VectorIndex())
    for draft in drafts:
        await store.add_memory("cli", draft)
    logger.info(f"Indexed {store.count('cli')} memories with {settings.embedding_provider}")

    for memory in await store.search_memories("cli", query, limit=limit):
        print(f"  salience={memory.salience:.2f}  {memory.content}")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Rank memories against a query")
    parser.add_argument("memories_file", type=Path, help="Path to memories JSON file")
    parser.add_argument("query", help="Text to rank the memories against")
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in RankingStrategy],
        default=RankingStrategy.LEXICAL.value,
    )
    parser.add_argument("--limit", type=int, default=settings.memory_default_limit)
    args = parser.parse_args()

    setup_logging(level=settings.log_level)
    configure_logfire(settings)

    if not args.memories_file.exists():
        logger.error(f"Memories file not found: {args.memories_file}")
        return 1

    drafts = load_drafts(args.memories_file)
    logger.info(f"Loaded {len(drafts)} memories from {args.memories_file}")

    if RankingStrategy(args.strategy) is RankingStrategy.LEXICAL:
        print_lexical(drafts, args.query, args.limit)
    else:
        await print_semantic(drafts, args.query, args.limit)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
