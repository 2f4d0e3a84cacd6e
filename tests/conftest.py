"""Shared fixtures for the memory retrieval tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest

from talae_memory.core.errors import EmbeddingError
from talae_memory.domain.models.memory import MemoryEntry, utc_now
from talae_memory.infrastructure.vector import VectorIndex
from talae_memory.services.lexical import tokenize
from talae_memory.services.memory_store import CharacterMemoryStore, UniverseHistoryStore


class FakeEmbeddingProvider:
    """Deterministic bag-of-words embeddings.

    Every distinct token gets its own axis, in order of first appearance, so
    texts sharing words point in similar directions and unrelated texts are
    orthogonal. Explicit vectors can be pinned per text.
    """

    def __init__(self, dimensions: int = 64, vectors: dict[str, list[float]] | None = None):
        self.dimensions = dimensions
        self.vectors = dict(vectors or {})
        self.calls: list[str] = []
        self._axes: dict[str, int] = {}

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.vectors:
            return list(self.vectors[text])

        vector = [0.0] * self.dimensions
        for token in tokenize(text):
            axis = self._axes.setdefault(token, len(self._axes) % self.dimensions)
            vector[axis] += 1.0
        return vector


class FailingEmbeddingProvider:
    def __init__(self) -> None:
        self.calls = 0

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        raise EmbeddingError(
            message="provider unavailable",
            details={"source": "tests", "operation": "embed"},
        )


@pytest.fixture
def index() -> VectorIndex:
    return VectorIndex()


@pytest.fixture
def embeddings() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def failing_embeddings() -> FailingEmbeddingProvider:
    return FailingEmbeddingProvider()


@pytest.fixture
def character_store(embeddings: FakeEmbeddingProvider, index: VectorIndex) -> CharacterMemoryStore:
    return CharacterMemoryStore(embeddings, index)


@pytest.fixture
def universe_store(embeddings: FakeEmbeddingProvider, index: VectorIndex) -> UniverseHistoryStore:
    return UniverseHistoryStore(embeddings, index)


@pytest.fixture
def make_memory() -> Callable[..., MemoryEntry]:
    """Build memory entries; ``age`` pushes created_at into the past."""
    base = utc_now()

    def _make(
        content: str,
        salience: float = 0.5,
        tags: tuple[str, ...] = (),
        age: timedelta = timedelta(0),
        created_at: datetime | None = None,
    ) -> MemoryEntry:
        return MemoryEntry(
            content=content,
            salience=salience,
            tags=frozenset(tags),
            created_at=created_at or base - age,
        )

    return _make
