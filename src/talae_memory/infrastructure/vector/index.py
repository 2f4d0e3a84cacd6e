"""In-memory vector index with named partitions.

Each partition maps record ids to vectors and an opaque metadata payload and
answers top-K queries by exact cosine similarity. Search is a linear scan:
partitions are scoped to one character or universe and hold at most a few
hundred records, so no approximate index is used.

The index lives for the process lifetime only. Construct one ``VectorIndex``
per process and pass it to every adapter that needs it.
"""

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import numpy as np

from talae_memory.core.logging import get_logger
from talae_memory.domain.models.vector import VectorMatch, VectorRecord

logger = get_logger(__name__)

M = TypeVar("M")

MetadataFilter = Callable[[M], bool]


def vector_norm(vector: np.ndarray) -> float:
    """Euclidean norm, with NaN and overflow collapsed to 0."""
    with np.errstate(over="ignore", invalid="ignore"):
        norm = float(np.linalg.norm(vector))
    return norm if math.isfinite(norm) else 0.0


@dataclass(frozen=True, slots=True)
class _StoredVector(Generic[M]):
    record: VectorRecord[M]
    array: np.ndarray
    norm: float


class VectorPartition(Generic[M]):
    """A named, isolated set of vector records."""

    def __init__(self, name: str):
        self.name = name
        self._records: dict[str, _StoredVector[M]] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[VectorRecord[M]]:
        return (stored.record for stored in self._records.values())

    def get(self, record_id: str) -> VectorRecord[M] | None:
        stored = self._records.get(record_id)
        return stored.record if stored else None

    def upsert(self, record: VectorRecord[M]) -> None:
        """Insert or fully replace the record with ``record.id``.

        A vector whose norm is not finite is stored with norm 0 and will
        score 0 against every query.
        """
        array = np.asarray(record.vector, dtype=np.float64)
        norm = vector_norm(array)
        if norm == 0.0 and array.size:
            logger.debug("Stored unmatchable vector", partition=self.name, record_id=record.id)
        self._records[record.id] = _StoredVector(record=record, array=array, norm=norm)

    def delete(self, record_id: str) -> None:
        """Remove a record. Unknown ids are ignored."""
        self._records.pop(record_id, None)

    def query(
        self,
        vector: list[float] | np.ndarray,
        *,
        limit: int | None = None,
        filter: MetadataFilter[M] | None = None,
    ) -> list[VectorMatch[M]]:
        """Rank records by cosine similarity to ``vector``.

        Args:
            vector: Query vector
            limit: Maximum number of matches; None returns every match
            filter: Predicate over record metadata; records failing it are skipped

        Returns:
            Matches sorted by score, highest first. The order among equal
            scores is unspecified.

        Raises:
            ValueError: If limit is negative
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        query = np.asarray(vector, dtype=np.float64)
        query_norm = vector_norm(query)
        if query_norm == 0.0:
            return []

        matches: list[VectorMatch[M]] = []
        for stored in self._records.values():
            if filter is not None and not filter(stored.record.metadata):
                continue
            matches.append(
                VectorMatch(
                    id=stored.record.id,
                    score=self._cosine_similarity(query, query_norm, stored),
                    metadata=stored.record.metadata,
                )
            )

        matches.sort(key=lambda match: match.score, reverse=True)
        return matches if limit is None else matches[:limit]

    @staticmethod
    def _cosine_similarity(query: np.ndarray, query_norm: float, stored: _StoredVector[Any]) -> float:
        if query.shape != stored.array.shape or stored.norm == 0.0:
            return 0.0
        with np.errstate(over="ignore", invalid="ignore"):
            score = float(np.dot(query, stored.array) / (query_norm * stored.norm))
        return score if math.isfinite(score) else 0.0


class VectorIndex:
    """Registry of partitions, created lazily on first touch."""

    def __init__(self) -> None:
        self._partitions: dict[str, VectorPartition[Any]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._partitions

    def get_or_create(self, name: str) -> VectorPartition[Any]:
        """Return the partition called ``name``, creating it empty if needed."""
        partition = self._partitions.get(name)
        if partition is None:
            partition = VectorPartition(name)
            self._partitions[name] = partition
            logger.debug("Created vector partition", partition=name)
        return partition

    def partition_names(self) -> list[str]:
        return list(self._partitions)

    def upsert(self, partition: str, record: VectorRecord[Any]) -> None:
        self.get_or_create(partition).upsert(record)

    def delete(self, partition: str, record_id: str) -> None:
        self.get_or_create(partition).delete(record_id)

    def query(
        self,
        partition: str,
        vector: list[float] | np.ndarray,
        *,
        limit: int | None = None,
        filter: MetadataFilter[Any] | None = None,
    ) -> list[VectorMatch[Any]]:
        return self.get_or_create(partition).query(vector, limit=limit, filter=filter)
