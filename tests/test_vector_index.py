"""Tests for the in-memory vector index."""

from __future__ import annotations

import math

import pytest

from talae_memory.domain.models.vector import VectorRecord
from talae_memory.infrastructure.vector import VectorIndex, VectorPartition, vector_norm


def record(record_id: str, vector: list[float], label: str = "") -> VectorRecord[dict]:
    return VectorRecord[dict](id=record_id, vector=vector, metadata={"label": label or record_id})


@pytest.fixture
def partition() -> VectorPartition[dict]:
    return VectorPartition("character:42")


# =============================================================================
# Registry
# =============================================================================


class TestVectorIndexRegistry:
    def test_get_or_create_returns_same_partition(self, index: VectorIndex) -> None:
        first = index.get_or_create("character:1")
        second = index.get_or_create("character:1")

        assert first is second
        assert index.partition_names() == ["character:1"]

    def test_partitions_are_isolated(self, index: VectorIndex) -> None:
        index.upsert("character:1", record("a", [1.0, 0.0]))
        index.upsert("universe:1", record("b", [1.0, 0.0]))

        matches = index.query("character:1", [1.0, 0.0])

        assert [m.id for m in matches] == ["a"]
        assert "universe:1" in index

    def test_query_unknown_partition_returns_empty(self, index: VectorIndex) -> None:
        assert index.query("character:never-written", [1.0, 2.0]) == []

    def test_delete_through_registry(self, index: VectorIndex) -> None:
        index.upsert("character:1", record("a", [1.0, 0.0]))
        index.delete("character:1", "a")

        assert len(index.get_or_create("character:1")) == 0


# =============================================================================
# Upsert / delete
# =============================================================================


class TestUpsertAndDelete:
    def test_upsert_is_idempotent_on_id(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("x", [1.0, 0.0], label="first"))
        partition.upsert(record("x", [0.0, 1.0], label="second"))

        assert len(partition) == 1
        stored = partition.get("x")
        assert stored is not None
        assert stored.vector == [0.0, 1.0]
        assert stored.metadata == {"label": "second"}

        matches = partition.query([0.0, 1.0])
        assert matches[0].score == pytest.approx(1.0)

    def test_delete_absent_id_is_noop(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("a", [1.0, 0.0]))
        partition.upsert(record("b", [0.0, 1.0]))

        partition.delete("missing")

        assert len(partition) == 2
        assert "a" in partition
        assert "b" in partition

    def test_delete_removes_only_target(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("a", [1.0, 0.0]))
        partition.upsert(record("b", [0.0, 1.0]))

        partition.delete("a")

        assert "a" not in partition
        assert [m.id for m in partition.query([1.0, 1.0])] == ["b"]


# =============================================================================
# Query
# =============================================================================


class TestQuery:
    @pytest.mark.parametrize(
        "vector",
        [[1.0, 2.0, 3.0], [-0.5, 0.25, 8.0], [1e-3, 1e-3, 1e-3]],
    )
    def test_self_similarity_is_one(self, partition: VectorPartition[dict], vector: list[float]) -> None:
        partition.upsert(record("only", vector))

        matches = partition.query(vector)

        assert len(matches) == 1
        assert matches[0].id == "only"
        assert matches[0].score == pytest.approx(1.0)

    def test_round_trip_ranks_exact_match_first(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("near", [1.0, 0.2, 0.0]))
        partition.upsert(record("exact", [0.3, 0.4, 0.5]))
        partition.upsert(record("far", [0.0, 0.0, 1.0]))

        matches = partition.query([0.3, 0.4, 0.5])

        assert matches[0].id == "exact"
        assert matches[0].score == pytest.approx(1.0)
        assert [m.score for m in matches] == sorted((m.score for m in matches), reverse=True)

    def test_zero_query_returns_empty(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("a", [1.0, 0.0]))

        assert partition.query([0.0, 0.0]) == []

    def test_empty_query_vector_returns_empty(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("a", [1.0, 0.0]))

        assert partition.query([]) == []

    def test_length_mismatch_scores_zero(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("short", [1.0, 0.0]))
        partition.upsert(record("long", [1.0, 0.0, 0.0]))

        matches = {m.id: m.score for m in partition.query([1.0, 0.0, 0.0])}

        assert matches["long"] == pytest.approx(1.0)
        assert matches["short"] == 0.0

    def test_zero_norm_record_scores_zero(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("zero", [0.0, 0.0]))

        matches = partition.query([1.0, 1.0])

        assert [(m.id, m.score) for m in matches] == [("zero", 0.0)]

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_record_is_unmatchable(self, partition: VectorPartition[dict], bad: float) -> None:
        partition.upsert(record("bad", [bad, 1.0]))
        partition.upsert(record("good", [1.0, 1.0]))

        matches = {m.id: m.score for m in partition.query([1.0, 1.0])}

        assert matches["bad"] == 0.0
        assert matches["good"] == pytest.approx(1.0)

    def test_overflowing_norm_is_unmatchable(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("huge", [1e200, 1e200]))

        assert partition.query([1.0, 1.0])[0].score == 0.0

    def test_non_finite_query_returns_empty(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("a", [1.0, 0.0]))

        assert partition.query([math.nan, 1.0]) == []

    def test_limit(self, partition: VectorPartition[dict]) -> None:
        for i in range(5):
            partition.upsert(record(str(i), [1.0, float(i)]))

        assert len(partition.query([1.0, 1.0], limit=2)) == 2
        assert len(partition.query([1.0, 1.0], limit=None)) == 5
        assert partition.query([1.0, 1.0], limit=0) == []

    def test_negative_limit_raises(self, partition: VectorPartition[dict]) -> None:
        with pytest.raises(ValueError):
            partition.query([1.0], limit=-1)

    def test_filter_skips_records(self, partition: VectorPartition[dict]) -> None:
        partition.upsert(record("a", [1.0, 0.0], label="keep"))
        partition.upsert(record("b", [1.0, 0.0], label="drop"))

        matches = partition.query([1.0, 0.0], filter=lambda meta: meta["label"] == "keep")

        assert [m.id for m in matches] == ["a"]
        assert matches[0].metadata == {"label": "keep"}


class TestVectorNorm:
    def test_nan_collapses_to_zero(self) -> None:
        import numpy as np

        assert vector_norm(np.array([math.nan, 1.0])) == 0.0

    def test_regular_norm(self) -> None:
        import numpy as np

        assert vector_norm(np.array([3.0, 4.0])) == pytest.approx(5.0)
