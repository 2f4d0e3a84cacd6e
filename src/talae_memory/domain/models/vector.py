"""Vector index records and matches."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from talae_memory.domain.models.memory import MemoryEntry

M = TypeVar("M")


class VectorRecord(BaseModel, Generic[M]):
    """A vector with an id and a metadata payload.

    NaN and infinite components are accepted; the index stores such records
    with a zero norm so they never match.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    vector: list[float]
    metadata: M


class VectorMatch(BaseModel, Generic[M]):
    """One query hit, scored by cosine similarity."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    score: float
    metadata: M


class MemoryRecordMetadata(BaseModel):
    """Payload stored with each memory vector."""

    model_config = ConfigDict(frozen=True)

    entity_id: str
    entry: MemoryEntry
