"""Domain models for the memory subsystem."""

from .entities import Character, Universe
from .memory import MemoryDraft, MemoryEntry, MemoryKind, utc_now
from .vector import MemoryRecordMetadata, VectorMatch, VectorRecord

__all__ = [
    # Entities
    "Character",
    # Memory
    "MemoryDraft",
    "MemoryEntry",
    "MemoryKind",
    "MemoryRecordMetadata",
    "Universe",
    # Vector
    "VectorMatch",
    "VectorRecord",
    "utc_now",
]
