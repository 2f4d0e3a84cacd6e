"""Memory entry domain models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from talae_memory.core.constants import SALIENCE_MAX, SALIENCE_MIN


def utc_now() -> datetime:
    return datetime.now(UTC)


class MemoryKind(str, Enum):
    """Kinds of entity that own a memory collection."""

    CHARACTER = "character"
    UNIVERSE = "universe"


class MemoryDraft(BaseModel):
    """What a caller supplies to create a memory."""

    content: str
    salience: float = Field(ge=SALIENCE_MIN, le=SALIENCE_MAX)
    tags: frozenset[str] = Field(default_factory=frozenset)


class MemoryEntry(BaseModel):
    """The unit of recall. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    content: str
    salience: float = Field(ge=SALIENCE_MIN, le=SALIENCE_MAX)
    tags: frozenset[str] = Field(default_factory=frozenset)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Timestamps stored without an offset are UTC."""
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)

    @classmethod
    def from_draft(cls, draft: MemoryDraft) -> Self:
        """Create a new entry with a fresh id and the current timestamp."""
        return cls(content=draft.content, salience=draft.salience, tags=draft.tags)

    @property
    def searchable_text(self) -> str:
        """Content followed by the space-joined tags."""
        return f"{self.content} {' '.join(sorted(self.tags))}"

    def __str__(self) -> str:
        return f"MemoryEntry(content='{self.content[:50]}', salience={self.salience:.2f})"
