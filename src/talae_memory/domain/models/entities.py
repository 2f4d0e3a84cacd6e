"""Read-side shapes of the entities that own memories.

Characters and universes are persisted elsewhere; only the fields memory
selection and prompt building read are modelled here.
"""

from pydantic import BaseModel, Field

from talae_memory.domain.models.memory import MemoryEntry


class Character(BaseModel):
    id: str
    universe_id: str
    name: str
    description: str = ""
    current_state: str = ""
    memories: list[MemoryEntry] = Field(default_factory=list)


class Universe(BaseModel):
    id: str
    name: str
    description: str = ""
    current_state: str = ""
    memories: list[MemoryEntry] = Field(default_factory=list)
