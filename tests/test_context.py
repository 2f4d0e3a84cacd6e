"""Tests for prompt memory selection and formatting."""

from __future__ import annotations

from unittest.mock import patch

from talae_memory.core.config import settings
from talae_memory.domain.models.entities import Character, Universe
from talae_memory.services.context import (
    format_memory_block,
    select_evolution_memories,
    select_response_memories,
)


class TestSelectResponseMemories:
    def test_ranks_by_recent_messages(self, make_memory) -> None:
        repairs = make_memory("spaceship engine repairs", salience=0.4)
        towns = make_memory("coastal summer towns", salience=0.9)
        character = Character(id="c1", universe_id="u1", name="Vex", memories=[towns, repairs])

        result = select_response_memories(character, ["Did you hear?", "The spaceship engine failed"])

        assert result[0] == repairs

    def test_returns_at_most_eight(self, make_memory) -> None:
        memories = [make_memory(f"market day {i}") for i in range(12)]
        character = Character(id="c1", universe_id="u1", name="Vex", memories=memories)

        assert len(select_response_memories(character, ["market"])) == 8

    def test_default_limit_follows_settings(self, make_memory, monkeypatch) -> None:
        monkeypatch.setattr(settings, "response_memory_limit", 3)
        memories = [make_memory(f"market day {i}") for i in range(6)]
        character = Character(id="c1", universe_id="u1", name="Vex", memories=memories)

        assert len(select_response_memories(character, ["market"])) == 3
        assert len(select_response_memories(character, ["market"], limit=5)) == 5


class TestSelectEvolutionMemories:
    def test_top_five_by_salience(self, make_memory) -> None:
        saliences = [0.1, 0.9, 0.3, 0.7, 0.5, 0.2, 0.8]
        universe = Universe(
            id="u1",
            name="Aster",
            memories=[make_memory(f"event {s}", salience=s) for s in saliences],
        )

        result = select_evolution_memories(universe)

        assert [m.salience for m in result] == [0.9, 0.8, 0.7, 0.5, 0.3]

    def test_does_not_score_lexically(self, make_memory) -> None:
        universe = Universe(id="u1", name="Aster", memories=[make_memory("event", salience=0.5)])

        with patch("talae_memory.services.ranking.MemoryRankingEngine.score_memories") as score:
            select_evolution_memories(universe)

        score.assert_not_called()

    def test_empty_universe(self) -> None:
        assert select_evolution_memories(Universe(id="u1", name="Aster")) == []


class TestFormatMemoryBlock:
    def test_empty_placeholder(self) -> None:
        assert format_memory_block([]) == "No significant memories yet."

    def test_bullets(self, make_memory) -> None:
        memories = [make_memory("first"), make_memory("second")]

        assert format_memory_block(memories) == "- first\n- second"

    def test_with_salience(self, make_memory) -> None:
        block = format_memory_block([make_memory("the flood", salience=0.75)], include_salience=True)

        assert block == "- the flood (importance: 0.75)"
