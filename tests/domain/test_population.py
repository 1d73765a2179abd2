"""Tests for rvgnav.domain.population."""

from __future__ import annotations

from random import Random

import pytest
from matplotlib.colors import is_color_like

from rvgnav.config.constants import AGENT_COLORS
from rvgnav.domain.agent import AgentState
from rvgnav.domain.errors import NoAvailablePositionError, RvgNavError
from rvgnav.domain.floor import Floor
from rvgnav.domain.geometry import Point
from rvgnav.domain.population import agent_colors, spawn_agents
from rvgnav.domain.visibility import VisibilityGraphGenerator

POOL = (Point(0.0, 0.0), Point(10.0, 0.0), Point(20.0, 0.0))


def _floor(pool: tuple[Point, ...] = POOL) -> Floor:
    return Floor.rectangle(-50.0, -50.0, 50.0, 50.0, available_positions=pool)


class TestAgentColors:
    def test_palette_first(self) -> None:
        assert agent_colors(3, Random(0)) == list(AGENT_COLORS[:3])

    def test_generated_beyond_palette(self) -> None:
        colors = agent_colors(len(AGENT_COLORS) + 5, Random(0))
        assert len(colors) == len(AGENT_COLORS) + 5
        assert all(is_color_like(c) for c in colors)

    def test_generated_colors_are_seeded(self) -> None:
        n = len(AGENT_COLORS) + 3
        assert agent_colors(n, Random(4)) == agent_colors(n, Random(4))

    def test_negative_count(self) -> None:
        with pytest.raises(ValueError, match="count must be >= 0"):
            agent_colors(-1, Random(0))


class TestSpawnAgents:
    def test_distinct_spawn_positions(self) -> None:
        floor = _floor()
        graph = VisibilityGraphGenerator(floor).build()
        agents = spawn_agents(floor, graph, 3, rng=Random(0))
        assert sorted(a.position for a in agents) == sorted(POOL)
        assert [a.agent_id for a in agents] == [0, 1, 2]
        assert all(a.state is AgentState.CHOOSE_DESTINATION for a in agents)

    def test_agents_own_their_working_graphs(self) -> None:
        floor = _floor()
        graph = VisibilityGraphGenerator(floor).build()
        first, second = spawn_agents(floor, graph, 2, rng=Random(0))
        assert first.graph is not second.graph
        assert first.graph.canonical is second.graph.canonical

    def test_zero_agents(self) -> None:
        floor = _floor()
        graph = VisibilityGraphGenerator(floor).build()
        assert spawn_agents(floor, graph, 0, rng=Random(0)) == []

    def test_too_many_agents(self) -> None:
        floor = _floor()
        graph = VisibilityGraphGenerator(floor).build()
        with pytest.raises(NoAvailablePositionError, match="cannot place 4 agent"):
            spawn_agents(floor, graph, 4, rng=Random(0))

    def test_pool_too_small_to_travel(self) -> None:
        floor = _floor((Point(0.0, 0.0),))
        graph = VisibilityGraphGenerator(floor).build()
        with pytest.raises(RvgNavError) as excinfo:
            spawn_agents(floor, graph, 1, rng=Random(0))
        assert isinstance(excinfo.value, NoAvailablePositionError)
        assert excinfo.value.requested == 1
        assert excinfo.value.available == 1

    def test_negative_count(self) -> None:
        floor = _floor()
        graph = VisibilityGraphGenerator(floor).build()
        with pytest.raises(ValueError, match="count must be >= 0"):
            spawn_agents(floor, graph, -1)

    def test_seeded_spawns_are_reproducible(self) -> None:
        floor = _floor()
        graph = VisibilityGraphGenerator(floor).build()
        first = spawn_agents(floor, graph, 2, rng=Random(9))
        second = spawn_agents(floor, graph, 2, rng=Random(9))
        assert [a.position for a in first] == [a.position for a in second]
