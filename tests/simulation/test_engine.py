"""Tests for rvgnav.simulation.engine: tick semantics and the run driver."""

from __future__ import annotations

import json
from pathlib import Path
from random import Random

import pyarrow.parquet as pq
import pytest

from rvgnav.config.types import SimulationConfig
from rvgnav.domain.agent import Agent, AgentEvent
from rvgnav.domain.astar import path_length
from rvgnav.domain.floor import Floor
from rvgnav.domain.geometry import Point, distance
from rvgnav.domain.visibility import VisibilityGraphGenerator
from rvgnav.io.schemas import EVENT_SCHEMA, TRAJECTORY_SCHEMA
from rvgnav.simulation.engine import Simulation, min_separation, run_simulation

DT = 0.02


def _agents(specs: list[tuple[Point, list[Point]]], floor: Floor) -> list[Agent]:
    generator = VisibilityGraphGenerator(floor)
    canonical = generator.build()
    return [
        Agent(i, "#000000", position, generator.working_graph(canonical), pool, rng=Random(i))
        for i, (position, pool) in enumerate(specs)
    ]


def _converging(reverse: bool = False) -> Simulation:
    floor = Floor.rectangle(-50.0, -50.0, 80.0, 50.0)
    a, b = Point(0.0, 0.0), Point(30.0, 0.0)
    agents = _agents([(a, [a, b]), (b, [b, a])], floor)
    if reverse:
        agents.reverse()
    return Simulation(agents, DT)


class TestSimulationStep:
    def test_clock_advances(self) -> None:
        simulation = _converging()
        simulation.step()
        simulation.step()
        assert simulation.step_count == 2
        assert simulation.time == pytest.approx(2 * DT)

    def test_rejects_non_positive_dt(self) -> None:
        with pytest.raises(ValueError, match="dt must be > 0"):
            Simulation([], 0.0)

    def test_converging_agents_refuse_together(self) -> None:
        simulation = _converging()
        refusals: list[int] = []
        for _ in range(40):
            events = simulation.step()
            refused = [e.agent_id for e in events if e.event is AgentEvent.MOVE_REFUSED]
            separation = min_separation(simulation.positions)
            assert separation is not None and separation >= 5.0
            if refused:
                refusals = sorted(refused)
                break
        assert refusals == [0, 1]
        a, b = simulation.positions
        assert distance(a, b) == pytest.approx(6.0)

    def test_refusal_does_not_depend_on_order(self) -> None:
        def refusal_step(simulation: Simulation) -> int:
            for _ in range(40):
                if any(e.event is AgentEvent.MOVE_REFUSED for e in simulation.step()):
                    return simulation.step_count
            raise AssertionError("no refusal")

        assert refusal_step(_converging()) == refusal_step(_converging(reverse=True))

    def test_swapped_destinations_plan_direct_paths(self) -> None:
        a, b = Point(0.0, 0.0), Point(4.0, 0.0)
        floor = Floor.rectangle(-50.0, -50.0, 50.0, 50.0)
        simulation = Simulation(_agents([(a, [a, b]), (b, [b, a])], floor), DT)
        events = simulation.step()
        assert [e.event for e in events] == [AgentEvent.DESTINATION_CHOSEN] * 2
        for agent, (start, goal) in zip(simulation.agents, ((a, b), (b, a))):
            assert agent.destination == goal
            assert agent.path_points() == [start, goal]
            assert path_length(agent.graph.vertices, agent.path) == pytest.approx(4.0)

    def test_parallel_lanes_run_without_replanning(self) -> None:
        floor = Floor.rectangle(-50.0, -50.0, 100.0, 100.0)
        a0, a1 = Point(0.0, 0.0), Point(40.0, 0.0)
        b0, b1 = Point(0.0, 20.0), Point(40.0, 20.0)
        simulation = Simulation(_agents([(a0, [a0, a1]), (b0, [b0, b1])], floor), DT)

        first = simulation.step()
        assert [e.event for e in first] == [AgentEvent.DESTINATION_CHOSEN] * 2
        for agent, (start, goal) in zip(simulation.agents, ((a0, a1), (b0, b1))):
            assert agent.path_points() == [start, goal]

        events = simulation.run(24)
        kinds = [e.event for e in events]
        assert AgentEvent.MOVE_REFUSED not in kinds
        assert kinds.count(AgentEvent.DESTINATION_REACHED) == 2
        assert simulation.positions == [a1, b1]

    def test_min_separation(self) -> None:
        assert min_separation([Point(0.0, 0.0)]) is None
        points = [Point(0.0, 0.0), Point(3.0, 4.0), Point(10.0, 0.0)]
        assert min_separation(points) == pytest.approx(5.0)


class TestRunSimulation:
    def test_writes_outputs(self, tmp_path: Path) -> None:
        config = SimulationConfig(num_agents=3, steps=25, seed=2)
        summary = run_simulation(config, tmp_path)

        assert (tmp_path / "graph.json").exists()
        trajectory = pq.read_table(tmp_path / "logs" / "trajectory.parquet")
        events = pq.read_table(tmp_path / "logs" / "events.parquet")
        assert trajectory.schema.names == TRAJECTORY_SCHEMA.names
        assert events.schema.names == EVENT_SCHEMA.names
        assert trajectory.num_rows == 3 * 25
        assert summary.trajectory_rows == trajectory.num_rows
        assert summary.steps == 25
        assert sum(summary.event_counts.values()) >= 3
        assert not (tmp_path / "figures").exists()

    def test_graph_payload(self, tmp_path: Path) -> None:
        summary = run_simulation(SimulationConfig(num_agents=1, steps=1, seed=5), tmp_path)
        payload = json.loads((tmp_path / "graph.json").read_text())
        assert payload["run_id"] == summary.run_id == "seed5_a1"
        assert len(payload["vertices"]) == summary.vertex_count
        assert len(payload["edges"]) == summary.edge_count
        assert payload["floor"]["obstacle_count"] >= 1
        assert summary.connected_components >= 1

    def test_is_seed_deterministic(self, tmp_path: Path) -> None:
        config = SimulationConfig(num_agents=2, steps=40, seed=8)
        first = run_simulation(config, tmp_path / "a")
        second = run_simulation(config, tmp_path / "b")
        assert first == second
        a = pq.read_table(tmp_path / "a" / "logs" / "trajectory.parquet")
        b = pq.read_table(tmp_path / "b" / "logs" / "trajectory.parquet")
        assert a.equals(b)

    def test_agents_keep_clearance(self, tmp_path: Path) -> None:
        summary = run_simulation(SimulationConfig(num_agents=6, steps=150, seed=3), tmp_path)
        assert summary.min_separation is not None
        assert summary.min_separation >= SimulationConfig().navigation.min_agent_clearance

    def test_render_writes_scene(self, tmp_path: Path) -> None:
        run_simulation(SimulationConfig(num_agents=2, steps=5, seed=1, render=True), tmp_path)
        assert (tmp_path / "figures" / "scene.png").stat().st_size > 0
