"""Core simulation engine: logical clock, tick loop and the run driver."""

from __future__ import annotations

import itertools
import json
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path
from random import Random

import networkx as nx

from rvgnav.config.types import SimulationConfig
from rvgnav.domain.agent import Agent, AgentEventRecord
from rvgnav.domain.floor import Floor
from rvgnav.domain.geometry import Point, distance
from rvgnav.domain.layout import build_floor
from rvgnav.domain.population import spawn_agents
from rvgnav.domain.visibility import ReducedVisibilityGraph, VisibilityGraphGenerator
from rvgnav.io.paths import (
    event_log_path,
    figures_dir,
    graph_path,
    logs_dir,
    scene_figure_path,
    trajectory_log_path,
)
from rvgnav.io.schemas import GRAPH_PAYLOAD_SCHEMA_VERSION
from rvgnav.simulation.persistence import SimulationRecorder
from rvgnav.viz.render import RecordingRenderer, render_scene

logger = logging.getLogger(__name__)


def _deterministic_run_id(seed: int, num_agents: int) -> str:
    """Build reproducible run ID stable across runs for identical settings."""
    return f"seed{seed}_a{num_agents}"


def min_separation(positions: Sequence[Point]) -> float | None:
    """Smallest pairwise distance, or ``None`` with fewer than two positions."""
    if len(positions) < 2:
        return None
    return min(distance(a, b) for a, b in itertools.combinations(positions, 2))


class Simulation:
    """Drives a set of agents on one logical clock.

    Every tick the positions of all agents are snapshotted before anyone
    acts. Each agent then checks its move against both the snapshot and the
    current position of every other agent, so refusals do not depend on the
    order agents are ticked in and no two agents finish a tick closer than
    the clearance.
    """

    def __init__(self, agents: Sequence[Agent], dt: float) -> None:
        if dt <= 0.0:
            raise ValueError("dt must be > 0")
        self.agents = list(agents)
        self.dt = dt
        self.step_count = 0
        self.time = 0.0

    @property
    def positions(self) -> list[Point]:
        return [agent.position for agent in self.agents]

    def step(self) -> list[AgentEventRecord]:
        """Advance the clock by one tick and return the events it produced."""
        self.step_count += 1
        self.time = self.step_count * self.dt
        snapshot = self.positions
        events: list[AgentEventRecord] = []
        for i, agent in enumerate(self.agents):
            others = [p for j, p in enumerate(snapshot) if j != i]
            others.extend(other.position for j, other in enumerate(self.agents) if j != i)
            agent.tick(self.time, self.dt, others)
            events.extend(agent.drain_events())
        return events

    def run(self, steps: int) -> list[AgentEventRecord]:
        if steps < 0:
            raise ValueError("steps must be >= 0")
        events: list[AgentEventRecord] = []
        for _ in range(steps):
            events.extend(self.step())
        return events


@dataclass(frozen=True)
class SimulationSummary:
    run_id: str
    steps: int
    time: float
    num_agents: int
    vertex_count: int
    edge_count: int
    connected_components: int
    trajectory_rows: int
    min_separation: float | None
    event_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def _graph_payload(run_id: str, floor: Floor, graph: ReducedVisibilityGraph) -> dict[str, object]:
    payload: dict[str, object] = {"run_id": run_id}
    payload.update(graph.to_dict())
    payload["floor"] = {
        "boundary": [[p.x, p.z] for p in floor.boundary],
        "obstacle_count": len(floor.obstacles()),
        "footprint_count": len(floor.footprints),
        "available_positions": len(floor.available_positions),
    }
    payload["schema_version"] = GRAPH_PAYLOAD_SCHEMA_VERSION
    return payload


def run_simulation(config: SimulationConfig, out_dir: Path) -> SimulationSummary:
    """Generate a floor, build its graph, run the agents and persist the outputs.

    Writes ``graph.json``, ``logs/trajectory.parquet`` and
    ``logs/events.parquet`` under *out_dir*, plus ``figures/scene.png`` when
    ``config.render`` is set.

    Raises:
        NoAvailablePositionError: if the generated floor cannot host the
            requested number of agents.
    """
    out_dir = Path(out_dir)
    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)
    run_id = _deterministic_run_id(config.seed, config.num_agents)
    rng = Random(config.seed)

    floor = build_floor(config.layout, rng)
    generator = VisibilityGraphGenerator(floor, config.navigation)
    graph = generator.build()
    components = nx.number_connected_components(graph.to_networkx()) if graph.vertex_count else 0

    recording = RecordingRenderer() if config.render else None
    agents = spawn_agents(floor, graph, config.num_agents, config.navigation, rng, recording)
    simulation = Simulation(agents, config.dt)

    graph_path(out_dir).write_text(
        json.dumps(_graph_payload(run_id, floor, graph), ensure_ascii=False, indent=2)
    )

    event_counts: Counter[str] = Counter()
    closest: float | None = None
    with SimulationRecorder(
        run_id, trajectory_log_path(out_dir), event_log_path(out_dir)
    ) as recorder:
        for _ in range(config.steps):
            events = simulation.step()
            event_counts.update(record.event.value for record in events)
            recorder.record_agents(simulation.step_count, simulation.time, simulation.agents)
            recorder.record_events(simulation.step_count, events)
            separation = min_separation(simulation.positions)
            if separation is not None and (closest is None or separation < closest):
                closest = separation

    if config.render:
        figures_dir(out_dir).mkdir(parents=True, exist_ok=True)
        render_scene(floor, graph, agents, scene_figure_path(out_dir), renderer=recording)

    summary = SimulationSummary(
        run_id=run_id,
        steps=simulation.step_count,
        time=simulation.time,
        num_agents=len(agents),
        vertex_count=graph.vertex_count,
        edge_count=graph.edge_count,
        connected_components=components,
        trajectory_rows=recorder.trajectory_rows,
        min_separation=closest,
        event_counts=dict(sorted(event_counts.items())),
    )
    logger.info(
        "run %s finished: %d steps, %d events", run_id, summary.steps, sum(event_counts.values())
    )
    return summary
