"""Agent spawning: spawn cells, colours, destination pools and per-agent RNGs."""

from __future__ import annotations

import logging
from random import Random

from matplotlib.colors import hsv_to_rgb, to_hex

from rvgnav.config.constants import AGENT_COLORS
from rvgnav.config.types import NavigationConfig
from rvgnav.domain.agent import Agent
from rvgnav.domain.errors import NoAvailablePositionError
from rvgnav.domain.floor import Floor
from rvgnav.domain.rendering import SceneRenderer
from rvgnav.domain.visibility import ReducedVisibilityGraph, VisibilityGraphGenerator

logger = logging.getLogger(__name__)


def agent_colors(count: int, rng: Random) -> list[str]:
    """Return *count* hex colours: the fixed palette first, then random bright hues."""
    if count < 0:
        raise ValueError("count must be >= 0")
    colors = list(AGENT_COLORS[:count])
    while len(colors) < count:
        hsv = (rng.random(), 0.5 + 0.5 * rng.random(), 0.5 + 0.5 * rng.random())
        colors.append(to_hex(hsv_to_rgb(hsv)))
    return colors


def spawn_agents(
    floor: Floor,
    graph: ReducedVisibilityGraph,
    count: int,
    config: NavigationConfig | None = None,
    rng: Random | None = None,
    renderer: SceneRenderer | None = None,
) -> list[Agent]:
    """Create *count* agents on distinct available positions.

    Every agent gets its own working graph over *graph*, its own copy of the
    destination pool and an RNG seeded from *rng*.

    Raises:
        ValueError: if *count* is negative.
        NoAvailablePositionError: if the floor cannot host *count* agents or
            offers fewer than two positions to travel between.
    """
    if count < 0:
        raise ValueError("count must be >= 0")
    pool = list(floor.available_positions)
    if count > len(pool) or (count > 0 and len(pool) < 2):
        raise NoAvailablePositionError(count, len(pool))

    config = config or NavigationConfig()
    rng = rng or Random()
    generator = VisibilityGraphGenerator(floor, config)
    spawn_points = rng.sample(pool, count)
    colors = agent_colors(count, rng)

    agents = []
    for agent_id, (position, color) in enumerate(zip(spawn_points, colors)):
        agents.append(
            Agent(
                agent_id,
                color,
                position,
                generator.working_graph(graph),
                pool,
                config=config,
                rng=Random(rng.getrandbits(64)),
                renderer=renderer,
            )
        )
    logger.info("spawned %d agents from a pool of %d positions", count, len(pool))
    return agents
