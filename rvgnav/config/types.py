"""Configuration dataclasses for layout generation, navigation and simulation runs.

All frozen dataclasses that parameterise a simulation session live here.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rvgnav.config.constants import (
    BITANGENT_OVERSHOOT,
    BLOCK_LENGTH,
    DEFAULT_ALCOVES,
    DESTINATION_WAIT,
    DISTANCE_UNIT,
    FOOTPRINT_PADDING,
    MAIN_FLOOR_EXTENT,
    MAX_NUMBER_OF_OBSTACLES,
    MAX_OBSTACLE_BLOCKS,
    MAX_REPLANNINGS,
    MIN_AGENT_CLEARANCE,
    MIN_NUMBER_OF_OBSTACLES,
    NUM_AGENTS,
    NUM_STEPS,
    REPLAN_WAIT_MAX,
    REPLAN_WAIT_MIN,
    TICK_INTERVAL,
    TRANSIENT_OVERSHOOT,
    WHOLE_FLOOR_EXTENT,
)

__all__ = [
    "Alcove",
    "LayoutConfig",
    "NavigationConfig",
    "SimulationConfig",
]

Extent = tuple[float, float, float, float]
Alcove = tuple[Extent, tuple[float, float], tuple[float, float]]


def _check_extent(name: str, extent: Extent) -> None:
    if len(extent) != 4:
        raise ValueError(f"{name} must have 4 elements")
    min_x, min_z, max_x, max_z = extent
    if min_x >= max_x or min_z >= max_z:
        raise ValueError(f"{name} must have min < max on both axes")


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NavigationConfig:
    """Pacing and strictness knobs for graph building and agent motion.

    None of these change correctness, only how fast agents move and how
    conservatively edges and moves are accepted.
    """

    distance_unit: float = DISTANCE_UNIT
    tick_interval: float = TICK_INTERVAL
    min_agent_clearance: float = MIN_AGENT_CLEARANCE
    replan_wait_min: float = REPLAN_WAIT_MIN
    replan_wait_max: float = REPLAN_WAIT_MAX
    destination_wait: float = DESTINATION_WAIT
    max_replannings: int = MAX_REPLANNINGS
    bitangent_overshoot: float = BITANGENT_OVERSHOOT
    transient_overshoot: float = TRANSIENT_OVERSHOOT
    footprint_padding: float = FOOTPRINT_PADDING

    def __post_init__(self) -> None:
        if self.distance_unit <= 0.0:
            raise ValueError("distance_unit must be > 0")
        if self.tick_interval <= 0.0:
            raise ValueError("tick_interval must be > 0")
        if self.min_agent_clearance < 0.0:
            raise ValueError("min_agent_clearance must be >= 0")
        if self.replan_wait_min < 0.0:
            raise ValueError("replan_wait_min must be >= 0")
        if self.replan_wait_max <= self.replan_wait_min:
            raise ValueError("replan_wait_max must be > replan_wait_min")
        if self.destination_wait < 0.0:
            raise ValueError("destination_wait must be >= 0")
        if self.max_replannings < 0:
            raise ValueError("max_replannings must be >= 0")
        if self.bitangent_overshoot < 0.0 or self.transient_overshoot < 0.0:
            raise ValueError("overshoot margins must be >= 0")
        if self.footprint_padding < 0.0:
            raise ValueError("footprint_padding must be >= 0")


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry of the procedurally generated floor."""

    block_length: float = BLOCK_LENGTH
    whole_floor_extent: Extent = WHOLE_FLOOR_EXTENT
    main_floor_extent: Extent = MAIN_FLOOR_EXTENT
    alcoves: tuple[Alcove, ...] = DEFAULT_ALCOVES
    min_obstacles: int = MIN_NUMBER_OF_OBSTACLES
    max_obstacles: int = MAX_NUMBER_OF_OBSTACLES
    max_obstacle_blocks: int = MAX_OBSTACLE_BLOCKS

    def __post_init__(self) -> None:
        if self.block_length <= 0.0:
            raise ValueError("block_length must be > 0")
        _check_extent("whole_floor_extent", self.whole_floor_extent)
        _check_extent("main_floor_extent", self.main_floor_extent)
        wx0, wz0, wx1, wz1 = self.whole_floor_extent
        mx0, mz0, mx1, mz1 = self.main_floor_extent
        if mx0 < wx0 or mz0 < wz0 or mx1 > wx1 or mz1 > wz1:
            raise ValueError("main_floor_extent must lie within whole_floor_extent")
        if self.min_obstacles < 0:
            raise ValueError("min_obstacles must be >= 0")
        if self.max_obstacles < self.min_obstacles:
            raise ValueError("max_obstacles must be >= min_obstacles")
        if self.max_obstacle_blocks < 1:
            raise ValueError("max_obstacle_blocks must be >= 1")


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationConfig:
    """Top-level settings for one simulation session."""

    num_agents: int = NUM_AGENTS
    steps: int = NUM_STEPS
    dt: float = TICK_INTERVAL
    seed: int = 0
    render: bool = False
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)

    def __post_init__(self) -> None:
        if self.num_agents < 0:
            raise ValueError("num_agents must be >= 0")
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if self.dt <= 0.0:
            raise ValueError("dt must be > 0")
