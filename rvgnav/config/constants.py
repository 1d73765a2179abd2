"""Centralized constants for planning, pacing, and floor layout.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

BLOCK_LENGTH = 10.0
"""Side length of one obstacle block (one grid unit) in world units."""

DISTANCE_UNIT = 2.0
"""Distance an agent moves every TICK_INTERVAL seconds."""

TICK_INTERVAL = 0.02
"""Nominal update interval in seconds that DISTANCE_UNIT is calibrated to."""

MIN_AGENT_CLEARANCE = BLOCK_LENGTH / 2
"""Closest two agents may approach each other (strictly less is a collision)."""

REPLAN_WAIT_MIN = 0.1
"""Lower bound (inclusive) of the random wait before replanning, in seconds."""

REPLAN_WAIT_MAX = 1.1
"""Upper bound (exclusive) of the random wait before replanning, in seconds."""

DESTINATION_WAIT = 0.5
"""Fixed wait in seconds before choosing a new destination."""

MAX_REPLANNINGS = 3
"""Consecutive replannings allowed before a destination is abandoned."""

BITANGENT_OVERSHOOT = 1.8 * BLOCK_LENGTH
"""Segment extension used when building the canonical graph."""

TRANSIENT_OVERSHOOT = 1.0 * BLOCK_LENGTH
"""Segment extension used for an agent's start/destination edges."""

FOOTPRINT_PADDING = 0.45 * BLOCK_LENGTH
"""Padding added to each side of a block footprint for bitangency tests."""

MAX_OBSTACLE_BLOCKS = 4
"""Maximum number of blocks in one arm of an L-shaped obstacle."""

MIN_NUMBER_OF_OBSTACLES = 4
"""Lower bound on the number of generated obstacles."""

MAX_NUMBER_OF_OBSTACLES = 8
"""Upper bound on the number of generated obstacles."""

NUM_AGENTS = 4
"""Default number of agents per simulation."""

NUM_STEPS = 500
"""Default number of simulation ticks."""

FLUSH_THRESHOLD = 8_192
"""Flush buffered log rows to Parquet once this in-memory row count is reached."""

WHOLE_FLOOR_EXTENT: tuple[float, float, float, float] = (-340.0, -235.0, 320.0, 225.0)
"""(min_x, min_z, max_x, max_z) of the rectangle containing every floor cell."""

MAIN_FLOOR_EXTENT: tuple[float, float, float, float] = (-250.0, -125.0, 250.0, 125.0)
"""(min_x, min_z, max_x, max_z) of the main floor, excluding alcoves."""

DEFAULT_ALCOVES: tuple[
    tuple[tuple[float, float, float, float], tuple[float, float], tuple[float, float]], ...
] = (
    # top
    ((-190.0, 115.0, -130.0, 205.0), (-190.0, 125.0), (-130.0, 125.0)),
    ((-70.0, 115.0, 20.0, 175.0), (-70.0, 125.0), (20.0, 125.0)),
    ((110.0, 115.0, 210.0, 225.0), (110.0, 125.0), (210.0, 125.0)),
    # bottom
    ((-140.0, -175.0, -80.0, -115.0), (-140.0, -125.0), (-80.0, -125.0)),
    ((-20.0, -235.0, 80.0, -115.0), (-20.0, -125.0), (80.0, -125.0)),
    ((130.0, -185.0, 200.0, -115.0), (130.0, -125.0), (200.0, -125.0)),
    # left
    ((-340.0, 15.0, -240.0, 85.0), (-250.0, 15.0), (-250.0, 85.0)),
    ((-280.0, -85.0, -240.0, -25.0), (-250.0, -85.0), (-250.0, -25.0)),
    # right
    ((240.0, 5.0, 300.0, 85.0), (250.0, 5.0), (250.0, 85.0)),
    ((240.0, -95.0, 320.0, -35.0), (250.0, -95.0), (250.0, -35.0)),
)
"""Alcove recesses: (fill extent, first corner marker, second corner marker)."""

AGENT_COLORS: tuple[str, ...] = (
    "#ff0000",
    "#00ff00",
    "#0000ff",
    "#ffeb04",
    "#ff00ff",
    "#00ffff",
    "#000000",
    "#808080",
    "#ffffff",
)
"""Distinct agent colours handed out before generated ones."""
