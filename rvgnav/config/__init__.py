"""Configuration layer: constants and typed config dataclasses."""

from rvgnav.config.constants import (
    BITANGENT_OVERSHOOT,
    BLOCK_LENGTH,
    DESTINATION_WAIT,
    DISTANCE_UNIT,
    FLUSH_THRESHOLD,
    FOOTPRINT_PADDING,
    MAX_REPLANNINGS,
    MIN_AGENT_CLEARANCE,
    NUM_AGENTS,
    NUM_STEPS,
    REPLAN_WAIT_MAX,
    REPLAN_WAIT_MIN,
    TICK_INTERVAL,
    TRANSIENT_OVERSHOOT,
)
from rvgnav.config.types import LayoutConfig, NavigationConfig, SimulationConfig

__all__ = [
    "BITANGENT_OVERSHOOT",
    "BLOCK_LENGTH",
    "DESTINATION_WAIT",
    "DISTANCE_UNIT",
    "FLUSH_THRESHOLD",
    "FOOTPRINT_PADDING",
    "LayoutConfig",
    "MAX_REPLANNINGS",
    "MIN_AGENT_CLEARANCE",
    "NUM_AGENTS",
    "NUM_STEPS",
    "NavigationConfig",
    "REPLAN_WAIT_MAX",
    "REPLAN_WAIT_MIN",
    "SimulationConfig",
    "TICK_INTERVAL",
    "TRANSIENT_OVERSHOOT",
]
