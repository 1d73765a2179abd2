"""Domain layer: floor model, visibility graph, path search and agents."""

from rvgnav.domain.agent import Agent, AgentEvent, AgentEventRecord, AgentState
from rvgnav.domain.astar import astar, build_adjacency, path_length
from rvgnav.domain.errors import LayoutError, NoAvailablePositionError, RvgNavError
from rvgnav.domain.floor import Floor, Footprint, ReflexCorner
from rvgnav.domain.geometry import Point, distance
from rvgnav.domain.layout import Layout, build_floor
from rvgnav.domain.population import agent_colors, spawn_agents
from rvgnav.domain.rendering import NullRenderer, SceneRenderer
from rvgnav.domain.visibility import (
    Edge,
    ReducedVisibilityGraph,
    VisibilityGraphGenerator,
    WorkingGraph,
)

__all__ = [
    "Agent",
    "AgentEvent",
    "AgentEventRecord",
    "AgentState",
    "Edge",
    "Floor",
    "Footprint",
    "Layout",
    "LayoutError",
    "NoAvailablePositionError",
    "NullRenderer",
    "Point",
    "ReducedVisibilityGraph",
    "ReflexCorner",
    "RvgNavError",
    "SceneRenderer",
    "VisibilityGraphGenerator",
    "WorkingGraph",
    "agent_colors",
    "astar",
    "build_adjacency",
    "build_floor",
    "distance",
    "path_length",
    "spawn_agents",
]
