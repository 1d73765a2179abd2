"""Render collaborators and Matplotlib scene rendering."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.patches import Polygon as PolygonPatch
from matplotlib.patches import Rectangle

from rvgnav.domain.agent import Agent
from rvgnav.domain.floor import Floor
from rvgnav.domain.geometry import Point
from rvgnav.domain.visibility import ReducedVisibilityGraph

FLOOR_COLOR = "#f2efe6"
BOUNDARY_COLOR = "#3b3b3b"
OBSTACLE_COLOR = "#6d6d6d"
EDGE_COLOR = "#9ecae1"
VERTEX_COLOR = "#08519c"


@dataclass(frozen=True)
class Marker:
    position: Point
    color: str
    owner_id: int


@dataclass(frozen=True)
class PathVisual:
    points: tuple[Point, ...]
    color: str


class RecordingRenderer:
    """Keeps the live destination markers and path visuals in memory.

    Handles are integers that are never reused. Destroying an unknown handle
    raises ``KeyError``.
    """

    def __init__(self) -> None:
        self.markers: dict[int, Marker] = {}
        self.paths: dict[int, PathVisual] = {}
        self.created = 0
        self.destroyed = 0
        self._handles = itertools.count(1)

    def create_marker(self, position: Point, color: str, owner_id: int) -> int:
        handle = next(self._handles)
        self.markers[handle] = Marker(position, color, owner_id)
        self.created += 1
        return handle

    def destroy_marker(self, handle: int) -> None:
        del self.markers[handle]
        self.destroyed += 1

    def create_path_visual(self, points: Sequence[Point], color: str) -> int:
        handle = next(self._handles)
        self.paths[handle] = PathVisual(tuple(points), color)
        self.created += 1
        return handle

    def destroy_path_visual(self, handle: int) -> None:
        del self.paths[handle]
        self.destroyed += 1


def _draw_floor(ax: plt.Axes, floor: Floor) -> None:
    ax.add_patch(
        PolygonPatch(
            [(p.x, p.z) for p in floor.boundary],
            closed=True,
            facecolor=FLOOR_COLOR,
            edgecolor=BOUNDARY_COLOR,
            linewidth=1.0,
        )
    )
    for fp in floor.footprints:
        ax.add_patch(
            Rectangle(
                (fp.min_x, fp.min_z),
                fp.max_x - fp.min_x,
                fp.max_z - fp.min_z,
                facecolor=OBSTACLE_COLOR,
                edgecolor="none",
            )
        )


def _draw_graph(ax: plt.Axes, graph: ReducedVisibilityGraph) -> None:
    segments = [
        [(graph.vertices[u].x, graph.vertices[u].z), (graph.vertices[v].x, graph.vertices[v].z)]
        for u, v in graph.edges
    ]
    if segments:
        ax.add_collection(LineCollection(segments, colors=EDGE_COLOR, linewidths=0.4, zorder=1))
    if graph.vertices:
        ax.scatter(
            [v.x for v in graph.vertices],
            [v.z for v in graph.vertices],
            s=6,
            color=VERTEX_COLOR,
            zorder=2,
        )


def render_scene(
    floor: Floor,
    graph: ReducedVisibilityGraph,
    agents: Sequence[Agent],
    output_path: Path,
    renderer: RecordingRenderer | None = None,
    title: str | None = None,
) -> None:
    """Render floor, obstacles, graph, agents and live markers/paths to an image."""
    min_x, min_z, max_x, max_z = floor.polygon.bounds
    width = max(max_x - min_x, 1.0)
    height = max(max_z - min_z, 1.0)
    fig, ax = plt.subplots(figsize=(8, 8 * height / width))

    _draw_floor(ax, floor)
    _draw_graph(ax, graph)

    if renderer is not None:
        for visual in renderer.paths.values():
            ax.plot(
                [p.x for p in visual.points],
                [p.z for p in visual.points],
                color=visual.color,
                linewidth=1.2,
                alpha=0.8,
                zorder=3,
            )
        for marker in renderer.markers.values():
            ax.scatter(
                marker.position.x,
                marker.position.z,
                marker="x",
                s=40,
                color=marker.color,
                zorder=4,
            )

    for agent in agents:
        ax.scatter(
            agent.position.x,
            agent.position.z,
            s=50,
            color=agent.color,
            edgecolors="black",
            linewidths=0.5,
            zorder=5,
        )

    margin = 0.05 * max(width, height)
    ax.set_xlim(min_x - margin, max_x + margin)
    ax.set_ylim(min_z - margin, max_z + margin)
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title(
        title or f"{graph.vertex_count} vertices, {graph.edge_count} edges, {len(agents)} agents"
    )
    fig.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
