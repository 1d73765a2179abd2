"""Reduced visibility graph: reflex vertices joined by bitangent edges.

Bitangency is tested by lengthening a candidate segment a little past both
endpoints and rejecting it if the lengthened segment touches any padded
obstacle footprint or leaves (or touches) the floor boundary. Vertices sit one
grid unit outside the geometry they belong to, so without the overshoot an
edge cutting straight through the obstacle behind its own endpoint would be
accepted.

One canonical graph is built per session and shared read-only. Each agent
plans on a ``WorkingGraph``: the canonical vertices/edges followed by a small
tail holding its current start and destination and their bitangent edges.
The first N entries are always the canonical ones; only the tail churns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

import networkx as nx

from rvgnav.config.types import NavigationConfig
from rvgnav.domain.astar import Adjacency, build_adjacency
from rvgnav.domain.floor import Floor
from rvgnav.domain.geometry import Point, distance, extend_segment, segment_hits_any_rect

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    """Unordered pair of vertex indices."""

    u: int
    v: int

    def weight(self, vertices: list[Point] | tuple[Point, ...]) -> float:
        return distance(vertices[self.u], vertices[self.v])


@dataclass(frozen=True)
class ReducedVisibilityGraph:
    """Canonical graph shared by every agent of a session."""

    vertices: tuple[Point, ...]
    edges: tuple[Edge, ...]
    adjacency: tuple[tuple[int, ...], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        adjacency = build_adjacency(self.edges, len(self.vertices))
        object.__setattr__(self, "adjacency", tuple(tuple(n) for n in adjacency))

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def to_networkx(self) -> nx.Graph:
        """Weighted ``networkx.Graph`` view (node attribute ``pos``, edge attribute ``weight``)."""
        graph = nx.Graph()
        for index, vertex in enumerate(self.vertices):
            graph.add_node(index, pos=(vertex.x, vertex.z))
        for edge in self.edges:
            graph.add_edge(edge.u, edge.v, weight=edge.weight(self.vertices))
        return graph

    def to_dict(self) -> dict[str, list[list[float]] | list[list[int]]]:
        return {
            "vertices": [[v.x, v.z] for v in self.vertices],
            "edges": [[e.u, e.v] for e in self.edges],
        }


class VisibilityGraphGenerator:
    """Builds reduced visibility graphs against one floor."""

    def __init__(self, floor: Floor, config: NavigationConfig | None = None) -> None:
        self.floor = floor
        self.config = config or NavigationConfig()
        self._rects = floor.footprint_array(self.config.footprint_padding)

    def is_bitangent(self, a: Point, b: Point, overshoot: float | None = None) -> bool:
        """True when segment *ab*, extended by *overshoot* at both ends, hits nothing."""
        if overshoot is None:
            overshoot = self.config.bitangent_overshoot
        start, end = extend_segment(a, b, overshoot)
        if segment_hits_any_rect(start, end, self._rects):
            return False
        return self.floor.encloses_segment(start, end)

    def build(self) -> ReducedVisibilityGraph:
        """Build the canonical graph: one vertex per reflex corner, every bitangent pair."""
        vertices = tuple(corner.position for corner in self.floor.reflex_corners)
        edges: list[Edge] = []
        for i in range(len(vertices)):
            for j in range(i + 1, len(vertices)):
                if self.is_bitangent(vertices[i], vertices[j]):
                    edges.append(Edge(i, j))
        graph = ReducedVisibilityGraph(vertices=vertices, edges=tuple(edges))
        logger.info(
            "built reduced visibility graph: %d vertices, %d edges",
            graph.vertex_count,
            graph.edge_count,
        )
        return graph

    def working_graph(self, canonical: ReducedVisibilityGraph) -> WorkingGraph:
        return WorkingGraph(canonical, self)


class WorkingGraph:
    """Agent-private overlay on the canonical graph.

    ``attach`` appends exactly two vertices (start, destination) and the
    bitangent edges touching them; ``reset`` drops them again. Nothing in
    the canonical part is ever copied or mutated.
    """

    def __init__(self, canonical: ReducedVisibilityGraph, generator: VisibilityGraphGenerator):
        self.canonical = canonical
        self._generator = generator
        self._tail_vertices: list[Point] = []
        self._tail_edges: list[Edge] = []

    @property
    def vertices(self) -> list[Point]:
        return [*self.canonical.vertices, *self._tail_vertices]

    @property
    def edges(self) -> list[Edge]:
        return [*self.canonical.edges, *self._tail_edges]

    @property
    def vertex_count(self) -> int:
        return self.canonical.vertex_count + len(self._tail_vertices)

    @property
    def edge_count(self) -> int:
        return self.canonical.edge_count + len(self._tail_edges)

    @property
    def start_index(self) -> int:
        return self.canonical.vertex_count

    @property
    def destination_index(self) -> int:
        return self.canonical.vertex_count + 1

    def vertex(self, index: int) -> Point:
        n = self.canonical.vertex_count
        if index < n:
            return self.canonical.vertices[index]
        return self._tail_vertices[index - n]

    def reset(self) -> None:
        """Truncate back to the canonical vertices and edges."""
        self._tail_vertices.clear()
        self._tail_edges.clear()

    def attach(self, start: Point, destination: Point) -> tuple[int, int]:
        """Append *start* and *destination* with their bitangent edges.

        Returns their vertex indices. The start is tested against every other
        vertex; the destination against every vertex except the start, whose
        pair was already tested from the start side.
        """
        self.reset()
        self._tail_vertices.extend((start, destination))
        vertices = self.vertices
        overshoot = self._generator.config.transient_overshoot
        s, d = self.start_index, self.destination_index
        for i in (s, d):
            for j in range(len(vertices)):
                if j == i or (i == d and j == s):
                    continue
                if self._generator.is_bitangent(vertices[i], vertices[j], overshoot):
                    self._tail_edges.append(Edge(i, j))
        return s, d

    def adjacency(self) -> Adjacency:
        """Canonical adjacency extended with the tail edges."""
        adjacency: Adjacency = [list(n) for n in self.canonical.adjacency]
        adjacency.extend([] for _ in self._tail_vertices)
        for u, v in self._tail_edges:
            adjacency[u].append(v)
            adjacency[v].append(u)
        return adjacency
