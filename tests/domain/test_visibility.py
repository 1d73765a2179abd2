"""Tests for rvgnav.domain.visibility: bitangency, canonical graph, working overlay."""

from __future__ import annotations

import networkx as nx
import pytest

from rvgnav.domain.astar import astar, path_length
from rvgnav.domain.floor import Floor, Footprint, ReflexCorner
from rvgnav.domain.geometry import Point
from rvgnav.domain.visibility import (
    Edge,
    ReducedVisibilityGraph,
    VisibilityGraphGenerator,
    WorkingGraph,
)

BLOCK = Footprint(0, -5.0, -5.0, 5.0, 5.0)
CORNERS = tuple(
    ReflexCorner(Point(x, z), "obstacle", 0)
    for x, z in ((-10.0, -10.0), (10.0, -10.0), (10.0, 10.0), (-10.0, 10.0))
)


def _single_block_floor(half_extent: float = 100.0) -> Floor:
    return Floor.rectangle(
        -half_extent,
        -half_extent,
        half_extent,
        half_extent,
        footprints=(BLOCK,),
        reflex_corners=CORNERS,
    )


class TestIsBitangent:
    def test_adjacent_corners_are_bitangent(self) -> None:
        generator = VisibilityGraphGenerator(_single_block_floor())
        assert generator.is_bitangent(Point(-10.0, -10.0), Point(10.0, -10.0))

    def test_diagonal_through_block_rejected(self) -> None:
        generator = VisibilityGraphGenerator(_single_block_floor())
        assert not generator.is_bitangent(Point(-10.0, -10.0), Point(10.0, 10.0))

    def test_overshoot_catches_obstacle_behind_endpoint(self) -> None:
        generator = VisibilityGraphGenerator(_single_block_floor())
        # ends just short of the padded block; the extension runs into it
        assert generator.is_bitangent(Point(-40.0, 0.0), Point(-20.0, 0.0), overshoot=0.0)
        assert not generator.is_bitangent(Point(-40.0, 0.0), Point(-20.0, 0.0))

    def test_extension_leaving_boundary_rejected(self) -> None:
        generator = VisibilityGraphGenerator(_single_block_floor(half_extent=25.0))
        a, b = Point(-10.0, -10.0), Point(10.0, -10.0)
        # canonical overshoot reaches x = +-28, transient only +-20
        assert not generator.is_bitangent(a, b)
        assert generator.is_bitangent(a, b, overshoot=generator.config.transient_overshoot)

    def test_touching_boundary_rejected(self) -> None:
        generator = VisibilityGraphGenerator(_single_block_floor(half_extent=20.0))
        a, b = Point(-10.0, -10.0), Point(10.0, -10.0)
        assert not generator.is_bitangent(a, b, overshoot=10.0)

    def test_grazing_padded_footprint_rejected(self) -> None:
        generator = VisibilityGraphGenerator(_single_block_floor())
        assert not generator.is_bitangent(Point(-30.0, 9.5), Point(-20.0, 9.5), overshoot=20.0)


class TestCanonicalGraph:
    def test_single_block_ground_truth(self) -> None:
        graph = VisibilityGraphGenerator(_single_block_floor()).build()
        assert graph.vertices == tuple(c.position for c in CORNERS)
        assert graph.edges == (Edge(0, 1), Edge(0, 3), Edge(1, 2), Edge(2, 3))

    def test_edge_weight_from_vertices(self) -> None:
        graph = VisibilityGraphGenerator(_single_block_floor()).build()
        assert graph.edges[0].weight(graph.vertices) == pytest.approx(20.0)

    def test_adjacency_follows_edge_order(self) -> None:
        graph = VisibilityGraphGenerator(_single_block_floor()).build()
        assert graph.adjacency == ((1, 3), (0, 2), (1, 3), (0, 2))

    def test_to_networkx(self) -> None:
        nx_graph = VisibilityGraphGenerator(_single_block_floor()).build().to_networkx()
        assert nx_graph.number_of_nodes() == 4
        assert nx_graph.number_of_edges() == 4
        assert nx.number_connected_components(nx_graph) == 1
        assert nx_graph.nodes[2]["pos"] == (10.0, 10.0)

    def test_to_dict(self) -> None:
        payload = VisibilityGraphGenerator(_single_block_floor()).build().to_dict()
        assert payload["vertices"][0] == [-10.0, -10.0]
        assert payload["edges"] == [[0, 1], [0, 3], [1, 2], [2, 3]]

    def test_no_corners_gives_empty_graph(self) -> None:
        graph = VisibilityGraphGenerator(Floor.rectangle(0.0, 0.0, 10.0, 10.0)).build()
        assert graph.vertex_count == 0
        assert graph.edge_count == 0


class TestWorkingGraph:
    def _working(self) -> tuple[ReducedVisibilityGraph, WorkingGraph]:
        generator = VisibilityGraphGenerator(_single_block_floor())
        canonical = generator.build()
        return canonical, generator.working_graph(canonical)

    def test_attach_appends_two_vertices(self) -> None:
        canonical, working = self._working()
        s, d = working.attach(Point(-30.0, 0.0), Point(30.0, 0.0))
        assert (s, d) == (4, 5)
        assert working.vertex_count == canonical.vertex_count + 2
        assert working.vertex(s) == Point(-30.0, 0.0)
        assert working.vertices[: canonical.vertex_count] == list(canonical.vertices)
        assert working.edges[: canonical.edge_count] == list(canonical.edges)

    def test_attached_edges(self) -> None:
        _, working = self._working()
        working.attach(Point(-30.0, 0.0), Point(30.0, 0.0))
        tail = working.edges[4:]
        assert tail == [Edge(4, 0), Edge(4, 3), Edge(5, 1), Edge(5, 2)]

    def test_path_around_block(self) -> None:
        _, working = self._working()
        s, d = working.attach(Point(-30.0, 0.0), Point(30.0, 0.0))
        path = astar(working.vertices, working.edges, s, d, adjacency=working.adjacency())
        assert path is not None
        assert path[0] == s and path[-1] == d
        expected = 2 * (20.0**2 + 10.0**2) ** 0.5 + 20.0
        assert path_length(working.vertices, path) == pytest.approx(expected)

    def test_direct_edge_between_new_vertices(self) -> None:
        _, working = self._working()
        s, d = working.attach(Point(-30.0, 40.0), Point(30.0, 40.0))
        assert Edge(s, d) in working.edges
        assert astar(working.vertices, working.edges, s, d, adjacency=working.adjacency()) == [s, d]

    def test_reset_is_idempotent(self) -> None:
        canonical, working = self._working()
        working.attach(Point(-30.0, 0.0), Point(30.0, 0.0))
        working.reset()
        working.reset()
        assert working.vertices == list(canonical.vertices)
        assert working.edges == list(canonical.edges)

    def test_reattach_replaces_tail(self) -> None:
        canonical, working = self._working()
        working.attach(Point(-30.0, 0.0), Point(30.0, 0.0))
        working.attach(Point(-30.0, 40.0), Point(30.0, 40.0))
        assert working.vertex_count == canonical.vertex_count + 2
        assert working.vertex(working.destination_index) == Point(30.0, 40.0)

    def test_canonical_adjacency_untouched(self) -> None:
        canonical, working = self._working()
        before = canonical.adjacency
        working.attach(Point(-30.0, 0.0), Point(30.0, 0.0))
        working.adjacency()
        assert canonical.adjacency == before
