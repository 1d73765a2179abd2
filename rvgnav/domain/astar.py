"""A* shortest-path search over a Euclidean-weighted vertex/edge graph.

Vertices are addressed by index; edges are unordered index pairs whose
weight is the Euclidean distance between their endpoints, recomputed from
the vertex list on every use. The heuristic is the straight-line distance to
the goal, which never overestimates, so the first time the goal is popped its
path is minimal.

Ties on f-score are broken by open-set insertion order: the open set is an
insertion-ordered dict and ``min`` returns the first minimal entry, so runs on
the same graph always return the same path.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from rvgnav.domain.geometry import Point, distance

Adjacency = list[list[int]]


def build_adjacency(edges: Sequence[tuple[int, int]], vertex_count: int) -> Adjacency:
    """Map each vertex index to its neighbours, in edge-list order."""
    adjacency: Adjacency = [[] for _ in range(vertex_count)]
    for u, v in edges:
        adjacency[u].append(v)
        adjacency[v].append(u)
    return adjacency


def _reconstruct(parent: dict[int, int], current: int) -> list[int]:
    path = [current]
    while current in parent:
        current = parent[current]
        path.append(current)
    path.reverse()
    return path


def astar(
    vertices: Sequence[Point],
    edges: Sequence[tuple[int, int]],
    start: int,
    goal: int,
    adjacency: Adjacency | None = None,
) -> list[int] | None:
    """Return the vertex indices of a shortest path from *start* to *goal* inclusive.

    Returns ``None`` when the goal is unreachable; callers treat this as a
    routine outcome. *adjacency* may be supplied when the caller already
    maintains one for the same edge list.
    """
    n = len(vertices)
    for label, index in (("start", start), ("goal", goal)):
        if not 0 <= index < n:
            raise IndexError(f"{label} vertex {index} out of range for {n} vertices")
    if adjacency is None:
        adjacency = build_adjacency(edges, n)

    target = vertices[goal]
    g_score: dict[int, float] = {start: 0.0}
    f_score: dict[int, float] = {start: distance(vertices[start], target)}
    parent: dict[int, int] = {}
    open_set: dict[int, None] = {start: None}

    while open_set:
        current = min(open_set, key=f_score.__getitem__)
        if current == goal:
            return _reconstruct(parent, current)
        del open_set[current]

        for neighbor in adjacency[current]:
            tentative = g_score[current] + distance(vertices[current], vertices[neighbor])
            if tentative < g_score.get(neighbor, math.inf):
                parent[neighbor] = current
                g_score[neighbor] = tentative
                f_score[neighbor] = tentative + distance(vertices[neighbor], target)
                if neighbor not in open_set:
                    open_set[neighbor] = None

    return None


def path_length(vertices: Sequence[Point], path: Sequence[int]) -> float:
    """Total Euclidean weight of a vertex-index path."""
    return sum(distance(vertices[a], vertices[b]) for a, b in zip(path, path[1:]))
