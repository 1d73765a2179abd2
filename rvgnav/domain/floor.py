"""Floor/Obstacle Model contract consumed by the planning core.

A ``Floor`` is the read-only description the core plans against: the
boundary polygon of the traversable area, the obstacle footprints grouped by
obstacle, the reflex-corner candidates (already offset outward from the
geometry they belong to) and the pool of positions agents may spawn at or
travel to. ``rvgnav.domain.layout`` builds one procedurally; tests build
small ones by hand.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Literal

import numpy as np
from shapely.geometry import LineString, Polygon
from shapely.geometry import Point as ShapelyPoint
from shapely.prepared import PreparedGeometry, prep

from rvgnav.domain.errors import LayoutError
from rvgnav.domain.geometry import Point

CornerSource = Literal["obstacle", "boundary"]


@dataclass(frozen=True)
class Footprint:
    """Axis-aligned rectangle covered by one or more unit blocks of an obstacle."""

    obstacle_id: int
    min_x: float
    min_z: float
    max_x: float
    max_z: float

    @classmethod
    def from_cell(cls, obstacle_id: int, center: Point, length: float) -> Footprint:
        """Footprint of a single block centred on *center*."""
        half = length / 2
        return cls(obstacle_id, center.x - half, center.z - half, center.x + half, center.z + half)

    def as_row(self, padding: float = 0.0) -> tuple[float, float, float, float]:
        return (
            self.min_x - padding,
            self.min_z - padding,
            self.max_x + padding,
            self.max_z + padding,
        )


@dataclass(frozen=True)
class ReflexCorner:
    """A convex-into-free-space corner, offset one grid unit outward.

    ``source`` says whether the corner belongs to an obstacle or to a recess
    of the boundary; ``owner`` is the obstacle id or alcove index.
    """

    position: Point
    source: CornerSource
    owner: int


@dataclass
class Floor:
    """Boundary, obstacles and candidate positions of one floor plan."""

    boundary: tuple[Point, ...]
    footprints: tuple[Footprint, ...] = ()
    reflex_corners: tuple[ReflexCorner, ...] = ()
    available_positions: tuple[Point, ...] = ()
    _polygon: Polygon = field(init=False, repr=False, compare=False)
    _prepared: PreparedGeometry = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.boundary = tuple(Point(*p) for p in self.boundary)
        self.footprints = tuple(self.footprints)
        self.reflex_corners = tuple(self.reflex_corners)
        self.available_positions = tuple(Point(*p) for p in self.available_positions)
        if len(self.boundary) < 3:
            raise LayoutError("boundary must have at least 3 points")
        polygon = Polygon(self.boundary)
        if not polygon.is_valid or polygon.area <= 0.0:
            raise LayoutError("boundary must be a simple polygon with positive area")
        self._polygon = polygon
        self._prepared = prep(polygon)

    @classmethod
    def rectangle(
        cls,
        min_x: float,
        min_z: float,
        max_x: float,
        max_z: float,
        *,
        footprints: tuple[Footprint, ...] = (),
        reflex_corners: tuple[ReflexCorner, ...] = (),
        available_positions: tuple[Point, ...] = (),
    ) -> Floor:
        """Floor bounded by a plain rectangle."""
        boundary = (
            Point(min_x, min_z),
            Point(max_x, min_z),
            Point(max_x, max_z),
            Point(min_x, max_z),
        )
        return cls(
            boundary=boundary,
            footprints=footprints,
            reflex_corners=reflex_corners,
            available_positions=available_positions,
        )

    @property
    def polygon(self) -> Polygon:
        return self._polygon

    def obstacles(self) -> dict[int, list[Footprint]]:
        """Footprints grouped by obstacle id, in input order."""
        grouped: dict[int, list[Footprint]] = defaultdict(list)
        for footprint in self.footprints:
            grouped[footprint.obstacle_id].append(footprint)
        return dict(grouped)

    def footprint_array(self, padding: float = 0.0) -> np.ndarray:
        """``(N, 4)`` array of padded footprint rectangles."""
        if not self.footprints:
            return np.zeros((0, 4), dtype=float)
        return np.array([fp.as_row(padding) for fp in self.footprints], dtype=float)

    def encloses_segment(self, a: Point, b: Point) -> bool:
        """True when segment *ab* lies strictly inside the boundary (no touching)."""
        geometry = ShapelyPoint(a) if a == b else LineString([a, b])
        return bool(self._prepared.contains_properly(geometry))

    def encloses_point(self, p: Point) -> bool:
        return bool(self._prepared.contains_properly(ShapelyPoint(p)))
