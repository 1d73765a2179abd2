"""Procedural floor plan: a rectangular main floor with alcove recesses and
randomly placed L-shaped obstacles, discretised on a grid of block-sized cells.

The grid stores one ``CellType`` per cell. Obstacle blocks and alcove corner
markers carry enough type information to classify reflex corners without any
geometric search:

- an alcove corner marker yields one vertex, one cell into the main floor and
  one cell into the alcove;
- the corner block of an L yields the vertex diagonally outside its elbow;
- each arm-end block yields the two vertices outside its free end.

Every vertex is placed one grid unit away from the geometry it belongs to.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import IntEnum
from random import Random

import numpy as np
from shapely.geometry import Polygon, box
from shapely.ops import unary_union

from rvgnav.config.types import LayoutConfig
from rvgnav.domain.errors import LayoutError
from rvgnav.domain.floor import Floor, Footprint, ReflexCorner
from rvgnav.domain.geometry import Point

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


class CellType(IntEnum):
    """What occupies a grid cell."""

    EMPTY = 0
    FLOOR = 1
    BLOCK = 2
    BLOCK_VERTEX = 3
    BLOCK_CORNER_VERTEX = 4
    ALCOVE_VERTEX_1 = 5
    ALCOVE_VERTEX_2 = 6


OBSTACLE_CELL_TYPES = frozenset(
    {CellType.BLOCK, CellType.BLOCK_VERTEX, CellType.BLOCK_CORNER_VERTEX}
)
WALKABLE_CELL_TYPES = frozenset({CellType.FLOOR}) | OBSTACLE_CELL_TYPES

# (side, marker) -> (dx, dz) from the alcove marker to its reflex vertex
_ALCOVE_OFFSETS: dict[tuple[str, CellType], Cell] = {
    ("left", CellType.ALCOVE_VERTEX_1): (1, 1),
    ("left", CellType.ALCOVE_VERTEX_2): (1, -1),
    ("right", CellType.ALCOVE_VERTEX_1): (-1, 1),
    ("right", CellType.ALCOVE_VERTEX_2): (-1, -1),
    ("bottom", CellType.ALCOVE_VERTEX_1): (1, 1),
    ("bottom", CellType.ALCOVE_VERTEX_2): (-1, 1),
    ("top", CellType.ALCOVE_VERTEX_1): (1, -1),
    ("top", CellType.ALCOVE_VERTEX_2): (-1, -1),
}


@dataclass
class Layout:
    """Grid of cells plus bookkeeping of which obstacle/alcove owns a cell."""

    config: LayoutConfig
    grid: np.ndarray
    obstacle_cells: dict[int, list[Cell]] = field(default_factory=dict)
    alcove_markers: dict[Cell, int] = field(default_factory=dict)

    @classmethod
    def create(cls, config: LayoutConfig | None = None) -> Layout:
        """Empty layout: main floor and alcoves filled, no obstacles."""
        config = config or LayoutConfig()
        min_x, min_z, max_x, max_z = config.whole_floor_extent
        size_x = int(round((max_x - min_x) / config.block_length)) + 1
        size_z = int(round((max_z - min_z) / config.block_length)) + 1
        layout = cls(config=config, grid=np.full((size_x, size_z), CellType.EMPTY, dtype=np.int8))
        layout._fill_floor(config.main_floor_extent)
        for alcove_index, (extent, marker_1, marker_2) in enumerate(config.alcoves):
            layout._fill_floor(extent)
            layout._mark(Point(*marker_1), CellType.ALCOVE_VERTEX_1, alcove_index)
            layout._mark(Point(*marker_2), CellType.ALCOVE_VERTEX_2, alcove_index)
        return layout

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------

    def grid_to_world(self, cell: Cell) -> Point:
        min_x, min_z, _, _ = self.config.whole_floor_extent
        length = self.config.block_length
        return Point(cell[0] * length + min_x, cell[1] * length + min_z)

    def world_to_grid(self, position: Point) -> Cell:
        min_x, min_z, _, _ = self.config.whole_floor_extent
        length = self.config.block_length
        return (
            int(round((position.x - min_x) / length)),
            int(round((position.z - min_z) / length)),
        )

    def cell_type(self, cell: Cell) -> CellType:
        x, z = cell
        if not (0 <= x < self.grid.shape[0] and 0 <= z < self.grid.shape[1]):
            return CellType.EMPTY
        return CellType(int(self.grid[x, z]))

    def _fill_floor(self, extent: tuple[float, float, float, float]) -> None:
        """Mark floor cells of *extent*, leaving a one-cell buffer on every side."""
        x0, z0 = self.world_to_grid(Point(extent[0], extent[1]))
        x1, z1 = self.world_to_grid(Point(extent[2], extent[3]))
        self.grid[x0 + 1 : x1, z0 + 1 : z1] = CellType.FLOOR

    def _mark(self, position: Point, cell_type: CellType, alcove_index: int) -> None:
        cell = self.world_to_grid(position)
        self.grid[cell] = cell_type
        self.alcove_markers[cell] = alcove_index

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------

    def _corner_pool(self) -> list[Cell]:
        """Main-floor cells far enough from the edges to host an L corner."""
        mx0, mz0, mx1, mz1 = self.config.main_floor_extent
        lo_x, lo_z = self.world_to_grid(Point(mx0, mz0))
        hi_x, hi_z = self.world_to_grid(Point(mx1, mz1))
        margin = self.config.max_obstacle_blocks + 3
        return [
            (x, z)
            for x in range(lo_x + margin, hi_x - margin + 1)
            for z in range(lo_z + margin, hi_z - margin + 1)
        ]

    def place_obstacle(self, obstacle_id: int, corner: Cell, arm_x: int, arm_z: int) -> None:
        """Place an L with its elbow at *corner* and signed arm lengths along x and z."""
        if arm_x == 0 or arm_z == 0:
            raise ValueError("arm lengths must be non-zero")
        cells = [corner]
        self.grid[corner] = CellType.BLOCK_CORNER_VERTEX
        for arm, axis in ((arm_x, 0), (arm_z, 1)):
            step = 1 if arm > 0 else -1
            length = abs(arm)
            for j in range(1, length + 1):
                offset = (step * j, 0) if axis == 0 else (0, step * j)
                cell = (corner[0] + offset[0], corner[1] + offset[1])
                self.grid[cell] = CellType.BLOCK_VERTEX if j == length else CellType.BLOCK
                cells.append(cell)
        self.obstacle_cells[obstacle_id] = cells

    def place_obstacles(self, rng: Random) -> int:
        """Place a random number of L-shaped obstacles; return how many fit."""
        config = self.config
        target = rng.randint(config.min_obstacles, config.max_obstacles)
        pool = self._corner_pool()
        reach = config.max_obstacle_blocks + 2
        placed = 0
        for obstacle_id in range(target):
            if not pool:
                break
            corner = pool[rng.randrange(len(pool))]
            arm_x = rng.randint(1, config.max_obstacle_blocks)
            arm_z = rng.randint(1, config.max_obstacle_blocks)
            if rng.randrange(2):
                arm_x = -arm_x
            if rng.randrange(2):
                arm_z = -arm_z
            self.place_obstacle(obstacle_id, corner, arm_x, arm_z)

            # keep later elbows clear of this obstacle and its arms
            x_lo = corner[0] - reach - max(-arm_x, 0)
            x_hi = corner[0] + reach + max(arm_x, 0)
            z_lo = corner[1] - reach - max(-arm_z, 0)
            z_hi = corner[1] + reach + max(arm_z, 0)
            pool = [c for c in pool if not (x_lo <= c[0] <= x_hi and z_lo <= c[1] <= z_hi)]
            placed += 1
        if placed < target:
            logger.debug("placed %d of %d requested obstacles", placed, target)
        return placed

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------

    def _alcove_side(self, position: Point) -> str:
        mx0, mz0, mx1, _ = self.config.main_floor_extent
        if math.isclose(position.x, mx0):
            return "left"
        if math.isclose(position.x, mx1):
            return "right"
        if math.isclose(position.z, mz0):
            return "bottom"
        return "top"

    def _is_type(self, cell: Cell, types: frozenset[CellType]) -> bool:
        return self.cell_type(cell) in types

    def reflex_corner_cells(self) -> list[tuple[Cell, str, int]]:
        """(cell, source, owner) for every reflex corner, scanning x-major."""
        owner_of = {cell: oid for oid, cells in self.obstacle_cells.items() for cell in cells}
        arm_types = frozenset({CellType.BLOCK, CellType.BLOCK_VERTEX})
        end_neighbor_types = frozenset({CellType.BLOCK, CellType.BLOCK_CORNER_VERTEX})
        corners: list[tuple[Cell, str, int]] = []
        size_x, size_z = self.grid.shape
        for x in range(size_x):
            for z in range(size_z):
                cell_type = CellType(int(self.grid[x, z]))
                if cell_type in (CellType.ALCOVE_VERTEX_1, CellType.ALCOVE_VERTEX_2):
                    side = self._alcove_side(self.grid_to_world((x, z)))
                    dx, dz = _ALCOVE_OFFSETS[(side, cell_type)]
                    corners.append(((x + dx, z + dz), "boundary", self.alcove_markers[(x, z)]))
                elif cell_type == CellType.BLOCK_CORNER_VERTEX:
                    right = self._is_type((x + 1, z), arm_types)
                    above = self._is_type((x, z + 1), arm_types)
                    vertex = (x - 1 if right else x + 1, z - 1 if above else z + 1)
                    corners.append((vertex, "obstacle", owner_of[(x, z)]))
                elif cell_type == CellType.BLOCK_VERTEX:
                    right = self._is_type((x + 1, z), end_neighbor_types)
                    left = self._is_type((x - 1, z), end_neighbor_types)
                    above = self._is_type((x, z + 1), end_neighbor_types)
                    owner = owner_of[(x, z)]
                    if left or right:
                        vx = x - 1 if right else x + 1
                        pair = [(vx, z + 1), (vx, z - 1)]
                    else:
                        vz = z - 1 if above else z + 1
                        pair = [(x + 1, vz), (x - 1, vz)]
                    corners.extend((vertex, "obstacle", owner) for vertex in pair)
        return corners

    def available_cells(self) -> list[Cell]:
        """Floor cells whose eight neighbours are all floor."""
        cells: list[Cell] = []
        size_x, size_z = self.grid.shape
        for x in range(size_x):
            for z in range(size_z):
                if self.grid[x, z] != CellType.FLOOR:
                    continue
                if all(
                    self.cell_type((x + dx, z + dz)) == CellType.FLOOR
                    for dx in (-1, 0, 1)
                    for dz in (-1, 0, 1)
                    if dx or dz
                ):
                    cells.append((x, z))
        return cells

    def boundary_polygon(self) -> Polygon:
        """Outline of the union of floor and obstacle cells."""
        half = self.config.block_length / 2
        squares = []
        size_x, size_z = self.grid.shape
        for x in range(size_x):
            for z in range(size_z):
                if CellType(int(self.grid[x, z])) in WALKABLE_CELL_TYPES:
                    center = self.grid_to_world((x, z))
                    squares.append(
                        box(center.x - half, center.z - half, center.x + half, center.z + half)
                    )
        if not squares:
            raise LayoutError("layout has no floor cells")
        merged = unary_union(squares)
        if not isinstance(merged, Polygon):
            raise LayoutError("floor cells must form a single connected region")
        return Polygon(merged.exterior).simplify(0)

    def to_floor(self) -> Floor:
        polygon = self.boundary_polygon()
        boundary = tuple(Point(x, z) for x, z in list(polygon.exterior.coords)[:-1])
        length = self.config.block_length
        footprints = tuple(
            Footprint.from_cell(obstacle_id, self.grid_to_world(cell), length)
            for obstacle_id, cells in self.obstacle_cells.items()
            for cell in cells
        )
        corners = tuple(
            ReflexCorner(self.grid_to_world(cell), source, owner)  # type: ignore[arg-type]
            for cell, source, owner in self.reflex_corner_cells()
        )
        available = tuple(self.grid_to_world(cell) for cell in self.available_cells())
        return Floor(
            boundary=boundary,
            footprints=footprints,
            reflex_corners=corners,
            available_positions=available,
        )


def build_floor(config: LayoutConfig | None = None, rng: Random | None = None) -> Floor:
    """Generate a floor with obstacles placed using *rng*."""
    layout = Layout.create(config)
    placed = layout.place_obstacles(rng or Random())
    floor = layout.to_floor()
    logger.info(
        "generated floor: %d obstacles, %d reflex corners, %d available positions",
        placed,
        len(floor.reflex_corners),
        len(floor.available_positions),
    )
    return floor
