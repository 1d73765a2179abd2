"""Planar geometry on the (x, z) floor plane.

The vertical axis is constant and never enters planning, so every position
is a 2-D ``Point``. Rectangles are passed around as ``(N, 4)`` float arrays
of ``(min_x, min_z, max_x, max_z)`` rows so a segment can be tested against
every obstacle block in one vectorised pass.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np


class Point(NamedTuple):
    """Immutable position on the floor plane."""

    x: float
    z: float


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.z - a.z)


def step_towards(origin: Point, target: Point, max_distance: float) -> Point:
    """Move from *origin* toward *target* by at most *max_distance*.

    Snaps exactly onto *target* when it is within reach, so callers can use
    equality to detect arrival.
    """
    gap = distance(origin, target)
    if gap <= max_distance:
        return target
    scale = max_distance / gap
    return Point(origin.x + (target.x - origin.x) * scale, origin.z + (target.z - origin.z) * scale)


def extend_segment(a: Point, b: Point, overshoot: float) -> tuple[Point, Point]:
    """Return segment *ab* lengthened by *overshoot* beyond both endpoints.

    A zero-length segment is returned unchanged (its direction is undefined).
    """
    length = distance(a, b)
    if length == 0.0 or overshoot == 0.0:
        return a, b
    ux = (b.x - a.x) / length
    uz = (b.z - a.z) / length
    return (
        Point(a.x - ux * overshoot, a.z - uz * overshoot),
        Point(b.x + ux * overshoot, b.z + uz * overshoot),
    )


def segment_hits_rects(a: Point, b: Point, rects: np.ndarray) -> np.ndarray:
    """Return a boolean mask of the closed rectangles the closed segment *ab* touches.

    Liang-Barsky clipping applied to all rectangles at once. Touching an edge
    or a corner counts as a hit.
    """
    rects = np.asarray(rects, dtype=float).reshape(-1, 4)
    n = rects.shape[0]
    if n == 0:
        return np.zeros(0, dtype=bool)
    origin = (a.x, a.z)
    delta = (b.x - a.x, b.z - a.z)
    t_enter = np.zeros(n)
    t_exit = np.ones(n)
    hit = np.ones(n, dtype=bool)
    for axis in (0, 1):
        lo = rects[:, axis]
        hi = rects[:, axis + 2]
        if delta[axis] == 0.0:
            hit &= (lo <= origin[axis]) & (origin[axis] <= hi)
            continue
        t_lo = (lo - origin[axis]) / delta[axis]
        t_hi = (hi - origin[axis]) / delta[axis]
        t_enter = np.maximum(t_enter, np.minimum(t_lo, t_hi))
        t_exit = np.minimum(t_exit, np.maximum(t_lo, t_hi))
    return hit & (t_enter <= t_exit)


def segment_hits_any_rect(a: Point, b: Point, rects: np.ndarray) -> bool:
    """True when segment *ab* touches at least one rectangle."""
    return bool(segment_hits_rects(a, b, rects).any())
