"""
Bridging of off-corridor points into the corridor network.

A point (a table or an entry) usually sits between corridors. Before
searching, a straight walkable line is carved from the point to the
nearest corridor on the request's working grid.
"""

import math
from typing import List, Optional

import numpy as np

from ..models.geometry import CorridorModel, Point, Rect


def nearest_corridor(point: Point, corridors: CorridorModel) -> Optional[Rect]:
    """
    Corridor whose centroid is closest to the point.

    Exact ties keep the corridor defined first. Returns None when the model
    has no corridors.
    """
    nearest = None
    min_distance = math.inf
    for rect in corridors.corridors:
        distance = rect.distance_to_centroid(point)
        if distance < min_distance:
            min_distance = distance
            nearest = rect
    return nearest


def bridge_target(point: Point, corridors: CorridorModel) -> Optional[Point]:
    """Where the bridge from `point` lands: the point clamped onto its nearest corridor."""
    rect = nearest_corridor(point, corridors)
    if rect is None:
        return None
    return rect.clamp(point)


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def line_cells(start: Point, end: Point) -> List[Point]:
    """
    Cells on the straight line from start to end, both inclusive.

    Equal-step interpolation over max(|dx|, |dy|) steps, each coordinate
    rounded to the nearest integer (halves round up).
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    steps = max(abs(dx), abs(dy))
    if steps == 0:
        return [Point(start[0], start[1])]

    cells = []
    for i in range(steps + 1):
        t = i / steps
        cells.append(Point(round_half_up(start[0] + dx * t), round_half_up(start[1] + dy * t)))
    return cells


def bridge(grid: np.ndarray, point: Point, corridors: CorridorModel) -> Optional[Point]:
    """
    Carve a walkable line from a point into its nearest corridor.

    Mutates `grid` in place; pass a working copy, never the base grid.
    Cells outside the grid are skipped. With no corridors this is a no-op.

    Args:
        grid: Writable boolean grid indexed [y, x]
        point: Point to connect
        corridors: Corridor model the grid was built from

    Returns:
        The bridge target point, or None if there was nothing to bridge to
    """
    target = bridge_target(point, corridors)
    if target is None:
        return None

    height, width = grid.shape
    for x, y in line_cells(point, target):
        if 0 <= x < width and 0 <= y < height:
            grid[y, x] = True
    return target
