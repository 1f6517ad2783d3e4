"""
Route finders over a walkability grid.

Two strategies share the same find(grid, start, end) interface:

- CorridorRouteFinder: uniform-cost (Dijkstra) search, 8-connected,
  orthogonal steps cost 1 and diagonal steps cost sqrt(2).
- DirectLineFinder: cheap two-segment line (horizontal, then vertical)
  that ignores corridors.

Both return the route as a list of grid points from start to end
inclusive, or an empty list when there is no route. Neither mutates the
grid.
"""

import heapq
import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from ..models.geometry import Point

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2)

# (dx, dy, cost) in fixed visiting order N, NE, E, SE, S, SW, W, NW.
# y grows downwards, so north is dy = -1.
DIRECTIONS = (
    (0, -1, 1.0),
    (1, -1, SQRT2),
    (1, 0, 1.0),
    (1, 1, SQRT2),
    (0, 1, 1.0),
    (-1, 1, SQRT2),
    (-1, 0, 1.0),
    (-1, -1, SQRT2),
)


def _in_bounds(point: Sequence[int], width: int, height: int) -> bool:
    return 0 <= point[0] < width and 0 <= point[1] < height


def is_adjacent(a: Sequence[int], b: Sequence[int]) -> bool:
    """True if b is one of a's eight neighbours."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return max(dx, dy) == 1


def path_cost(points: Sequence[Sequence[int]]) -> float:
    """Total step cost of a route (1 per orthogonal step, sqrt(2) per diagonal)."""
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += SQRT2 if a[0] != b[0] and a[1] != b[1] else 1.0
    return total


class CorridorRouteFinder:
    """
    Dijkstra search for the cheapest walkable route.

    Ties between equal-cost routes are settled by the fixed neighbour
    order in DIRECTIONS and a push counter, so the same grid and endpoints
    always give the same route.
    """

    name = "corridor"
    bridges_endpoints = True

    def __init__(self, max_expansions: Optional[int] = None):
        """
        Initialize finder.

        Args:
            max_expansions: Optional cap on settled cells; the search gives up
                (no route) once exceeded
        """
        self.max_expansions = max_expansions

    def find(self, grid: np.ndarray, start: Point, end: Point) -> List[Point]:
        """
        Find the minimum-cost route from start to end.

        Args:
            grid: Boolean walkability grid indexed [y, x]
            start: Start point, must be walkable
            end: End point, must be walkable

        Returns:
            Route from start to end inclusive, or [] if unreachable
        """
        height, width = grid.shape

        if not _in_bounds(start, width, height) or not _in_bounds(end, width, height):
            logger.debug(f"Endpoint outside {width}x{height} grid: {start} -> {end}")
            return []

        # Flat python list is far faster to index than the numpy array
        cells = grid.ravel().tolist()
        start_idx = start[1] * width + start[0]
        end_idx = end[1] * width + end[0]

        if not cells[start_idx] or not cells[end_idx]:
            logger.debug(f"Endpoint not walkable: {start} -> {end}")
            return []

        if start_idx == end_idx:
            return [Point(start[0], start[1])]

        size = width * height
        closed = bytearray(size)
        came_from = [-1] * size
        g_score = [math.inf] * size
        g_score[start_idx] = 0.0

        # Priority queue: (cost, counter, cell); counter keeps equal costs in push order
        counter = 0
        open_set = [(0.0, counter, start_idx)]
        expansions = 0

        while open_set:
            cost, _, current = heapq.heappop(open_set)

            if closed[current]:
                continue

            if current == end_idx:
                return self._reconstruct_path(came_from, current, width)

            closed[current] = 1
            expansions += 1
            if self.max_expansions is not None and expansions > self.max_expansions:
                logger.info(f"Search budget of {self.max_expansions} cells exhausted")
                return []

            cx = current % width
            cy = current // width

            for dx, dy, step in DIRECTIONS:
                nx = cx + dx
                ny = cy + dy
                if nx < 0 or ny < 0 or nx >= width or ny >= height:
                    continue
                neighbor = ny * width + nx
                if not cells[neighbor] or closed[neighbor]:
                    continue

                tentative = cost + step
                if tentative < g_score[neighbor]:
                    g_score[neighbor] = tentative
                    came_from[neighbor] = current
                    counter += 1
                    heapq.heappush(open_set, (tentative, counter, neighbor))

        return []

    @staticmethod
    def _reconstruct_path(came_from: List[int], current: int, width: int) -> List[Point]:
        path = [Point(current % width, current // width)]
        while came_from[current] != -1:
            current = came_from[current]
            path.append(Point(current % width, current // width))
        path.reverse()
        return path


class DirectLineFinder:
    """
    Two-segment straight route: along x to the end column, then along y.

    Ignores corridors entirely; only the plane bounds are checked.
    """

    name = "direct"
    bridges_endpoints = False

    def find(self, grid: np.ndarray, start: Point, end: Point) -> List[Point]:
        height, width = grid.shape
        if not _in_bounds(start, width, height) or not _in_bounds(end, width, height):
            return []

        x, y = start[0], start[1]
        path = [Point(x, y)]

        step_x = 1 if end[0] > x else -1
        while x != end[0]:
            x += step_x
            path.append(Point(x, y))

        step_y = 1 if end[1] > y else -1
        while y != end[1]:
            y += step_y
            path.append(Point(x, y))

        return path


ROUTE_FINDERS = {
    CorridorRouteFinder.name: CorridorRouteFinder,
    DirectLineFinder.name: DirectLineFinder,
}


def get_route_finder(name: str, **kwargs):
    """Instantiate a route finder by strategy name."""
    finder_cls = ROUTE_FINDERS.get(name)
    if finder_cls is None:
        raise ValueError(
            f"Unknown route strategy: {name}. Available: {list(ROUTE_FINDERS.keys())}"
        )
    return finder_cls(**kwargs)
