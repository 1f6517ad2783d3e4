"""
Route service - the only entry point callers need.

Owns the immutable base grid. Every route() call works on its own clone,
so concurrent calls never see each other's bridges and nothing carries
over between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..models.geometry import CorridorModel, Point
from .connector import bridge
from .grid_builder import build_grid, clone_grid
from .route_finder import (
    CorridorRouteFinder,
    DirectLineFinder,
    ROUTE_FINDERS,
    path_cost,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteRequest:
    """Start and end of one route, in plane coordinates."""
    start: Point
    end: Point


@dataclass
class RouteResult:
    """Route from start to end inclusive; empty means no route was found."""
    points: List[Point] = field(default_factory=list)
    cost: float = 0.0
    strategy: str = CorridorRouteFinder.name

    @property
    def found(self) -> bool:
        return len(self.points) > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "found": self.found,
            "strategy": self.strategy,
            "cost": round(self.cost, 3),
            "length": len(self.points),
            "points": [{"x": p.x, "y": p.y} for p in self.points],
        }


class RouteService:
    """
    Corridor-constrained routing over one floor plan.

    The base grid is built once at construction and never written to.
    """

    def __init__(
        self,
        corridors: CorridorModel,
        strategy: str = CorridorRouteFinder.name,
        max_expansions: Optional[int] = None,
    ):
        """
        Initialize service.

        Args:
            corridors: Walkable corridor model of the floor plan
            strategy: Default strategy name ("corridor" or "direct")
            max_expansions: Optional search budget for the corridor strategy
        """
        if strategy not in ROUTE_FINDERS:
            raise ValueError(
                f"Unknown route strategy: {strategy}. Available: {list(ROUTE_FINDERS.keys())}"
            )
        self.corridors = corridors
        self.default_strategy = strategy
        self.base_grid = build_grid(corridors)
        self._finders = {
            CorridorRouteFinder.name: CorridorRouteFinder(max_expansions=max_expansions),
            DirectLineFinder.name: DirectLineFinder(),
        }

    @property
    def strategies(self) -> List[str]:
        return list(self._finders.keys())

    def route(self, request: RouteRequest, strategy: Optional[str] = None) -> RouteResult:
        """
        Compute a route for one request.

        Args:
            request: Start and end points
            strategy: Strategy name, defaults to the service default

        Returns:
            RouteResult; empty points when start and end cannot be connected

        Raises:
            ValueError: If the strategy name is unknown
        """
        name = strategy or self.default_strategy
        finder = self._finders.get(name)
        if finder is None:
            raise ValueError(
                f"Unknown route strategy: {name}. Available: {self.strategies}"
            )

        start = Point(*request.start)
        end = Point(*request.end)

        if finder.bridges_endpoints:
            working = clone_grid(self.base_grid)
            bridge(working, start, self.corridors)
            bridge(working, end, self.corridors)
            points = finder.find(working, start, end)
        else:
            points = finder.find(self.base_grid, start, end)

        if not points:
            logger.info(f"No route from {tuple(start)} to {tuple(end)} ({name})")
            return RouteResult(points=[], cost=0.0, strategy=name)

        cost = path_cost(points)
        logger.debug(
            f"Route {tuple(start)} -> {tuple(end)} ({name}): {len(points)} cells, cost {cost:.1f}"
        )
        return RouteResult(points=points, cost=cost, strategy=name)
