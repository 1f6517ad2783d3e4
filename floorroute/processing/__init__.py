"""Grid construction, bridging and route search."""

from .grid_builder import build_grid, clone_grid, is_walkable
from .connector import bridge, bridge_target, nearest_corridor, line_cells
from .route_finder import (
    CorridorRouteFinder,
    DirectLineFinder,
    get_route_finder,
    path_cost,
    is_adjacent,
)
from .route_service import RouteService, RouteRequest, RouteResult

__all__ = [
    "build_grid",
    "clone_grid",
    "is_walkable",
    "bridge",
    "bridge_target",
    "nearest_corridor",
    "line_cells",
    "CorridorRouteFinder",
    "DirectLineFinder",
    "get_route_finder",
    "path_cost",
    "is_adjacent",
    "RouteService",
    "RouteRequest",
    "RouteResult",
]
