"""Floor plan geometry and API models."""

from .geometry import (
    Point,
    Rect,
    CorridorModel,
    EntryRule,
    FloorPlan,
)
from .requests import (
    Coordinates,
    RoutePlanRequest,
    TableRouteRequest,
)
from .routing import (
    RouteResponse,
    TableLookupResponse,
    TableRouteResponse,
    CorridorInfo,
    EntryInfo,
    FloorPlanResponse,
)

__all__ = [
    # Geometry
    "Point",
    "Rect",
    "CorridorModel",
    "EntryRule",
    "FloorPlan",
    # Requests
    "Coordinates",
    "RoutePlanRequest",
    "TableRouteRequest",
    # Responses
    "RouteResponse",
    "TableLookupResponse",
    "TableRouteResponse",
    "CorridorInfo",
    "EntryInfo",
    "FloorPlanResponse",
]
