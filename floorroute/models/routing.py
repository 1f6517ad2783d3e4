"""Routing response models."""

from typing import Optional
from pydantic import BaseModel, Field

from .requests import Coordinates


class RouteResponse(BaseModel):
    """A computed route in plane coordinates."""
    found: bool = Field(description="False when start and end cannot be connected")
    strategy: str = Field(description="Strategy used to compute the route")
    cost: float = Field(description="Total step cost (1 orthogonal, sqrt(2) diagonal)")
    length: int = Field(description="Number of points in the route")
    points: list[Coordinates] = Field(default_factory=list, description="Route, start to end inclusive")


class TableLookupResponse(BaseModel):
    """Where a table is and which entry its route starts from."""
    identifier: str
    found: bool
    point: Optional[Coordinates] = Field(default=None, description="Table position, if known")
    entry_name: str = Field(description="Entry the route starts from")
    start: Coordinates = Field(description="Entry position")


class TableRouteResponse(TableLookupResponse):
    """Table lookup plus the route from its entry."""
    route: RouteResponse


class CorridorInfo(BaseModel):
    name: str
    x1: int
    y1: int
    x2: int
    y2: int


class EntryInfo(BaseModel):
    name: str
    x: int
    y: int
    low: Optional[int] = None
    high: Optional[int] = None


class FloorPlanResponse(BaseModel):
    """Static description of the floor plan."""
    width: int
    height: int
    corridors: list[CorridorInfo]
    default_entry: EntryInfo
    entry_rules: list[EntryInfo]
    strategies: list[str]
    tables: int = Field(description="Number of known tables")
