"""API request models."""

from typing import Optional
from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """Integer position on the floor plan."""
    x: int = Field(description="Horizontal plane coordinate", ge=0)
    y: int = Field(description="Vertical plane coordinate (grows downwards)", ge=0)


class RoutePlanRequest(BaseModel):
    """Request body for routing between two plane points."""
    start: Coordinates = Field(description="Route start")
    end: Coordinates = Field(description="Route end")
    strategy: Optional[str] = Field(
        default=None,
        description="Routing strategy: 'corridor' or 'direct' (server default if omitted)"
    )


class TableRouteRequest(BaseModel):
    """Request body for finding a table and routing to it from its entry."""
    identifier: str = Field(description="Table identifier as entered by the user", min_length=1)
    strategy: Optional[str] = Field(
        default=None,
        description="Routing strategy: 'corridor' or 'direct' (server default if omitted)"
    )
