"""FastAPI route definitions."""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import Response

from ..models.geometry import FloorPlan, Point
from ..models.requests import RoutePlanRequest, TableRouteRequest
from ..models.routing import (
    FloorPlanResponse,
    RouteResponse,
    TableLookupResponse,
    TableRouteResponse,
)
from ..processing.render import render_route_overlay
from ..processing.route_service import RouteRequest, RouteResult, RouteService
from ..storage.tables import TableDirectory
from ..utils.entry_selector import EntrySelector

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class FloorContext:
    """Everything the endpoints need, built once at startup."""
    floor_plan: FloorPlan
    service: RouteService
    tables: TableDirectory
    selector: EntrySelector
    default_width: int = 800
    line_width: int = 4
    marker_radius: int = 8


# Dependency to get the context instance (set in main.py)
_context: Optional[FloorContext] = None


def get_context() -> FloorContext:
    """Get the routing context."""
    if _context is None:
        raise HTTPException(status_code=503, detail="Route service not initialized")
    return _context


def set_context(context: Optional[FloorContext]):
    """Set the routing context (called from main.py)."""
    global _context
    _context = context


def _route_response(result: RouteResult) -> RouteResponse:
    return RouteResponse(**result.to_dict())


def _run_route(context: FloorContext, start: Point, end: Point, strategy: Optional[str]) -> RouteResult:
    try:
        return context.service.route(RouteRequest(start=start, end=end), strategy=strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Route computation failed")
        raise HTTPException(status_code=500, detail=str(e))


def _lookup(context: FloorContext, identifier: str) -> TableLookupResponse:
    identifier = identifier.strip()
    point = context.tables.lookup(identifier)
    entry_name, start = context.selector.select(identifier)
    return TableLookupResponse(
        identifier=identifier,
        found=point is not None,
        point={"x": point.x, "y": point.y} if point is not None else None,
        entry_name=entry_name,
        start={"x": start.x, "y": start.y},
    )


@router.get("/health")
def health_check(context: Annotated[FloorContext, Depends(get_context)]):
    """Health check endpoint."""
    return {
        "status": "ok",
        "message": "Route service initialized",
        "plane": f"{context.floor_plan.width}x{context.floor_plan.height}",
    }


@router.get("/floorplan", response_model=FloorPlanResponse)
def get_floor_plan(context: Annotated[FloorContext, Depends(get_context)]):
    """Plane size, corridors and entry points."""
    data = context.floor_plan.to_dict()
    return FloorPlanResponse(
        **data,
        strategies=context.service.strategies,
        tables=context.tables.count(),
    )


@router.get("/tables/{identifier}", response_model=TableLookupResponse)
def lookup_table(
    identifier: str,
    context: Annotated[FloorContext, Depends(get_context)],
):
    """Table position and the entry its route starts from. Unknown tables report found=false."""
    return _lookup(context, identifier)


@router.post("/route", response_model=RouteResponse)
def plan_route(
    request: RoutePlanRequest,
    context: Annotated[FloorContext, Depends(get_context)],
):
    """Route between two plane points."""
    start = Point(request.start.x, request.start.y)
    end = Point(request.end.x, request.end.y)
    return _route_response(_run_route(context, start, end, request.strategy))


@router.post("/find-table", response_model=TableRouteResponse)
def find_table(
    request: TableRouteRequest,
    context: Annotated[FloorContext, Depends(get_context)],
):
    """Main endpoint: look up a table and route to it from its entry."""
    lookup = _lookup(context, request.identifier)

    if not lookup.found:
        # Unknown table: nothing to route to, caller shows "not found"
        empty = RouteResult(strategy=request.strategy or context.service.default_strategy)
        return TableRouteResponse(**lookup.model_dump(), route=_route_response(empty))

    start = Point(lookup.start.x, lookup.start.y)
    end = Point(lookup.point.x, lookup.point.y)
    result = _run_route(context, start, end, request.strategy)
    return TableRouteResponse(**lookup.model_dump(), route=_route_response(result))


@router.get("/route-image")
def get_route_image(
    context: Annotated[FloorContext, Depends(get_context)],
    identifier: str,
    width: Annotated[Optional[int], Query(ge=1, le=4000)] = None,
    strategy: Optional[str] = None,
    show_corridors: bool = False,
):
    """Route to a table drawn over the floor plan, as PNG."""
    lookup = _lookup(context, identifier)
    if not lookup.found:
        raise HTTPException(status_code=404, detail=f"Table not found: {lookup.identifier}")

    start = Point(lookup.start.x, lookup.start.y)
    end = Point(lookup.point.x, lookup.point.y)
    result = _run_route(context, start, end, strategy)

    try:
        png = render_route_overlay(
            context.floor_plan,
            result,
            display_width=width or context.default_width,
            start=start,
            end=end,
            end_label=lookup.identifier,
            background=context.floor_plan.background,
            show_corridors=show_corridors,
            line_width=context.line_width,
            marker_radius=context.marker_radius,
        )
    except Exception as e:
        logger.exception("Route image rendering failed")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(content=png, media_type="image/png")
