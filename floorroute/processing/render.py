"""
View-space helpers: plane <-> display pixel scaling and a PNG route overlay.

The routing engine works in plane units only. Everything here is for the
caller that draws the route over the floor plan image.
"""

import io
import logging
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from ..models.geometry import FloorPlan, Point
from .connector import round_half_up
from .route_service import RouteResult

logger = logging.getLogger(__name__)

ROUTE_COLOR = (0, 0, 255, 230)
START_COLOR = (0, 128, 0, 205)
END_COLOR = (255, 0, 0, 155)
CORRIDOR_COLOR = (173, 216, 230, 77)


def view_scale(display_width: float, plane_width: int) -> float:
    """Uniform plane -> pixel ratio for a display of the given width."""
    if display_width <= 0:
        raise ValueError(f"Display width must be positive, got {display_width}")
    if plane_width <= 0:
        raise ValueError(f"Plane width must be positive, got {plane_width}")
    return display_width / plane_width


def scale_path(points: Sequence[Sequence[int]], scale: float) -> List[Tuple[float, float]]:
    """Plane points -> display pixel coordinates."""
    return [(p[0] * scale, p[1] * scale) for p in points]


def to_plane(px: float, py: float, scale: float) -> Point:
    """Display pixel -> nearest plane point (for picking table coordinates by clicking)."""
    if scale <= 0:
        raise ValueError(f"Scale must be positive, got {scale}")
    return Point(round_half_up(px / scale), round_half_up(py / scale))


def _draw_marker(draw: ImageDraw.ImageDraw, center: Tuple[float, float], radius: int, color, label: str):
    x, y = center
    draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=color)
    if label:
        draw.text((x - 3 * len(label), y - radius - 14), label, fill=color[:3] + (255,))


def render_route_overlay(
    floor_plan: FloorPlan,
    result: RouteResult,
    display_width: int,
    start: Optional[Point] = None,
    end: Optional[Point] = None,
    end_label: str = "",
    background: Optional[str] = None,
    show_corridors: bool = False,
    line_width: int = 4,
    marker_radius: int = 8,
) -> bytes:
    """
    Draw a route over the floor plan as a PNG.

    Args:
        floor_plan: Floor plan the route was computed on
        result: Route to draw (may be empty; markers are still drawn)
        display_width: Output width in pixels
        start: Entry point marker (defaults to the first route point)
        end: Destination marker (defaults to the last route point)
        end_label: Text drawn above the destination marker
        background: Optional image path drawn under the overlay
        show_corridors: Shade walkable corridors for debugging
        line_width: Route stroke width in pixels
        marker_radius: End marker radius in pixels

    Returns:
        PNG bytes
    """
    scale = view_scale(display_width, floor_plan.width)
    size = (int(display_width), max(1, int(round(floor_plan.height * scale))))

    if background:
        with Image.open(background) as src:
            img = src.convert("RGBA").resize(size)
    else:
        img = Image.new("RGBA", size, (255, 255, 255, 255))

    overlay = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    if show_corridors:
        for rect in floor_plan.corridors.corridors:
            draw.rectangle(
                [rect.x1 * scale, rect.y1 * scale, rect.x2 * scale, rect.y2 * scale],
                fill=CORRIDOR_COLOR,
            )

    pixels = scale_path(result.points, scale)
    if len(pixels) >= 2:
        draw.line(pixels, fill=ROUTE_COLOR, width=line_width)

    start = start if start is not None else (result.points[0] if result.points else None)
    end = end if end is not None else (result.points[-1] if result.points else None)
    if start is not None:
        _draw_marker(draw, (start[0] * scale, start[1] * scale), max(1, marker_radius - 2), START_COLOR, "START")
    if end is not None:
        _draw_marker(draw, (end[0] * scale, end[1] * scale), marker_radius, END_COLOR, end_label)

    img = Image.alpha_composite(img, overlay)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    logger.debug(f"Rendered {size[0]}x{size[1]} overlay with {len(pixels)} route points")
    return buffer.getvalue()
