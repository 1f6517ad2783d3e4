"""
Test view-space scaling and PNG overlay rendering.
"""

import io
import os
import tempfile

import pytest
from PIL import Image

from ..models.geometry import CorridorModel, FloorPlan, Point, Rect
from ..processing.render import render_route_overlay, scale_path, to_plane, view_scale
from ..processing.route_service import RouteRequest, RouteResult, RouteService


def create_test_plan() -> FloorPlan:
    model = CorridorModel(
        width=100,
        height=140,
        corridors=[Rect(0, 0, 100, 6), Rect(40, 0, 52, 140)],
    )
    return FloorPlan(corridors=model, default_entry=Point(3, 3))


def test_view_scale():
    """Test the display / plane ratio."""
    print("\n=== Testing View Scale ===")

    assert view_scale(500, 1000) == 0.5
    assert view_scale(1000, 1000) == 1.0
    with pytest.raises(ValueError):
        view_scale(0, 1000)

    print("✓ Scale computed")


def test_scale_path_and_back():
    """Test plane -> pixel scaling and the pixel -> plane picker."""
    print("\n=== Testing Path Scaling ===")

    assert scale_path([Point(34, 239), Point(963, 35)], 0.5) == [(17.0, 119.5), (481.5, 17.5)]
    assert scale_path([], 2.0) == []

    assert to_plane(17.0, 119.5, 0.5) == (34, 239)
    assert to_plane(100, 100, 0.8) == (125, 125)
    # Halves round up, not to even
    assert to_plane(1, 1, 2.0) == (1, 1)
    assert to_plane(5, 5, 2.0) == (3, 3)
    with pytest.raises(ValueError):
        to_plane(1, 1, 0)

    print("✓ Scaling works both ways")


def test_render_route_overlay():
    """Test that a rendered overlay is a PNG of the scaled plane size."""
    print("\n=== Testing Overlay Rendering ===")

    plan = create_test_plan()
    service = RouteService(plan.corridors)
    result = service.route(RouteRequest(start=Point(3, 3), end=Point(46, 120)))
    assert result.found

    png = render_route_overlay(plan, result, display_width=200, end_label="12", show_corridors=True)

    img = Image.open(io.BytesIO(png))
    assert img.format == "PNG"
    assert img.size == (200, 280)
    # The route line is drawn in blue
    blue = [p for p in img.convert("RGBA").getdata() if p[2] > 200 and p[0] < 80 and p[1] < 80]
    assert len(blue) > 100

    print("✓ Overlay rendered")


def test_render_empty_route():
    """Test that an empty route still renders markers without failing."""
    print("\n=== Testing Empty Route Rendering ===")

    plan = create_test_plan()
    png = render_route_overlay(
        plan,
        RouteResult(),
        display_width=50,
        start=Point(3, 3),
        end=Point(90, 130),
    )

    img = Image.open(io.BytesIO(png))
    assert img.size == (50, 70)

    print("✓ Empty route rendered")


def test_render_with_background():
    """Test rendering over a background image file."""
    print("\n=== Testing Background Rendering ===")

    plan = create_test_plan()
    service = RouteService(plan.corridors)
    result = service.route(RouteRequest(start=Point(3, 3), end=Point(46, 120)))

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "floor.png")
        Image.new("RGB", (30, 42), (200, 200, 200)).save(path)

        png = render_route_overlay(plan, result, display_width=100, background=path)

        # Background file is released after rendering
        os.remove(path)

    img = Image.open(io.BytesIO(png))
    assert img.size == (100, 140)
    # Background shows through where nothing is drawn
    assert img.convert("RGBA").getpixel((99, 139)) == (200, 200, 200, 255)

    print("✓ Background rendered")



def run_all_tests():
    """Run all render tests."""
    print("\n" + "=" * 60)
    print("RENDERING - TEST SUITE")
    print("=" * 60)

    test_view_scale()
    test_scale_path_and_back()
    test_render_route_overlay()
    test_render_empty_route()
    test_render_with_background()

    print("\n" + "=" * 60)
    print("✅ ALL RENDERING TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
