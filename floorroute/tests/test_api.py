"""
Integration tests for the HTTP API.
Tests the complete flow from request to response.
"""

import os
from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from ..api.routes import FloorContext, router, set_context
from ..models.geometry import CorridorModel, EntryRule, FloorPlan, Point, Rect
from ..processing.route_service import RouteService
from ..storage.tables import TableDirectory, set_table_directory
from ..utils.entry_selector import EntrySelector


def create_test_client() -> TestClient:
    """App with a small floor plan installed as the routing context."""
    model = CorridorModel(
        width=100,
        height=140,
        corridors=[
            Rect(0, 0, 100, 6, name="top"),
            Rect(0, 47, 100, 140, name="bottom"),
            Rect(0, 0, 6, 140, name="left"),
            Rect(94, 0, 100, 140, name="right"),
        ],
    )
    plan = FloorPlan(
        corridors=model,
        default_entry=Point(3, 24),
        default_entry_name="000",
        entry_rules=[EntryRule(name="111", point=Point(96, 3), low=151, high=294)],
    )
    set_context(
        FloorContext(
            floor_plan=plan,
            service=RouteService(model),
            tables=TableDirectory({"12": (31, 33), "200": (76, 30)}),
            selector=EntrySelector(plan),
            default_width=100,
        )
    )

    app = FastAPI()
    app.include_router(router, prefix="/api")
    return TestClient(app)


def assert_connected(points: list):
    for a, b in zip(points, points[1:]):
        assert max(abs(a["x"] - b["x"]), abs(a["y"] - b["y"])) == 1


def test_health_and_floor_plan():
    """Test the health and floor plan endpoints."""
    print("\n=== Testing Health / Floor Plan ===")

    client = create_test_client()

    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

    response = client.get("/api/floorplan")
    assert response.status_code == 200
    data = response.json()
    assert data["width"] == 100
    assert data["height"] == 140
    assert len(data["corridors"]) == 4
    assert data["default_entry"]["name"] == "000"
    assert data["entry_rules"][0]["low"] == 151
    assert data["strategies"] == ["corridor", "direct"]
    assert data["tables"] == 2

    print("✓ Health and floor plan served")


def test_uninitialized_service():
    """Test 503 when no context has been installed."""
    print("\n=== Testing Uninitialized Service ===")

    client = create_test_client()
    set_context(None)

    assert client.get("/api/health").status_code == 503

    print("✓ 503 before startup")


def test_table_lookup():
    """Test table lookup with entry selection."""
    print("\n=== Testing Table Lookup ===")

    client = create_test_client()

    data = client.get("/api/tables/12").json()
    assert data["found"] is True
    assert data["point"] == {"x": 31, "y": 33}
    assert data["entry_name"] == "000"
    assert data["start"] == {"x": 3, "y": 24}

    data = client.get("/api/tables/200").json()
    assert data["entry_name"] == "111"
    assert data["start"] == {"x": 96, "y": 3}

    data = client.get("/api/tables/999").json()
    assert data["found"] is False
    assert data["point"] is None

    print("✓ Lookup works")


def test_find_table_routes_from_entry():
    """Test the main find-table flow."""
    print("\n=== Testing Find Table ===")

    client = create_test_client()

    response = client.post("/api/find-table", json={"identifier": " 12 "})
    assert response.status_code == 200
    data = response.json()
    assert data["identifier"] == "12"
    route = data["route"]
    assert route["found"] is True
    assert route["strategy"] == "corridor"
    assert route["points"][0] == {"x": 3, "y": 24}
    assert route["points"][-1] == {"x": 31, "y": 33}
    assert route["length"] == len(route["points"])
    assert_connected(route["points"])

    print("✓ Table found and routed")


def test_find_unknown_table():
    """Test that an unknown table is reported, not an error."""
    print("\n=== Testing Unknown Table ===")

    client = create_test_client()

    response = client.post("/api/find-table", json={"identifier": "999"})
    assert response.status_code == 200
    data = response.json()
    assert data["found"] is False
    assert data["route"]["found"] is False
    assert data["route"]["points"] == []

    assert client.post("/api/find-table", json={"identifier": ""}).status_code == 422

    print("✓ Unknown table handled")


def test_route_endpoint():
    """Test routing between raw plane points."""
    print("\n=== Testing Route Endpoint ===")

    client = create_test_client()

    response = client.post("/api/route", json={"start": {"x": 3, "y": 3}, "end": {"x": 97, "y": 3}})
    assert response.status_code == 200
    data = response.json()
    assert data["found"] is True
    assert data["length"] == 95
    assert data["cost"] == 94.0

    response = client.post(
        "/api/route",
        json={"start": {"x": 3, "y": 3}, "end": {"x": 5, "y": 4}, "strategy": "direct"},
    )
    assert response.json()["points"] == [{"x": 3, "y": 3}, {"x": 4, "y": 3}, {"x": 5, "y": 3}, {"x": 5, "y": 4}]

    # Off-plane end: no route, not an error
    response = client.post("/api/route", json={"start": {"x": 3, "y": 3}, "end": {"x": 500, "y": 3}})
    assert response.status_code == 200
    assert response.json()["found"] is False

    response = client.post(
        "/api/route",
        json={"start": {"x": 3, "y": 3}, "end": {"x": 5, "y": 4}, "strategy": "teleport"},
    )
    assert response.status_code == 400

    response = client.post("/api/route", json={"start": {"x": -1, "y": 3}, "end": {"x": 5, "y": 4}})
    assert response.status_code == 422

    print("✓ Route endpoint works")


def test_route_image():
    """Test the PNG overlay endpoint."""
    print("\n=== Testing Route Image ===")

    client = create_test_client()

    response = client.get("/api/route-image", params={"identifier": "12", "width": 50})
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content[:8] == b"\x89PNG\r\n\x1a\n"

    response = client.get("/api/route-image", params={"identifier": "999"})
    assert response.status_code == 404

    print("✓ Route image served")


def test_build_context_from_bundled_config():
    """Test startup wiring against the shipped config.yaml."""
    print("\n=== Testing Startup Context ===")

    from ..config import reset_yaml_config
    from ..main import build_context, create_app

    with patch.dict(os.environ, {"FLOORROUTE_FLOORPLAN": ""}):
        reset_yaml_config()
        set_table_directory(None)
        context = build_context()

    assert context.floor_plan.width == 1000
    assert context.service.default_strategy == "corridor"
    assert context.service.base_grid.shape == (1400, 1000)
    assert context.tables.lookup("000") == (34, 239)
    assert context.selector.select_start("151") == (963, 35)
    assert any(getattr(route, "path", None) == "/api/find-table" for route in create_app().routes)

    print("✓ Startup context built")


def run_all_tests():
    """Run all API tests."""
    print("\n" + "=" * 60)
    print("HTTP API - TEST SUITE")
    print("=" * 60)

    test_health_and_floor_plan()
    test_uninitialized_service()
    test_table_lookup()
    test_find_table_routes_from_entry()
    test_find_unknown_table()
    test_route_endpoint()
    test_route_image()
    test_build_context_from_bundled_config()

    print("\n" + "=" * 60)
    print("✅ ALL API TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
