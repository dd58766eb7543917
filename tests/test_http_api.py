from unittest import mock

import pytest
from fastapi.testclient import TestClient

from trip_planner.http_api import create_fastapi_app
from trip_planner.http_api.dependencies import get_rate_limiter, get_routing_service
from trip_planner.http_api.rate_limit import FixedWindowRateLimiter, RateLimitExceeded
from trip_planner.routing import RoutePlanningService, RoutingConfig


@pytest.fixture
def app():
    application = create_fastapi_app(allowed_origins=["http://localhost:3000"])
    application.dependency_overrides[get_routing_service] = lambda: RoutePlanningService(RoutingConfig())
    application.dependency_overrides[get_rate_limiter] = lambda: FixedWindowRateLimiter(max_requests=100)
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def route_body(**overrides):
    body = {
        "start": {"id": "home", "name": "Home", "lat": 37.5665, "lng": 126.978},
        "waypoints": [
            {"id": "tower", "name": "N Seoul Tower", "lat": 37.5512, "lng": 126.9882},
            {"id": "palace", "name": "Gyeongbokgung", "lat": 37.5796, "lng": 126.977},
        ],
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_optimize_route_success(client):
    response = client.post("/route/optimize", json=route_body())

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert [point["id"] for point in data["orderedPoints"]] == ["home", "palace", "tower"]
    assert len(data["segments"]) == 2
    assert data["source"] == "fallback"
    assert data["segments"][0]["from"]["id"] == "home"
    assert data["totalDistanceKm"] > 0
    assert data["warnings"]


def test_round_trip_accepts_string_flag(client):
    response = client.post("/route/optimize", json=route_body(roundTrip="true"))

    ordered = response.json()["data"]["orderedPoints"]
    assert response.status_code == 200
    assert len(ordered) == 4
    assert ordered[-1]["id"] == "home"


def test_aliases_and_mode_synonyms(client):
    body = {
        "origin": {"latitude": 37.5665, "longitude": 126.978, "title": "City Hall"},
        "points": [{"y": 37.5512, "x": 126.9882}],
        "transportMode": "Subway",
    }

    response = client.post("/route/optimize", json=body)

    assert response.status_code == 200
    assert response.json()["data"]["orderedPoints"][0]["name"] == "City Hall"


def test_first_waypoint_becomes_start_when_missing(client):
    body = {"waypoints": [{"name": "First", "lat": 37.5, "lng": 127.0}, {"name": "Second", "lat": 37.51, "lng": 127.0}]}

    response = client.post("/route/optimize", json=body)

    assert response.status_code == 200
    assert [point["name"] for point in response.json()["data"]["orderedPoints"]] == ["First", "Second"]


def test_single_point_is_rejected(client):
    response = client.post("/route/optimize", json={"start": {"lat": 37.5, "lng": 127.0}})

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "Bad Request"
    assert "At least two points are required to optimize a route." in payload["details"]


def test_missing_start_is_rejected(client):
    response = client.post("/route/optimize", json={"waypoints": []})

    assert response.status_code == 400
    assert any("start/origin point is required" in detail for detail in response.json()["details"])


def test_out_of_range_coordinates_are_rejected(client):
    body = route_body(end={"lat": 123.0, "lng": 127.0})

    response = client.post("/route/optimize", json=body)

    assert response.status_code == 400
    assert any(detail.startswith("end.lat") for detail in response.json()["details"])


def test_unknown_mode_is_rejected(client):
    response = client.post("/route/optimize", json=route_body(mode="teleport"))

    assert response.status_code == 400
    assert any("mode must be one of driving, transit, or walking." in detail for detail in response.json()["details"])


def test_waypoint_cap(client):
    waypoints = [{"lat": 37.5 + index * 0.001, "lng": 127.0} for index in range(26)]

    response = client.post("/route/optimize", json=route_body(waypoints=waypoints))

    assert response.status_code == 400


def test_rate_limit(app):
    limiter = FixedWindowRateLimiter(max_requests=2)
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    client = TestClient(app)

    statuses = [client.post("/route/optimize", json=route_body()).status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    response = client.post("/route/optimize", json=route_body())
    assert response.json()["error"] == "Too Many Requests"
    assert int(response.headers["Retry-After"]) >= 1


def test_unexpected_errors_become_opaque_500s(app):
    service = mock.Mock()
    service.optimize_route.side_effect = RuntimeError("provider credentials: secret-key")
    app.dependency_overrides[get_routing_service] = lambda: service
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/route/optimize", json=route_body())

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error", "message": "An unexpected error occurred."}
    assert "secret-key" not in response.text


def test_rate_limiter_window_resets():
    now = [0.0]
    limiter = FixedWindowRateLimiter(max_requests=1, window_s=60.0, clock=lambda: now[0])

    limiter.hit("client")
    with pytest.raises(RateLimitExceeded) as excinfo:
        limiter.hit("client")
    assert excinfo.value.retry_after_s == 60

    limiter.hit("other-client")
    now[0] = 60.0
    limiter.hit("client")


def test_cluster_regions_endpoint(client):
    body = {
        "points": [
            {"id": "a", "lat": 0, "lng": 0},
            {"id": "b", "lat": 0, "lng": 0.02, "weight": 3},
            {"id": "c", "lat": 10, "lng": 10},
        ],
        "maxClusterRadiusKm": 5,
        "minClusterSize": 2,
    }

    response = client.post("/regions/cluster", json=body)

    assert response.status_code == 200
    payload = response.json()
    assert len(payload["clusters"]) == 1
    cluster = payload["clusters"][0]
    assert cluster["id"] == "region-1"
    assert cluster["pointIds"] == ["a", "b"]
    assert cluster["totalWeight"] == 4
    assert cluster["centroid"]["lng"] == pytest.approx(0.015)
    assert payload["droppedPointIds"] == ["c"]


def test_cluster_regions_rejects_duplicates(client):
    body = {"points": [{"id": "p1", "lat": 0, "lng": 0}, {"id": "p1", "lat": 1, "lng": 1}]}

    response = client.post("/regions/cluster", json=body)

    assert response.status_code == 400
    assert "p1" in response.json()["message"]


def test_cluster_regions_rejects_invalid_radius(client):
    body = {"points": [{"id": "a", "lat": 0, "lng": 0}], "maxClusterRadiusKm": 0}

    response = client.post("/regions/cluster", json=body)

    assert response.status_code == 400
    assert "max_cluster_radius_km" in response.json()["message"]
