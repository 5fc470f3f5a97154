"""HTTP surface tests using FastAPI's TestClient against a fake ArcGIS service."""

import httpx
import pytest
from fastapi.testclient import TestClient

from arcgis_hub.api_server import app, get_http_client

from .conftest import feature


@pytest.fixture
def api(arcgis):
    async def _client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(arcgis.handler)) as c:
            yield c

    app.dependency_overrides[get_http_client] = _client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(api):
    r = api.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_manifest_lists_every_action(api):
    r = api.get("/mcp/manifest")
    assert r.status_code == 200
    endpoints = {a["endpoint"] for a in r.json()["actions"]}
    assert endpoints == {
        "/mcp/getLayers",
        "/mcp/query_layer",
        "/mcp/get_statistics",
        "/mcp/export_map",
        "/mcp/get_tradeoffs",
        "/mcp/get_nearest_facility",
    }


def test_get_layers(api, arcgis):
    arcgis.payload = {"results": [{"id": "1", "title": "Roads"}]}
    r = api.post("/mcp/getLayers", json={"portal_url": "https://portal/", "token": "tok"})
    assert r.status_code == 200
    assert r.json() == {"items": [{"id": "1", "title": "Roads", "url": None}]}


def test_missing_field_returns_400(api, arcgis):
    r = api.post("/mcp/query_layer", json={"layer_url": "https://svc/0"})
    assert r.status_code == 400
    assert r.json() == {"error": "token required"}
    assert arcgis.requests == []


def test_empty_body_returns_400(api, arcgis):
    r = api.post("/mcp/get_statistics")
    assert r.status_code == 400
    assert r.json() == {"error": "layer_url required"}


def test_invalid_json_returns_400(api, arcgis):
    r = api.post("/mcp/export_map", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"error": "request body must be valid JSON"}
    assert arcgis.requests == []


def test_tradeoffs(api, arcgis):
    arcgis.payload = {"features": [feature(literacy=85, poverty=15, D_NAME_EN="A")]}
    r = api.post("/mcp/get_tradeoffs", json={
        "layer_url": "https://svc/0",
        "token": "tok",
        "strong_field": "literacy",
        "weak_field": "poverty",
        "strong_threshold": 80,
        "weak_threshold": 20,
    })
    assert r.status_code == 200
    assert r.json()["districts"][0]["literacy"] == 85


def test_nearest_facility_not_found(api, arcgis):
    arcgis.payload = {"features": []}
    r = api.post("/mcp/get_nearest_facility", json={
        "feature_service_url": "https://svc/0", "token": "tok", "x": 0, "y": 0,
    })
    assert r.status_code == 404
    assert r.json() == {"message": "No facility found nearby."}


def test_remote_error_returns_500(api, arcgis):
    arcgis.payload = {"error": {"code": 400, "message": "Invalid query"}}
    r = api.post("/mcp/get_statistics", json={"layer_url": "https://svc/0", "token": "tok", "statFields": "a"})
    assert r.status_code == 500
    assert r.json() == {"error": {"code": 400, "message": "Invalid query"}}


def test_nan_coordinate_returns_400_without_fetch(api, arcgis):
    arcgis.payload = {"features": [feature(5, 5, NAME="far"), feature(0.001, 0.001, NAME="near")]}
    body = b'{"feature_service_url": "https://svc/0", "token": "t", "x": NaN, "y": 0}'
    r = api.post("/mcp/get_nearest_facility", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert arcgis.requests == []


def test_nan_threshold_returns_400_without_fetch(api, arcgis):
    body = (
        b'{"layer_url": "https://svc/0", "token": "t", "strong_field": "s", "weak_field": "w",'
        b' "strong_threshold": NaN, "weak_threshold": 20}'
    )
    r = api.post("/mcp/get_tradeoffs", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert arcgis.requests == []
