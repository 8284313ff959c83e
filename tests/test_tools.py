"""Tests for the agent-facing maps tools."""

import json

import httpx
import pytest

from maps_agent.services import RoutesService, TextSearchService
from maps_agent.tools import places_text_search, routes_optimize
from maps_agent.tools import places as places_tool
from maps_agent.tools import routing as routing_tool

from conftest import API_KEY


ORIGIN = {"lat": 52.52, "lng": 13.405}
DESTINATION = {"lat": 52.3906, "lng": 13.0645}


@pytest.fixture
def routes_transport(monkeypatch, recorder):
    """Point the routing tool at a mock transport; returns a queue setter."""
    def _use(*responses):
        handler, transport = recorder(*responses)
        monkeypatch.setattr(
            routing_tool,
            "RoutesService",
            lambda: RoutesService(api_key=API_KEY, transport=transport),
        )
        return handler
    return _use


@pytest.fixture
def places_transport(monkeypatch, recorder):
    """Point the places tool at a mock transport; returns a queue setter."""
    def _use(*responses):
        handler, transport = recorder(*responses)
        monkeypatch.setattr(
            places_tool,
            "TextSearchService",
            lambda: TextSearchService(api_key=API_KEY, transport=transport),
        )
        return handler
    return _use


@pytest.mark.asyncio
class TestRoutesOptimizeTool:
    """Test the routes_optimize tool boundary."""

    async def test_success_payload(self, routes_transport):
        routes_transport(httpx.Response(200, json={
            "routes": [{
                "distanceMeters": 27000,
                "duration": "1800s",
                "polyline": {"encodedPolyline": "direct"},
                "legs": [{"distanceMeters": 27000, "duration": "1800s"}],
            }]
        }))

        data = json.loads(await routes_optimize(origin=ORIGIN, destination=DESTINATION))

        assert data["source"] == "preferred"
        assert data["distance_meters"] == 27000
        assert data["duration_seconds"] == 1800
        assert [p["label"] for p in data["ordered"]] == ["Origin", "Destination"]
        assert data["legs"][0]["start_label"] == "Origin"

    async def test_too_many_waypoints(self, routes_transport):
        handler = routes_transport()
        waypoints = [{"lat": 52.5, "lng": 13.4}] * 24

        data = json.loads(await routes_optimize(
            origin=ORIGIN, destination=DESTINATION, waypoints=waypoints,
        ))

        assert data["error"].startswith("routes_optimize failed: invalid parameters")
        assert handler.requests == []

    async def test_invalid_coordinates(self, routes_transport):
        routes_transport()

        data = json.loads(await routes_optimize(
            origin={"lat": 95, "lng": 13.4}, destination=DESTINATION,
        ))

        assert "invalid parameters" in data["error"]

    async def test_unknown_optimization_criterion(self, routes_transport):
        routes_transport()

        data = json.loads(await routes_optimize(
            origin=ORIGIN, destination=DESTINATION, optimize_by="scenic",
        ))

        assert "invalid parameters" in data["error"]

    async def test_both_backends_failing(self, routes_transport):
        routes_transport(
            httpx.Response(500, json={"error": {"message": "boom"}}),
            httpx.Response(200, json={"status": "OVER_QUERY_LIMIT", "routes": []}),
        )

        data = json.loads(await routes_optimize(origin=ORIGIN, destination=DESTINATION))

        assert data == {"error": "routes_optimize failed: Directions API error: OVER_QUERY_LIMIT"}

    async def test_missing_api_key(self):
        data = json.loads(await routes_optimize(origin=ORIGIN, destination=DESTINATION))

        assert data["error"].startswith("routes_optimize failed: Google Maps API key is required")


@pytest.mark.asyncio
class TestPlacesTextSearchTool:
    """Test the places_text_search tool boundary."""

    async def test_success_payload(self, places_transport):
        handler = places_transport(httpx.Response(200, json={
            "places": [{
                "name": "places/abc",
                "displayName": {"text": "Cafe 123"},
                "location": {"latitude": 1.1, "longitude": 2.2},
                "types": ["cafe"],
            }]
        }))

        data = json.loads(await places_text_search("Cafe 123", max_results=3))

        assert data["resolved"] is True
        assert data["candidates"][0]["place_id"] == "abc"
        assert data["candidates"][0]["is_area"] is False
        body = json.loads(handler.requests[0].content)
        assert body["maxResultCount"] == 3
        assert body["languageCode"] == "en"

    async def test_query_too_short(self, places_transport):
        handler = places_transport()

        data = json.loads(await places_text_search("x"))

        assert data["error"].startswith("places_text_search failed: invalid parameters")
        assert handler.requests == []

    async def test_max_results_out_of_range(self, places_transport):
        places_transport()

        data = json.loads(await places_text_search("Cafe", max_results=21))

        assert "invalid parameters" in data["error"]

    async def test_null_coordinates_are_not_a_parameter_error(self, places_transport):
        places_transport(httpx.Response(200, json={
            "places": [{"id": "x", "location": {"latitude": None, "longitude": None}}],
        }))

        data = json.loads(await places_text_search("Somewhere"))

        assert "error" not in data
        assert data["candidates"][0]["place_id"] == "x"
        assert (data["candidates"][0]["lat"], data["candidates"][0]["lng"]) == (0, 0)

    async def test_malformed_response_is_not_a_parameter_error(self, places_transport):
        places_transport(httpx.Response(200, json={"places": ["not-a-place"]}))

        data = json.loads(await places_text_search("Somewhere"))

        assert data["error"].startswith("places_text_search failed: Places text search failed")
        assert "invalid parameters" not in data["error"]

    async def test_backend_error(self, places_transport):
        places_transport(httpx.Response(403, json={"error": {"message": "API key invalid"}}))

        data = json.loads(await places_text_search("Cafe 123"))

        assert "API key invalid" in data["error"]
        assert data["error"].startswith("places_text_search failed:")

    async def test_missing_api_key(self):
        data = json.loads(await places_text_search("Cafe 123"))

        assert data["error"].startswith("places_text_search failed: Google Maps API key is required")
