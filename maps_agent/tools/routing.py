"""Route optimization tool using Google Routes API (Directions API as fallback)."""

import json
import logging
from typing import Annotated

from pydantic import ValidationError

from maps_agent.models import GeoPoint, RouteRequest
from maps_agent.services import RoutesService


logger = logging.getLogger(__name__)

TOOL_NAME = "routes_optimize"


async def routes_optimize(
    origin: Annotated[GeoPoint, "Starting point: lat, lng and an optional label"],
    destination: Annotated[GeoPoint, "Ending point: lat, lng and an optional label"],
    waypoints: Annotated[list[GeoPoint] | None, "Intermediate stops to reorder for the best route (max 23)"] = None,
    optimize_by: Annotated[str, "'time' for shortest traffic-aware travel time, 'distance' for shortest distance"] = "time",
    departure_time: Annotated[str, "'now' for immediate departure or an ISO timestamp"] = "now",
) -> str:
    """
    Optimize waypoint order and return a polyline with distance/time summaries.

    Use this when the user has several stops and wants the best visiting order.
    Returns the ordered stops, per-leg distance and duration, totals, the
    encoded polyline, and which backend produced the route.
    """
    try:
        request = RouteRequest(
            origin=origin,
            destination=destination,
            waypoints=waypoints or [],
            optimize_by=optimize_by,
            departure_time=departure_time,
        )
    except ValidationError as e:
        return json.dumps({"error": f"{TOOL_NAME} failed: invalid parameters: {e}"})

    try:
        service = RoutesService()
        result = await service.optimize_route(request)
    except Exception as e:
        logger.error("%s failed: %s", TOOL_NAME, e)
        return json.dumps({"error": f"{TOOL_NAME} failed: {e}"})

    return result.model_dump_json(indent=2)
