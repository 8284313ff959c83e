"""Multi-stop route optimization using Google Routes API, with Directions API as fallback."""

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Sequence

import httpx

from maps_agent.config import settings
from maps_agent.models import (
    GeoPoint,
    OptimizeBy,
    OrderedPoint,
    RouteLeg,
    RouteRequest,
    RouteResult,
)

from .errors import (
    DirectionsFallbackError,
    MissingApiKeyError,
    RoutesPreferredError,
    upstream_message,
)


logger = logging.getLogger(__name__)

# Fields the Routes API should compute and return
ROUTES_FIELD_MASK = ",".join([
    "routes.distanceMeters",
    "routes.duration",
    "routes.polyline.encodedPolyline",
    "routes.legs.distanceMeters",
    "routes.legs.duration",
    "routes.optimizedIntermediateWaypointIndex",
])

ROUTING_PREFERENCES = {
    OptimizeBy.TIME: "TRAFFIC_AWARE_OPTIMAL",
    OptimizeBy.DISTANCE: "TRAFFIC_UNAWARE",
}

DISTANCE_FALLBACK_WARNING = (
    "Route computed by the Directions API fallback, which orders stops by "
    "travel time only; distance optimization was not applied."
)

_DURATION_PATTERN = re.compile(r"([0-9.]+)s")


def parse_duration_seconds(duration: Any) -> int:
    """
    Parse a Routes API duration such as "800s" or "123.6s" into whole seconds.

    Returns 0 for missing or unparseable values.
    """
    if not duration or not isinstance(duration, str):
        return 0
    match = _DURATION_PATTERN.search(duration)
    if not match:
        return 0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0
    # Half-up rounding, not banker's rounding
    return math.floor(value + 0.5)


def default_label(index: int, total: int) -> str:
    """Label for an unlabeled point at a position in the ordered sequence."""
    if index == 0:
        return "Origin"
    if index == total - 1:
        return "Destination"
    return f"Stop {index}"


def _parse_departure(value: str | None) -> datetime | None:
    if not value or value == "now":
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def departure_time_iso(value: str | None) -> str:
    """Resolve a departure time for the Routes API (always RFC 3339, UTC)."""
    when = _parse_departure(value) or datetime.now(timezone.utc)
    iso = when.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def departure_time_epoch(value: str | None) -> str:
    """Resolve a departure time for the Directions API ("now" or epoch seconds)."""
    when = _parse_departure(value)
    if when is None:
        return "now"
    return str(math.floor(when.timestamp()))


def _order_waypoints(
    waypoints: Sequence[GeoPoint],
    order: Any,
    error_cls: type[Exception],
) -> list[GeoPoint]:
    """Apply the backend's waypoint permutation (identity when absent)."""
    if order is None:
        return list(waypoints)
    if (
        not isinstance(order, list)
        or not all(isinstance(idx, int) for idx in order)
        or sorted(order) != list(range(len(waypoints)))
    ):
        raise error_cls(f"Invalid waypoint order {order!r} for {len(waypoints)} waypoints")
    return [waypoints[idx] for idx in order]


def _assemble_result(
    request: RouteRequest,
    order: Any,
    legs: list[tuple[int, int]],
    *,
    polyline: str,
    source: str,
    error_cls: type[Exception],
) -> RouteResult:
    """
    Normalize a backend response into a RouteResult.

    Args:
        request: The original request
        order: Waypoint permutation reported by the backend, or None
        legs: (distance_meters, duration_seconds) per leg, in travel order
        polyline: Encoded overview polyline
        source: Provenance tag for the result
        error_cls: Exception raised when the response is malformed

    Totals are the sums of the legs; callers override them when the
    backend reports its own aggregate.
    """
    points = [
        request.origin,
        *_order_waypoints(request.waypoints, order, error_cls),
        request.destination,
    ]
    total = len(points)

    if len(legs) != total - 1:
        raise error_cls(f"Expected {total - 1} route legs, got {len(legs)}")

    ordered = [
        OrderedPoint(
            label=point.label or default_label(idx, total),
            lat=point.lat,
            lng=point.lng,
        )
        for idx, point in enumerate(points)
    ]

    route_legs = [
        RouteLeg(
            start_label=ordered[idx].label,
            end_label=ordered[idx + 1].label,
            distance_meters=distance,
            duration_seconds=duration,
        )
        for idx, (distance, duration) in enumerate(legs)
    ]

    return RouteResult(
        polyline=polyline,
        ordered=ordered,
        distance_meters=sum(leg.distance_meters for leg in route_legs),
        duration_seconds=sum(leg.duration_seconds for leg in route_legs),
        legs=route_legs,
        source=source,
    )


class RoutesService:
    """
    Waypoint-order optimization against Google Maps Platform.

    The Routes API is tried first. Any failure there (network, HTTP status,
    missing or malformed route) is logged and the same request is replayed
    against the legacy Directions API, whose errors are raised to the caller.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        routes_url: str | None = None,
        directions_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise MissingApiKeyError(
                "Google Maps API key is required for route optimization. "
                "Set GOOGLE_MAPS_API_KEY or pass api_key."
            )
        self.routes_url = routes_url or settings.routes_api_url
        self.directions_url = directions_url or settings.directions_api_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def optimize_route(self, request: RouteRequest) -> RouteResult:
        """Optimize the stop order, preferring the Routes API."""
        try:
            return await self._compute_routes_preferred(request)
        except Exception as e:
            logger.warning("Routes API failed, falling back to Directions API: %s", e)

        result = await self._compute_directions_fallback(request)

        # Directions API can only optimize for time
        if request.optimize_by == OptimizeBy.DISTANCE:
            result.warnings.append(DISTANCE_FALLBACK_WARNING)

        return result

    async def _compute_routes_preferred(self, request: RouteRequest) -> RouteResult:
        """Calculate the route using the Routes API computeRoutes endpoint."""
        waypoints = request.waypoints

        body = {
            "origin": _to_waypoint(request.origin),
            "destination": _to_waypoint(request.destination),
            "intermediates": [_to_waypoint(wp) for wp in waypoints],
            "travelMode": "DRIVE",
            "routingPreference": ROUTING_PREFERENCES[request.optimize_by],
            "departureTime": departure_time_iso(request.departure_time),
            "polylineQuality": "HIGH_QUALITY",
            "polylineEncoding": "ENCODED_POLYLINE",
            "optimizeWaypointOrder": len(waypoints) > 0,
        }

        async with self._client() as client:
            response = await client.post(
                self.routes_url,
                headers={
                    "Content-Type": "application/json",
                    "X-Goog-Api-Key": self.api_key,
                    "X-Goog-FieldMask": ROUTES_FIELD_MASK,
                },
                json=body,
            )

            if not response.is_success:
                raise RoutesPreferredError(
                    f"Routes API error: {upstream_message(response)} (HTTP {response.status_code})",
                    status_code=response.status_code,
                )

            payload = response.json()

        routes = payload.get("routes") if isinstance(payload, dict) else None
        if not routes:
            raise RoutesPreferredError("Routes API returned no routes")

        route = routes[0]
        legs = [
            (int(leg.get("distanceMeters") or 0), parse_duration_seconds(leg.get("duration")))
            for leg in route.get("legs") or []
        ]

        result = _assemble_result(
            request,
            route.get("optimizedIntermediateWaypointIndex"),
            legs,
            polyline=(route.get("polyline") or {}).get("encodedPolyline", ""),
            source="preferred",
            error_cls=RoutesPreferredError,
        )

        # Prefer the route-level aggregates when the API reports them
        if route.get("distanceMeters"):
            result.distance_meters = int(route["distanceMeters"])
        if route.get("duration"):
            result.duration_seconds = parse_duration_seconds(route["duration"])

        logger.info(
            "Routes API resolved %d stops: %d m, %d s",
            len(result.ordered), result.distance_meters, result.duration_seconds,
        )
        return result

    async def _compute_directions_fallback(self, request: RouteRequest) -> RouteResult:
        """Calculate the route using the legacy Directions API."""
        waypoints = request.waypoints

        params = {
            "origin": request.origin.as_lat_lng(),
            "destination": request.destination.as_lat_lng(),
            "mode": "driving",
            "departure_time": departure_time_epoch(request.departure_time),
        }
        if waypoints:
            # Directions API always optimizes for time, regardless of optimize_by
            params["waypoints"] = "optimize:true|" + "|".join(wp.as_lat_lng() for wp in waypoints)
        params["key"] = self.api_key

        try:
            async with self._client() as client:
                response = await client.get(self.directions_url, params=params)
        except httpx.HTTPError as e:
            logger.error("Directions API request failed: %s", e)
            raise DirectionsFallbackError(f"Directions API request failed: {e}") from e

        if not response.is_success:
            logger.error("Directions API returned HTTP %d", response.status_code)
            raise DirectionsFallbackError(
                f"Directions API HTTP error: {upstream_message(response)} (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DirectionsFallbackError(f"Directions API returned invalid JSON: {e}") from e

        status = data.get("status") if isinstance(data, dict) else None
        routes = data.get("routes") if isinstance(data, dict) else None
        if status != "OK" or not routes:
            detail = data.get("error_message") if isinstance(data, dict) else None
            message = f"Directions API error: {status or 'UNKNOWN'}"
            if detail:
                message = f"{message}: {detail}"
            logger.error(message)
            raise DirectionsFallbackError(message, status_code=response.status_code)

        try:
            route = routes[0]
            legs = []
            for leg in route.get("legs") or []:
                distance = (leg.get("distance") or {}).get("value") or 0
                # Live traffic duration wins over the static estimate
                duration = (
                    (leg.get("duration_in_traffic") or {}).get("value")
                    or (leg.get("duration") or {}).get("value")
                    or 0
                )
                legs.append((int(distance), int(duration)))
            waypoint_order = route.get("waypoint_order")
            polyline = (route.get("overview_polyline") or {}).get("points", "")
        except (AttributeError, TypeError, KeyError, IndexError, ValueError) as e:
            logger.error("Directions API returned a malformed route: %s", e)
            raise DirectionsFallbackError(f"Directions API returned a malformed route: {e}") from e

        # No route-level aggregate here, so the leg sums stand
        result = _assemble_result(
            request,
            waypoint_order,
            legs,
            polyline=polyline,
            source="fallback",
            error_cls=DirectionsFallbackError,
        )

        logger.info(
            "Directions API resolved %d stops: %d m, %d s",
            len(result.ordered), result.distance_meters, result.duration_seconds,
        )
        return result


def _to_waypoint(point: GeoPoint) -> dict:
    """Routes API waypoint for a coordinate pair."""
    return {
        "location": {
            "latLng": {
                "latitude": point.lat,
                "longitude": point.lng,
            }
        }
    }
