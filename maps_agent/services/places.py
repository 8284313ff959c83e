"""Free-text place resolution using the Google Places API (New) text search."""

import logging
from typing import Any

import httpx

from maps_agent.config import settings
from maps_agent.models import PlaceCandidate, PlaceSearchResult

from .errors import MissingApiKeyError, PlacesSearchError, upstream_message


logger = logging.getLogger(__name__)

PLACES_FIELD_MASK = ",".join([
    "places.id",
    "places.name",
    "places.displayName",
    "places.formattedAddress",
    "places.location",
    "places.types",
    "places.viewport",
])

# Substrings of place types that denote a region rather than a point
AREA_TYPE_TOKENS = (
    "administrative_area_level",
    "locality",
    "sublocality",
    "postal_code",
    "country",
    "plus_code",
    "colloquial_area",
    "neighborhood",
    "political",
)

# Roughly 5 km
AREA_VIEWPORT_SPAN_DEGREES = 0.05

MIN_RESULTS = 1
MAX_RESULTS = 20
DEFAULT_LANGUAGE = "en"


def extract_place_id(place: dict[str, Any]) -> str:
    """Place ID from the 'places/<id>' resource name, else the raw id."""
    name = place.get("name")
    if isinstance(name, str) and name.startswith("places/"):
        return name[len("places/"):]
    return place.get("id") or ""


def is_area(types: list[str], viewport: dict[str, Any] | None) -> bool:
    """
    Decide whether a place is a region rather than a precise point.

    A place is an area if any of its types contains an area token, or if
    its viewport spans more than AREA_VIEWPORT_SPAN_DEGREES in latitude or
    longitude. Either test alone is enough.
    """
    if any(token in place_type for place_type in types for token in AREA_TYPE_TOKENS):
        return True

    if not viewport:
        return False

    low = viewport.get("low")
    high = viewport.get("high")
    if not low or not high:
        return False

    lat_span = abs((high.get("latitude") or 0) - (low.get("latitude") or 0))
    lng_span = abs((high.get("longitude") or 0) - (low.get("longitude") or 0))
    return lat_span > AREA_VIEWPORT_SPAN_DEGREES or lng_span > AREA_VIEWPORT_SPAN_DEGREES


def to_candidate(place: dict[str, Any], index: int) -> PlaceCandidate:
    """Normalize one raw Places API result."""
    location = place.get("location") or {}
    types = place.get("types") or []
    display_name = (place.get("displayName") or {}).get("text")

    return PlaceCandidate(
        place_id=extract_place_id(place),
        name=display_name or place.get("name") or f"Candidate {index + 1}",
        formatted_address=place.get("formattedAddress") or "",
        lat=location.get("latitude") or 0,
        lng=location.get("longitude") or 0,
        types=types,
        is_area=is_area(types, place.get("viewport")),
    )


class TextSearchService:
    """Resolve free text into candidate places with precision flags."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        endpoint: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise MissingApiKeyError(
                "Google Maps API key is required for text search. "
                "Set GOOGLE_MAPS_API_KEY or pass api_key."
            )
        self.endpoint = endpoint or settings.places_api_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def search(
        self,
        query: str,
        max_results: int = 5,
        language_code: str | None = None,
    ) -> PlaceSearchResult:
        """
        Search for places matching free text.

        `resolved` is True only when exactly one candidate comes back and it
        is a precise point, not an area.
        """
        body = {
            "textQuery": query,
            "maxResultCount": max(MIN_RESULTS, min(MAX_RESULTS, max_results)),
            "languageCode": language_code or DEFAULT_LANGUAGE,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={
                        "Content-Type": "application/json",
                        "X-Goog-Api-Key": self.api_key,
                        "X-Goog-FieldMask": PLACES_FIELD_MASK,
                    },
                    json=body,
                )

                if not response.is_success:
                    raise PlacesSearchError(
                        f"Places text search failed: {upstream_message(response)} "
                        f"(HTTP {response.status_code})",
                        status_code=response.status_code,
                    )

                payload = response.json()

            places = (payload.get("places") if isinstance(payload, dict) else None) or []
            candidates = [to_candidate(place, idx) for idx, place in enumerate(places)]
        except PlacesSearchError as e:
            logger.error("places_text_search error: %s", e)
            raise
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.error("places_text_search error: %s", e)
            raise PlacesSearchError(f"Places text search failed: {e}") from e

        resolved = len(candidates) == 1 and not candidates[0].is_area

        return PlaceSearchResult(resolved=resolved, candidates=candidates)
