"""Exceptions raised by the Google Maps services."""

import httpx


class MapsServiceError(Exception):
    """Base class for maps service failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MissingApiKeyError(MapsServiceError, ValueError):
    """No API key was passed and none is configured."""


class RoutesPreferredError(MapsServiceError):
    """The Routes API call failed; recovered by the Directions fallback."""


class DirectionsFallbackError(MapsServiceError):
    """The Directions API fallback failed; no further fallback exists."""


class PlacesSearchError(MapsServiceError):
    """The Places text search call failed."""


def upstream_message(response: httpx.Response) -> str:
    """Best error message available from a failed Google response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        # Routes and Places return {"error": {"message": ...}}, Directions {"error_message": ...}
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if payload.get("error_message"):
            return payload["error_message"]
    return response.reason_phrase or "Unknown error"
