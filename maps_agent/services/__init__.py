"""Google Maps Platform services."""

from .errors import (
    DirectionsFallbackError,
    MapsServiceError,
    MissingApiKeyError,
    PlacesSearchError,
    RoutesPreferredError,
)
from .places import TextSearchService
from .routes import RoutesService

__all__ = [
    "RoutesService",
    "TextSearchService",
    "MapsServiceError",
    "MissingApiKeyError",
    "RoutesPreferredError",
    "DirectionsFallbackError",
    "PlacesSearchError",
]
