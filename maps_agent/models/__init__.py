"""Data models for the maps tools."""

from .request import GeoPoint, OptimizeBy, RouteRequest, TextSearchRequest
from .response import (
    OrderedPoint,
    PlaceCandidate,
    PlaceSearchResult,
    RouteLeg,
    RouteResult,
)

__all__ = [
    "GeoPoint",
    "OptimizeBy",
    "RouteRequest",
    "TextSearchRequest",
    "OrderedPoint",
    "PlaceCandidate",
    "PlaceSearchResult",
    "RouteLeg",
    "RouteResult",
]
