"""Output models for the maps tools."""

from typing import Literal

from pydantic import BaseModel, Field


RouteSource = Literal["preferred", "fallback"]


class OrderedPoint(BaseModel):
    """A stop in the final visiting order, always labeled."""
    label: str
    lat: float
    lng: float


class RouteLeg(BaseModel):
    """Travel between two consecutive ordered points."""

    start_label: str
    end_label: str
    distance_meters: int = Field(default=0, ge=0)
    duration_seconds: int = Field(default=0, ge=0)


class RouteResult(BaseModel):
    """Normalized route, whichever backend produced it."""

    polyline: str = ""
    ordered: list[OrderedPoint] = Field(default_factory=list)
    distance_meters: int = Field(default=0, ge=0)
    duration_seconds: int = Field(default=0, ge=0)
    legs: list[RouteLeg] = Field(default_factory=list)
    source: RouteSource
    warnings: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "polyline": "_p~iF~ps|U_ulLnnqC_mqNvxq`@",
                "ordered": [
                    {"label": "Origin", "lat": 52.52, "lng": 13.405},
                    {"label": "Stop 1", "lat": 52.5163, "lng": 13.3777},
                    {"label": "Destination", "lat": 52.3906, "lng": 13.0645},
                ],
                "distance_meters": 31500,
                "duration_seconds": 2460,
                "legs": [
                    {"start_label": "Origin", "end_label": "Stop 1",
                     "distance_meters": 2500, "duration_seconds": 420},
                    {"start_label": "Stop 1", "end_label": "Destination",
                     "distance_meters": 29000, "duration_seconds": 2040},
                ],
                "source": "preferred",
                "warnings": [],
            }
        }


class PlaceCandidate(BaseModel):
    """A single text search hit."""

    place_id: str
    name: str
    formatted_address: str = ""
    lat: float = 0.0
    lng: float = 0.0
    types: list[str] = Field(default_factory=list)
    is_area: bool = False


class PlaceSearchResult(BaseModel):
    """Text search outcome with the ambiguity verdict."""

    resolved: bool
    candidates: list[PlaceCandidate] = Field(default_factory=list)
