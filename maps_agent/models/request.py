"""Input models for the maps tools."""

from enum import Enum
from pydantic import BaseModel, Field


MAX_WAYPOINTS = 23


def _plain_decimal(value: float) -> str:
    """Fixed-point text for a coordinate, trailing zeros trimmed."""
    text = f"{value:.7f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


class OptimizeBy(str, Enum):
    """Criterion used to order the waypoints."""
    TIME = "time"
    DISTANCE = "distance"


class GeoPoint(BaseModel):
    """A coordinate pair with an optional human-friendly label."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    label: str | None = Field(default=None, description="Human-friendly label for this stop")

    class Config:
        frozen = True

    def as_lat_lng(self) -> str:
        """Format as 'lat,lng' for query-string APIs (plain decimals, never exponents)."""
        return f"{_plain_decimal(self.lat)},{_plain_decimal(self.lng)}"


class RouteRequest(BaseModel):
    """Request model for multi-stop route optimization."""

    origin: GeoPoint = Field(..., description="Starting point")
    destination: GeoPoint = Field(..., description="Ending point")
    waypoints: list[GeoPoint] = Field(
        default_factory=list,
        max_length=MAX_WAYPOINTS,
        description="Intermediate stops to reorder for the best route"
    )
    optimize_by: OptimizeBy = Field(
        default=OptimizeBy.TIME,
        description="Optimize for shortest travel time (traffic-aware) or distance"
    )
    departure_time: str | None = Field(
        default="now",
        description="Use 'now' for immediate departure or provide an ISO timestamp"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "origin": {"lat": 52.5200, "lng": 13.4050, "label": "Depot"},
                "destination": {"lat": 52.3906, "lng": 13.0645, "label": "Potsdam"},
                "waypoints": [
                    {"lat": 52.4556, "lng": 13.2956, "label": "Zehlendorf"},
                    {"lat": 52.5163, "lng": 13.3777},
                ],
                "optimize_by": "time",
                "departure_time": "now",
            }
        }


class TextSearchRequest(BaseModel):
    """Request model for free-text place search."""

    query: str = Field(..., min_length=2, description="Free-form text to resolve into places")
    max_results: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of candidates to return (1-20)"
    )
    language_code: str | None = Field(
        default=None,
        description="BCP-47 language code (default en)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "query": "Brandenburg Gate",
                "max_results": 5,
                "language_code": "en",
            }
        }
