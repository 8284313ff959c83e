"""Tools for the maps agent."""

from .places import places_text_search
from .routing import routes_optimize

__all__ = [
    "routes_optimize",
    "places_text_search",
]
