"""Chat agents exposing the maps tools."""

from .maps_agent import create_maps_agent

__all__ = ["create_maps_agent"]
