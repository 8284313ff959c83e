"""Configuration management."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Settings(BaseModel):
    """Application settings."""

    # Google Maps Platform key shared by Routes, Directions and Places
    google_maps_api_key: str | None = Field(
        default_factory=lambda: os.getenv("GOOGLE_MAPS_API_KEY")
    )

    # Endpoints (overridable for proxies and tests)
    routes_api_url: str = Field(
        default_factory=lambda: os.getenv(
            "ROUTES_API_URL", "https://routes.googleapis.com/directions/v2:computeRoutes"
        )
    )
    directions_api_url: str = Field(
        default_factory=lambda: os.getenv(
            "DIRECTIONS_API_URL", "https://maps.googleapis.com/maps/api/directions/json"
        )
    )
    places_api_url: str = Field(
        default_factory=lambda: os.getenv(
            "PLACES_API_URL", "https://places.googleapis.com/v1/places:searchText"
        )
    )
    http_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("MAPS_HTTP_TIMEOUT", "30"))
    )

    # AI Model settings
    github_token: str | None = Field(
        default_factory=lambda: os.getenv("GITHUB_TOKEN")
    )
    model_id: str = Field(
        default_factory=lambda: os.getenv("MODEL_ID", "openai/gpt-4.1")
    )
    use_ollama: bool = Field(
        default_factory=lambda: os.getenv("USE_OLLAMA", "").lower() in ("true", "1", "yes")
    )
    ollama_url: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_URL", "http://localhost:11434/v1")
    )
    ollama_model_id: str = Field(
        default_factory=lambda: os.getenv("MODEL_ID", "qwen2.5:7b")
    )

    # Output settings
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )

    def validate_required(self, for_agent: bool = True) -> list[str]:
        """Check for missing required configuration."""
        missing = []

        if not self.google_maps_api_key:
            missing.append("GOOGLE_MAPS_API_KEY")

        # Ollama runs locally and needs no token
        if for_agent and not self.use_ollama and not self.github_token:
            missing.append("GITHUB_TOKEN")

        return missing


# Global settings instance
settings = Settings()
