"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-4"
    narrator_timeout_seconds: float = 12.0
    meals_data_path: str | None = None
    google_health_client_id: str | None = None
    google_health_client_secret: str | None = None
    server_name: str = "Health Assistant MCP Server"
    server_version: str = "1.0.0"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def has_value(raw: str | None) -> bool:
    """Return whether an optional credential is set to something usable."""
    return raw is not None and raw.strip() != ""
