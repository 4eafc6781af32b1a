"""Configuration for the REST adapter."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the REST API.

    The store itself is configured through :class:`ai_schedule.config.StoreConfig`.
    """

    seed_on_start: bool = Field(
        default=True,
        validation_alias="AI_SCHEDULE_SEED_ON_START",
        description="Load the dashboard fixtures into empty collections at startup.",
    )

    metrics_refresh_seconds: float = Field(
        default=2.0,
        validation_alias="AI_SCHEDULE_METRICS_REFRESH_SECONDS",
        description="Interval for the live metrics refresh. 0 disables it.",
        ge=0,
    )

    # Dev-friendly CORS (Vite). Override via AI_SCHEDULE_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="AI_SCHEDULE_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
