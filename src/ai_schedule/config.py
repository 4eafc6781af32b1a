"""Configuration for the schedule dashboard state layer.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Pydantic-settings supports overriding the env file in tests via
`AppSettings(_env_file=path_to_env)`.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_schedule.logging import configure_logging


class StoreConfig(BaseSettings):
    """Configuration for the in-memory domain store."""

    strict_references: bool = Field(
        default=False,
        description=(
            "Reject tasks whose agentId/workflowId do not resolve and workflows with dangling "
            "nextSteps on add/update. When false, dangling references are only reported by "
            "the integrity check."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="AI_SCHEDULE_STORE_",
        env_file=".env",
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """Top-level settings shared by the CLI and the REST adapter.

    Environment variables:
    - LOG_LEVEL          (optional)
    - LOG_FORMAT         (optional, ``json`` or ``text``)
    - AI_SCHEDULE_DEBUG  (optional)
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="Log output format",
    )
    debug: bool = Field(
        default=False,
        validation_alias="AI_SCHEDULE_DEBUG",
        description="Enable debug logging for the ai_schedule package",
    )

    store: StoreConfig = Field(
        default_factory=StoreConfig,
        description="Domain store configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level, self.log_format)

        if self.debug:
            logging.getLogger("ai_schedule").setLevel(logging.DEBUG)
