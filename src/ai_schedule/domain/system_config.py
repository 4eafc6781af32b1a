from __future__ import annotations

from pydantic import Field

from ai_schedule.domain.base import DomainModel


class McpServerConfig(DomainModel):
    url: str = "http://localhost:3001"
    api_key: str = ""
    # Milliseconds.
    timeout: int = 30000


class NotificationConfig(DomainModel):
    email: bool = False
    slack: bool = False
    webhook: str = ""


class PerformanceConfig(DomainModel):
    max_concurrent_tasks: int = 5
    log_retention_days: int = 30


class SystemConfig(DomainModel):
    """Singleton dashboard configuration.

    Partial updates replace whole top-level sections (shallow merge).
    """

    mcp_server: McpServerConfig = Field(default_factory=McpServerConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    def merged(self, **partial: object) -> SystemConfig:
        unknown = set(partial) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown system config sections: {sorted(unknown)}")
        return SystemConfig.model_validate({**self.model_dump(), **partial})
