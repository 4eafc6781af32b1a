"""Request payloads for the REST adapter.

Patch models only carry the fields a client actually sent (``exclude_unset``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from ai_schedule.domain import (
    DomainModel,
    ExecutionStatus,
    McpServerConfig,
    NotificationConfig,
    PerformanceConfig,
    TaskPriority,
    TaskStatus,
    WorkflowStep,
)


class PatchModel(DomainModel):
    def changes(self) -> dict[str, object]:
        # Shallow: nested models stay models so the store re-validates them as-is.
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskPatch(PatchModel):
    name: str | None = None
    description: str | None = None
    cron_expression: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    agent_id: str | None = None
    workflow_id: str | None = None
    last_run: datetime | None = None
    next_run: datetime | None = None
    execution_count: int | None = Field(default=None, ge=0)
    success_count: int | None = Field(default=None, ge=0)
    failure_count: int | None = Field(default=None, ge=0)


class TaskFiltersPatch(PatchModel):
    status: str | None = None
    priority: str | None = None
    search: str | None = None


class SelectRequest(DomainModel):
    id: str | None = None


class WorkflowCreate(DomainModel):
    id: str | None = None
    name: str
    description: str = ""
    steps: tuple[WorkflowStep, ...] = ()
    is_template: bool = False
    category: str = ""


class WorkflowPatch(PatchModel):
    name: str | None = None
    description: str | None = None
    steps: tuple[WorkflowStep, ...] | None = None
    is_template: bool | None = None
    category: str | None = None


class ExecutionStart(DomainModel):
    task_id: str
    agent_id: str | None = None
    metadata: dict[str, Any] | None = None


class ExecutionFinish(DomainModel):
    status: ExecutionStatus
    result: str | None = None
    error: str | None = None


class SystemConfigPatch(PatchModel):
    mcp_server: McpServerConfig | None = None
    notifications: NotificationConfig | None = None
    performance: PerformanceConfig | None = None
