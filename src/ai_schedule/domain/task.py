"""Task entity and the creation-form draft that produces it."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from ai_schedule.domain.base import DomainModel

COUNTER_FIELDS: tuple[str, ...] = ("execution_count", "success_count", "failure_count")


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    PAUSED = "paused"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Task(DomainModel):
    """A schedulable unit of work.

    ``cron_expression`` is stored as given; nothing in this package evaluates it.
    ``agent_id`` and ``workflow_id`` are plain references and may dangle.
    """

    id: str
    name: str
    description: str
    cron_expression: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    agent_id: str
    workflow_id: str
    last_run: datetime | None = None
    next_run: datetime | None = None
    created_at: datetime
    updated_at: datetime
    execution_count: int = Field(default=0, ge=0)
    success_count: int = Field(default=0, ge=0)
    failure_count: int = Field(default=0, ge=0)


class TaskDraft(DomainModel):
    """Payload of the task creation form.

    Unlike :class:`Task`, every text field must be non-blank.
    """

    name: str
    description: str
    cron_expression: str = "0 9 * * *"
    priority: TaskPriority = TaskPriority.MEDIUM
    agent_id: str
    workflow_id: str

    @field_validator("name", "description", "cron_expression", "agent_id", "workflow_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    def to_task(self, *, id: str, now: datetime) -> Task:  # noqa: A002 (entity id)
        return Task(
            id=id,
            name=self.name,
            description=self.description,
            cron_expression=self.cron_expression,
            status=TaskStatus.PENDING,
            priority=self.priority,
            agent_id=self.agent_id,
            workflow_id=self.workflow_id,
            created_at=now,
            updated_at=now,
        )


def task_success_rate(task: Task) -> float:
    if task.execution_count <= 0:
        return 0.0
    return round(task.success_count / task.execution_count * 100, 1)
