from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from ai_schedule.domain.base import DomainModel


class ExecutionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES: frozenset[ExecutionStatus] = frozenset(
    {ExecutionStatus.COMPLETED, ExecutionStatus.FAILED, ExecutionStatus.CANCELLED}
)


class ExecutionLog(DomainModel):
    """Record of one task run.

    ``task_name`` is a snapshot taken when the run started and is never synced with the
    task. Once terminal, a log is never changed again (see
    :mod:`ai_schedule.domain.lifecycle`).
    """

    id: str
    task_id: str
    task_name: str
    status: ExecutionStatus = ExecutionStatus.RUNNING
    start_time: datetime
    end_time: datetime | None = None
    # Milliseconds.
    duration: int | None = Field(default=None, ge=0)
    result: str | None = None
    error: str | None = None
    agent_id: str | None = None
    metadata: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _end_time_matches_status(self) -> ExecutionLog:
        if self.status == ExecutionStatus.RUNNING:
            if self.end_time is not None:
                raise ValueError("a running execution has no end time")
            return self
        if self.end_time is None:
            raise ValueError(f"a {self.status.value} execution requires an end time")
        if self.end_time < self.start_time:
            raise ValueError("end time precedes start time")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
