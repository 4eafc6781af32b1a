"""Explicit execution log state machine.

A log starts ``running`` and moves exactly once to a terminal state. Illegal
transitions fail loudly.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from ai_schedule.domain.execution_log import ExecutionLog, ExecutionStatus
from ai_schedule.domain.task import Task

ALLOWED_TRANSITIONS: dict[ExecutionStatus, set[ExecutionStatus]] = {
    ExecutionStatus.RUNNING: {
        ExecutionStatus.COMPLETED,
        ExecutionStatus.FAILED,
        ExecutionStatus.CANCELLED,
    },
    ExecutionStatus.COMPLETED: set(),
    ExecutionStatus.FAILED: set(),
    ExecutionStatus.CANCELLED: set(),
}


class IllegalTransitionError(ValueError):
    pass


def start_execution(
    task: Task,
    *,
    at: datetime,
    agent_id: str | None = None,
    metadata: dict[str, Any] | None = None,
    log_id: str | None = None,
) -> ExecutionLog:
    return ExecutionLog(
        id=log_id or uuid.uuid4().hex,
        task_id=task.id,
        task_name=task.name,
        status=ExecutionStatus.RUNNING,
        start_time=at,
        agent_id=agent_id if agent_id is not None else task.agent_id,
        metadata=metadata,
    )


def transition(
    log: ExecutionLog,
    to: ExecutionStatus,
    *,
    at: datetime,
    result: str | None = None,
    error: str | None = None,
) -> ExecutionLog:
    allowed = ALLOWED_TRANSITIONS.get(log.status, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {log.status.value} -> {to.value}")

    duration_ms = max(0, int((at - log.start_time).total_seconds() * 1000))
    # Re-validate so an end time before the start is rejected.
    return ExecutionLog.model_validate(
        {
            **log.model_dump(),
            "status": to,
            "end_time": at,
            "duration": duration_ms,
            "result": result if result is not None else log.result,
            "error": error if error is not None else log.error,
        }
    )
