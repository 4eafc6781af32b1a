"""Derived views over store collections.

Every function here is pure and recomputes from its inputs on each call.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from enum import Enum
from typing import Literal

from ai_schedule.domain import (
    ALL,
    DomainModel,
    ExecutionLog,
    ExecutionStatus,
    Task,
    TaskFilters,
    TaskPriority,
    TaskStatus,
    Workflow,
)

logger = logging.getLogger(__name__)

TimeRange = Literal["all", "today", "week", "month"]

_STATUS_VALUES = {s.value for s in TaskStatus}
_PRIORITY_VALUES = {p.value for p in TaskPriority}
_EXECUTION_STATUS_VALUES = {s.value for s in ExecutionStatus}


class TaskStats(DomainModel):
    # Paused tasks count towards total only.
    total: int
    running: int
    success: int
    failed: int
    pending: int


class ExecutionStats(DomainModel):
    total: int
    running: int
    completed: int
    failed: int
    success_rate: int


def _normalise(value: str | Enum, allowed: set[str], kind: str) -> str:
    # Exact match only; "RUNNING" is not a status and reads as "all".
    value = value.value if isinstance(value, Enum) else str(value)
    if value == ALL or value in allowed:
        return value
    logger.debug("Ignoring invalid filter value", extra={"filter": kind, "value": value})
    return ALL


def _matches_search(search: str, *fields: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in f.lower() for f in fields)


def filter_tasks(tasks: Sequence[Task], filters: TaskFilters) -> list[Task]:
    status = _normalise(filters.status, _STATUS_VALUES, "status")
    priority = _normalise(filters.priority, _PRIORITY_VALUES, "priority")
    return [
        t
        for t in tasks
        if (status == ALL or t.status.value == status)
        and (priority == ALL or t.priority.value == priority)
        and _matches_search(filters.search, t.name, t.description)
    ]


def task_stats(tasks: Sequence[Task]) -> TaskStats:
    counts = {s: 0 for s in TaskStatus}
    for t in tasks:
        counts[t.status] += 1
    return TaskStats(
        total=len(tasks),
        running=counts[TaskStatus.RUNNING],
        success=counts[TaskStatus.SUCCESS],
        failed=counts[TaskStatus.FAILED],
        pending=counts[TaskStatus.PENDING],
    )


def _range_start(time_range: str, now: datetime) -> datetime | None:
    if time_range == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if time_range == "week":
        return now - timedelta(days=7)
    if time_range == "month":
        return now - timedelta(days=30)
    return None


def filter_execution_logs(
    logs: Sequence[ExecutionLog],
    *,
    now: datetime,
    status: ExecutionStatus | str = ALL,
    search: str = "",
    time_range: TimeRange = "all",
) -> list[ExecutionLog]:
    wanted = _normalise(status, _EXECUTION_STATUS_VALUES, "status")
    since = _range_start(time_range, now)
    return [
        log
        for log in logs
        if (wanted == ALL or log.status.value == wanted)
        and _matches_search(search, log.task_name)
        and (since is None or log.start_time >= since)
    ]


def execution_stats(logs: Sequence[ExecutionLog]) -> ExecutionStats:
    total = len(logs)
    running = sum(1 for log in logs if log.status == ExecutionStatus.RUNNING)
    completed = sum(1 for log in logs if log.status == ExecutionStatus.COMPLETED)
    failed = sum(1 for log in logs if log.status == ExecutionStatus.FAILED)
    rate = round(completed / total * 100) if total else 0
    return ExecutionStats(
        total=total, running=running, completed=completed, failed=failed, success_rate=rate
    )


def filter_workflows(
    workflows: Sequence[Workflow],
    *,
    search: str = "",
    category: str = ALL,
    templates_only: bool = False,
) -> list[Workflow]:
    return [
        w
        for w in workflows
        if _matches_search(search, w.name, w.description)
        and (category == ALL or w.category == category)
        and (not templates_only or w.is_template)
    ]


def workflow_categories(workflows: Sequence[Workflow]) -> list[str]:
    return sorted({w.category for w in workflows if w.category})
