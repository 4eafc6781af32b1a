"""Unit tests for derived views (filtering and statistics)."""

from __future__ import annotations

from datetime import timedelta

from factories import NOW, make_task, make_workflow

from ai_schedule.domain import ExecutionLog, ExecutionStatus, TaskFilters, TaskPriority, TaskStatus
from ai_schedule.state import views


def _log(
    log_id: str, status: ExecutionStatus, *, hours_ago: float, name: str = "Build"
) -> ExecutionLog:
    start = NOW - timedelta(hours=hours_ago)
    end = None if status == ExecutionStatus.RUNNING else start + timedelta(minutes=1)
    return ExecutionLog(
        id=log_id, task_id="t-1", task_name=name, status=status, start_time=start, end_time=end
    )


def test_filter_tasks_by_status_priority_and_search() -> None:
    tasks = [
        make_task("t-1", status=TaskStatus.RUNNING, priority=TaskPriority.HIGH, name="Lint"),
        make_task("t-2", status=TaskStatus.RUNNING, priority=TaskPriority.LOW, name="Deploy"),
        make_task("t-3", status=TaskStatus.FAILED, description="Deploy to staging"),
    ]

    running = views.filter_tasks(tasks, TaskFilters(status="running"))
    assert [t.id for t in running] == ["t-1", "t-2"]

    high = views.filter_tasks(tasks, TaskFilters(status="running", priority="high"))
    assert [t.id for t in high] == ["t-1"]

    # Search is case-insensitive over name and description.
    deploy = views.filter_tasks(tasks, TaskFilters(search="DEPLOY"))
    assert [t.id for t in deploy] == ["t-2", "t-3"]


def test_default_filters_return_everything_in_order() -> None:
    tasks = [make_task("t-3"), make_task("t-1", status=TaskStatus.PAUSED), make_task("t-2")]

    assert views.filter_tasks(tasks, TaskFilters()) == tasks


def test_filter_tasks_treats_unknown_values_as_all() -> None:
    tasks = [make_task("t-1"), make_task("t-2", status=TaskStatus.PAUSED)]

    result = views.filter_tasks(tasks, TaskFilters(status="bogus", priority="nope"))

    assert [t.id for t in result] == ["t-1", "t-2"]


def test_task_stats_counts_by_status() -> None:
    tasks = [
        make_task("t-1", status=TaskStatus.RUNNING),
        make_task("t-2", status=TaskStatus.SUCCESS),
        make_task("t-3", status=TaskStatus.FAILED),
        make_task("t-4", status=TaskStatus.PENDING),
        make_task("t-5", status=TaskStatus.PAUSED),
    ]

    stats = views.task_stats(tasks)

    assert stats.total == 5
    assert (stats.running, stats.success, stats.failed, stats.pending) == (1, 1, 1, 1)
    # Paused tasks only show up in the total.
    assert stats.running + stats.success + stats.failed + stats.pending <= stats.total
    assert views.task_stats([]).total == 0


def test_filter_execution_logs_by_status_search_and_range() -> None:
    logs = [
        _log("e-1", ExecutionStatus.RUNNING, hours_ago=1, name="Nightly build"),
        _log("e-2", ExecutionStatus.COMPLETED, hours_ago=3 * 24),
        _log("e-3", ExecutionStatus.FAILED, hours_ago=20 * 24),
        _log("e-4", ExecutionStatus.COMPLETED, hours_ago=60 * 24),
    ]

    assert [log.id for log in views.filter_execution_logs(logs, now=NOW)] == [
        "e-1",
        "e-2",
        "e-3",
        "e-4",
    ]
    completed = views.filter_execution_logs(logs, now=NOW, status="completed")
    assert [log.id for log in completed] == ["e-2", "e-4"]
    assert [log.id for log in views.filter_execution_logs(logs, now=NOW, search="nightly")] == [
        "e-1"
    ]
    assert [log.id for log in views.filter_execution_logs(logs, now=NOW, time_range="today")] == [
        "e-1"
    ]
    assert [log.id for log in views.filter_execution_logs(logs, now=NOW, time_range="week")] == [
        "e-1",
        "e-2",
    ]
    month = views.filter_execution_logs(logs, now=NOW, time_range="month")
    assert [log.id for log in month] == ["e-1", "e-2", "e-3"]


def test_execution_stats_success_rate() -> None:
    logs = [
        _log("e-1", ExecutionStatus.COMPLETED, hours_ago=1),
        _log("e-2", ExecutionStatus.COMPLETED, hours_ago=2),
        _log("e-3", ExecutionStatus.FAILED, hours_ago=3),
    ]

    stats = views.execution_stats(logs)

    assert (stats.total, stats.completed, stats.failed, stats.running) == (3, 2, 1, 0)
    assert stats.success_rate == 67
    assert stats.to_json()["successRate"] == 67
    assert views.execution_stats([]).success_rate == 0


def test_filter_workflows_and_categories() -> None:
    workflows = [
        make_workflow("w-1", name="Lint pipeline", category="code-quality"),
        make_workflow("w-2", name="Tests", category="testing", is_template=True),
        make_workflow("w-3", name="Deploy", description="Lint then ship", category="deployment"),
    ]

    assert [w.id for w in views.filter_workflows(workflows, search="lint")] == ["w-1", "w-3"]
    assert [w.id for w in views.filter_workflows(workflows, category="testing")] == ["w-2"]
    assert [w.id for w in views.filter_workflows(workflows, templates_only=True)] == ["w-2"]
    assert views.workflow_categories(workflows) == ["code-quality", "deployment", "testing"]


def test_seeded_store_views(seeded_store) -> None:
    stats = seeded_store.task_stats()
    assert (stats.total, stats.running, stats.success, stats.failed) == (3, 1, 1, 1)

    seeded_store.set_task_filters(status="running")
    assert [t.id for t in seeded_store.filtered_tasks()] == ["task-1"]

    seeded_store.set_task_filters(status="all", priority="urgent")
    assert [t.id for t in seeded_store.filtered_tasks()] == ["task-3"]

    exec_stats = views.execution_stats(seeded_store.execution_logs.all())
    assert (exec_stats.total, exec_stats.completed, exec_stats.running) == (5, 2, 1)
    assert exec_stats.success_rate == 40


def test_filter_execution_logs_accepts_enum_status() -> None:
    logs = [
        _log("e-1", ExecutionStatus.FAILED, hours_ago=1),
        _log("e-2", ExecutionStatus.RUNNING, hours_ago=2),
    ]

    failed = views.filter_execution_logs(logs, now=NOW, status=ExecutionStatus.FAILED)

    assert [log.id for log in failed] == ["e-1"]


def test_filter_values_are_case_sensitive() -> None:
    tasks = [make_task("t-1", status=TaskStatus.RUNNING), make_task("t-2")]
    logs = [
        _log("e-1", ExecutionStatus.FAILED, hours_ago=1),
        _log("e-2", ExecutionStatus.RUNNING, hours_ago=2),
    ]

    # Not an exact status value, so it reads as "all".
    assert [t.id for t in views.filter_tasks(tasks, TaskFilters(status="RUNNING"))] == [
        "t-1",
        "t-2",
    ]
    assert [log.id for log in views.filter_execution_logs(logs, now=NOW, status="Failed")] == [
        "e-1",
        "e-2",
    ]
