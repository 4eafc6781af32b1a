#!/usr/bin/env python3
"""Programmatic store usage example.

This demonstrates using the state layer directly:

* load settings from `.env`
* seed a store with the dashboard fixtures
* create a task, run it once and print the derived statistics
* lint the workflows for graph problems
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from ai_schedule.config import AppSettings
from ai_schedule.domain import ExecutionStatus, TaskDraft
from ai_schedule.domain.lifecycle import start_execution
from ai_schedule.state import DomainStore, check_integrity, seed_if_empty
from ai_schedule.state import views


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive the schedule store (programmatic example).")
    parser.add_argument("--name", default="Nightly docs", help="Name of the task to create")
    parser.add_argument(
        "--fail",
        action="store_true",
        help="Record the example run as failed instead of completed",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = AppSettings()
    settings.setup_logging()

    store = DomainStore(settings.store)
    seed_if_empty(store)

    task = store.create_task(
        TaskDraft(
            name=args.name,
            description="Regenerate the API reference",
            agent_id="agent-4",
            workflow_id="workflow-1",
        )
    )
    log = store.execution_logs.add(start_execution(task, at=store.now(), log_id=store.new_id()))

    status = ExecutionStatus.FAILED if args.fail else ExecutionStatus.COMPLETED
    store.execution_logs.finish(log.id, status, result="example run")
    counter = "failure_count" if args.fail else "success_count"
    store.tasks.update(
        task.id,
        execution_count=task.execution_count + 1,
        **{counter: getattr(task, counter) + 1},
        last_run=store.now(),
    )

    print("Tasks:", json.dumps(store.task_stats().to_json()))
    print(
        "Executions:",
        json.dumps(views.execution_stats(store.execution_logs.all()).to_json()),
    )

    report = check_integrity(store)
    print(f"Integrity ok={report.ok} issues={report.issue_count}")
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
