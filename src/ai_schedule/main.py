"""CLI entrypoint for the AI schedule state layer.

Offline helpers only: fixture inspection and workflow linting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ai_schedule import __version__
from ai_schedule.config import AppSettings
from ai_schedule.domain import Workflow, utc_now
from ai_schedule.state import DomainStore, build_seed, seed_if_empty
from ai_schedule.state import views
from ai_schedule.workflow.graph import ValidationReport, validate_workflow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-schedule",
        description="AI schedule dashboard state tools",
    )
    parser.add_argument("--version", action="version", version=f"ai-schedule {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("stats", help="Print task and execution statistics for the fixtures")

    lint = subparsers.add_parser(
        "lint-workflows",
        help="Validate the step graphs of workflows stored in a JSON file",
    )
    lint.add_argument("path", type=Path, help="JSON file holding a list of workflows")

    subparsers.add_parser("dump-seed", help="Print the dashboard fixture data as JSON")

    return parser


def load_workflows(path: Path) -> list[Workflow]:
    """Load workflows from a JSON list (a single object is accepted too).

    Missing ``createdAt``/``updatedAt`` default to the current time.
    """

    raw = json.loads(path.read_text(encoding="utf-8"))
    items = raw if isinstance(raw, list) else [raw]
    now = utc_now()
    return [Workflow.model_validate({"createdAt": now, "updatedAt": now, **item}) for item in items]


def _print_report(report: ValidationReport) -> None:
    status = "ok" if report.ok else "FAILED"
    print(f"{report.workflow_id}: {status}")
    for issue in report.issues:
        print(f"  [{issue.severity}] {issue.code} {issue.step_id}: {issue.message}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = AppSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    settings.setup_logging()

    try:
        if args.command == "stats":
            store = DomainStore(settings.store)
            seed_if_empty(store)
            payload = {
                "tasks": store.task_stats().to_json(),
                "executions": views.execution_stats(store.execution_logs.all()).to_json(),
            }
            print(json.dumps(payload, indent=2))
            return 0

        if args.command == "lint-workflows":
            workflows = load_workflows(args.path)
            reports = [validate_workflow(w) for w in workflows]
            for report in reports:
                _print_report(report)
            failed = [r.workflow_id for r in reports if not r.ok]
            logger.info(
                "Workflows linted",
                extra={"path": str(args.path), "count": len(reports), "failed": failed},
            )
            return 1 if failed else 0

        if args.command == "dump-seed":
            print(json.dumps(build_seed(utc_now()).to_json(), indent=2))
            return 0

        parser.error(f"Unknown command: {args.command}")
        return 2
    except Exception:
        logger.exception("Command failed", extra={"command": args.command})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
