"""Dashboard fixture data.

Timestamps are relative to ``now`` so the fixtures always look recent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ai_schedule.domain import (
    Agent,
    AgentStatus,
    ExecutionLog,
    ExecutionStatus,
    StepPosition,
    StepType,
    Task,
    TaskPriority,
    TaskStatus,
    Workflow,
    WorkflowStep,
)

from .store import DomainStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeedData:
    tasks: list[Task]
    agents: list[Agent]
    workflows: list[Workflow]
    execution_logs: list[ExecutionLog]

    def to_json(self) -> dict[str, object]:
        return {
            "tasks": [t.to_json() for t in self.tasks],
            "agents": [a.to_json() for a in self.agents],
            "workflows": [w.to_json() for w in self.workflows],
            "executionLogs": [log.to_json() for log in self.execution_logs],
        }


def _step(
    step_id: str,
    name: str,
    config: dict[str, object],
    next_steps: list[str],
    x: float,
    y: float = 100,
    step_type: StepType = StepType.ACTION,
) -> WorkflowStep:
    return WorkflowStep(
        id=step_id,
        name=name,
        type=step_type,
        config=config,
        next_steps=tuple(next_steps),
        position=StepPosition(x=x, y=y),
    )


def build_workflows(now: datetime) -> list[Workflow]:
    day = timedelta(days=1)
    return [
        Workflow(
            id="workflow-1",
            name="Code quality pipeline",
            description="Checkout, lint, type-check and report on the main branch",
            steps=(
                _step("step-1", "Checkout", {"repository": "main"}, ["step-2"], 100),
                _step("step-2", "ESLint", {"rules": "strict"}, ["step-3"], 300),
                _step("step-3", "TypeScript check", {"strict": True}, ["step-4"], 500),
                _step("step-4", "Report", {"format": "html"}, [], 700),
            ),
            is_template=False,
            category="code-quality",
            created_at=now - 7 * day,
            updated_at=now - 2 * day,
        ),
        Workflow(
            id="workflow-2",
            name="Automated test pipeline",
            description="Unit, integration and end-to-end tests",
            steps=(
                _step("step-1", "Prepare env", {"environment": "test"}, ["step-2"], 100),
                _step("step-2", "Unit tests", {"coverage": True}, ["step-3"], 300),
                _step("step-3", "Integration tests", {"database": "mock"}, ["step-4"], 500),
                _step("step-4", "Report", {"format": "junit"}, [], 700),
            ),
            is_template=True,
            category="testing",
            created_at=now - 5 * day,
            updated_at=now - day,
        ),
        Workflow(
            id="workflow-3",
            name="Deployment pipeline",
            description="Build, gate on tests, deploy to staging and production",
            steps=(
                _step("step-1", "Build", {"target": "production"}, ["step-2"], 100),
                _step(
                    "step-2",
                    "Run tests",
                    {"required": True, "onSuccess": ["step-3"], "onFailure": ["step-5"]},
                    ["step-3", "step-5"],
                    300,
                    step_type=StepType.CONDITION,
                ),
                _step("step-3", "Deploy staging", {"environment": "staging"}, ["step-4"], 500, 50),
                _step("step-4", "Deploy production", {"environment": "production"}, [], 700, 50),
                _step("step-5", "Notify failure", {"channel": "slack"}, [], 500, 150),
            ),
            is_template=False,
            category="deployment",
            created_at=now - 3 * day,
            updated_at=now - timedelta(hours=6),
        ),
    ]


def build_agents(now: datetime) -> list[Agent]:
    return [
        Agent(
            id="agent-1",
            name="Code Review Agent",
            description="Static analysis and code review",
            capabilities=("code-analysis", "eslint", "typescript", "security-scan"),
            status=AgentStatus.ONLINE,
            version="1.2.0",
            last_heartbeat=now - timedelta(seconds=30),
        ),
        Agent(
            id="agent-2",
            name="Test Runner Agent",
            description="Runs test suites",
            capabilities=("unit-tests", "integration-tests", "e2e-tests", "performance-tests"),
            status=AgentStatus.ONLINE,
            version="2.0.1",
            last_heartbeat=now - timedelta(seconds=45),
        ),
        Agent(
            id="agent-3",
            name="Deploy Agent",
            description="Builds and deploys applications",
            capabilities=("build", "deploy", "rollback", "health-check"),
            status=AgentStatus.OFFLINE,
            version="1.0.4",
            last_heartbeat=now - timedelta(hours=3),
        ),
        Agent(
            id="agent-4",
            name="Documentation Agent",
            description="Keeps documentation in sync with the code",
            capabilities=("api-docs", "readme", "changelog", "code-comments"),
            status=AgentStatus.ONLINE,
            version="0.9.0",
            last_heartbeat=now - timedelta(minutes=1),
        ),
    ]


def build_tasks(now: datetime) -> list[Task]:
    hour = timedelta(hours=1)
    day = timedelta(days=1)
    return [
        Task(
            id="task-1",
            name="Code quality check",
            description="Daily code quality check with ESLint and TypeScript",
            cron_expression="0 9 * * *",
            status=TaskStatus.RUNNING,
            priority=TaskPriority.HIGH,
            agent_id="agent-1",
            workflow_id="workflow-1",
            last_run=now - 2 * hour,
            next_run=now + 22 * hour,
            created_at=now - 7 * day,
            updated_at=now,
            execution_count=15,
            success_count=14,
            failure_count=1,
        ),
        Task(
            id="task-2",
            name="Automated tests",
            description="Run unit and integration tests to keep quality up",
            cron_expression="0 */2 * * *",
            status=TaskStatus.SUCCESS,
            priority=TaskPriority.MEDIUM,
            agent_id="agent-2",
            workflow_id="workflow-2",
            last_run=now - timedelta(minutes=30),
            next_run=now + timedelta(minutes=90),
            created_at=now - 5 * day,
            updated_at=now,
            execution_count=36,
            success_count=35,
            failure_count=1,
        ),
        Task(
            id="task-3",
            name="Deploy to staging",
            description="Deploy the latest build to the staging environment",
            cron_expression="0 18 * * 1-5",
            status=TaskStatus.FAILED,
            priority=TaskPriority.URGENT,
            agent_id="agent-3",
            workflow_id="workflow-3",
            last_run=now - 4 * hour,
            next_run=now + 14 * hour,
            created_at=now - 3 * day,
            updated_at=now,
            execution_count=8,
            success_count=6,
            failure_count=2,
        ),
    ]


def build_execution_logs(now: datetime) -> list[ExecutionLog]:
    hour = timedelta(hours=1)
    minute = timedelta(minutes=1)
    return [
        ExecutionLog(
            id="exec-1",
            task_id="task-1",
            task_name="Code quality check",
            status=ExecutionStatus.COMPLETED,
            start_time=now - 2 * hour,
            end_time=now - 2 * hour + 5 * minute,
            duration=5 * 60 * 1000,
            result="Check finished: 3 warnings, 0 errors",
            agent_id="agent-1",
            metadata={"lintWarnings": 3, "lintErrors": 0, "coverage": 85.2, "filesChecked": 42},
        ),
        ExecutionLog(
            id="exec-2",
            task_id="task-2",
            task_name="Automated tests",
            status=ExecutionStatus.RUNNING,
            start_time=now - 30 * minute,
            agent_id="agent-2",
            metadata={
                "currentStep": "Integration tests",
                "progress": 65,
                "testsRun": 128,
                "testsPassed": 125,
            },
        ),
        ExecutionLog(
            id="exec-3",
            task_id="task-3",
            task_name="Deploy to production",
            status=ExecutionStatus.FAILED,
            start_time=now - 4 * hour,
            end_time=now - 4 * hour + 10 * minute,
            duration=10 * 60 * 1000,
            error="Deployment failed: database connection timed out",
            agent_id="agent-3",
            metadata={
                "deploymentStage": "database-migration",
                "errorCode": "DB_TIMEOUT",
                "retryCount": 3,
            },
        ),
        ExecutionLog(
            id="exec-4",
            task_id="task-4",
            task_name="Generate documentation",
            status=ExecutionStatus.COMPLETED,
            start_time=now - 6 * hour,
            end_time=now - 6 * hour + 3 * minute,
            duration=3 * 60 * 1000,
            result="Documentation generated: 15 pages",
            agent_id="agent-1",
            metadata={"pagesGenerated": 15, "apiEndpoints": 42, "codeExamples": 28},
        ),
        ExecutionLog(
            id="exec-5",
            task_id="task-1",
            task_name="Code quality check",
            status=ExecutionStatus.CANCELLED,
            start_time=now - 8 * hour,
            end_time=now - 8 * hour + 2 * minute,
            duration=2 * 60 * 1000,
            agent_id="agent-1",
            metadata={"reason": "user_cancelled", "progress": 25},
        ),
    ]


def build_seed(now: datetime) -> SeedData:
    return SeedData(
        tasks=build_tasks(now),
        agents=build_agents(now),
        workflows=build_workflows(now),
        execution_logs=build_execution_logs(now),
    )


def seed_if_empty(store: DomainStore) -> list[str]:
    """Load fixtures into every empty collection. Returns the names that were seeded."""

    data = build_seed(store.now())
    seeded: list[str] = []
    for collection, items in (
        (store.agents, data.agents),
        (store.workflows, data.workflows),
        (store.tasks, data.tasks),
        (store.execution_logs, data.execution_logs),
    ):
        if len(collection) == 0:
            collection.set_all(items)
            seeded.append(collection.name)

    if seeded:
        logger.info("Seeded fixture data", extra={"collections": seeded})
    return seeded
