"""Entity builders shared by the unit tests."""

from __future__ import annotations

from datetime import UTC, datetime

from ai_schedule.domain import Agent, Task, Workflow, WorkflowStep

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


def make_task(task_id: str = "t-1", **overrides: object) -> Task:
    fields: dict[str, object] = {
        "id": task_id,
        "name": f"Task {task_id}",
        "description": "Nightly job",
        "cron_expression": "0 9 * * *",
        "agent_id": "agent-1",
        "workflow_id": "workflow-1",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Task.model_validate(fields)


def make_agent(agent_id: str = "agent-1", **overrides: object) -> Agent:
    fields: dict[str, object] = {"id": agent_id, "name": f"Agent {agent_id}", "last_heartbeat": NOW}
    fields.update(overrides)
    return Agent.model_validate(fields)


def make_step(step_id: str, *next_steps: str, **overrides: object) -> WorkflowStep:
    fields: dict[str, object] = {"id": step_id, "name": step_id, "next_steps": next_steps}
    fields.update(overrides)
    return WorkflowStep.model_validate(fields)


def make_workflow(
    workflow_id: str = "workflow-1", steps: tuple[WorkflowStep, ...] = (), **overrides: object
) -> Workflow:
    fields: dict[str, object] = {
        "id": workflow_id,
        "name": f"Workflow {workflow_id}",
        "steps": steps,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Workflow.model_validate(fields)
