"""Lazy referential-integrity check over the whole store.

In permissive mode (the default) dangling references are accepted on write and only
surface here, as warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ai_schedule.workflow.graph import ValidationReport, validate_workflow

from .store import DomainStore


@dataclass(frozen=True, slots=True)
class ReferenceIssue:
    task_id: str
    attribute: str
    target: str

    @property
    def message(self) -> str:
        return f"Task {self.task_id!r} {self.attribute} references unknown id {self.target!r}"

    def to_json(self) -> dict[str, object]:
        return {
            "severity": "warning",
            "code": "dangling_reference",
            "taskId": self.task_id,
            "attribute": self.attribute,
            "target": self.target,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class IntegrityReport:
    task_issues: tuple[ReferenceIssue, ...] = field(default_factory=tuple)
    workflows: tuple[ValidationReport, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        """True when no workflow graph has errors. Task references only warn."""
        return all(r.ok for r in self.workflows)

    @property
    def issue_count(self) -> int:
        return len(self.task_issues) + sum(len(r.issues) for r in self.workflows)

    def to_json(self) -> dict[str, object]:
        return {
            "ok": self.ok,
            "taskIssues": [i.to_json() for i in self.task_issues],
            "workflows": [r.to_json() for r in self.workflows],
        }


def check_integrity(store: DomainStore) -> IntegrityReport:
    agent_ids = set(store.agents.ids())
    workflows = store.workflows.all()
    workflow_ids = {w.id for w in workflows}

    task_issues: list[ReferenceIssue] = []
    for task in store.tasks.all():
        if task.agent_id not in agent_ids:
            task_issues.append(ReferenceIssue(task.id, "agentId", task.agent_id))
        if task.workflow_id not in workflow_ids:
            task_issues.append(ReferenceIssue(task.id, "workflowId", task.workflow_id))

    return IntegrityReport(
        task_issues=tuple(task_issues),
        workflows=tuple(validate_workflow(w) for w in workflows),
    )
