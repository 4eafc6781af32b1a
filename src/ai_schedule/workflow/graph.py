"""Structural semantics of a workflow's step graph.

Nodes are steps, edges are the ids listed in each step's ``next_steps``. The graph is
only interpreted for rendering and linting here; nothing is executed.

Conventions:
- The first step in ``Workflow.steps`` is the entry point. This is a convention, not an
  invariant.
- A step without successors is terminal.
- ``action`` steps fan out to every listed successor.
- ``condition`` steps do not say which successor is which outcome. Outcomes can be
  labelled through ``config["onSuccess"]`` / ``config["onFailure"]``; unlabelled
  successors stay ambiguous.
- Cycles are allowed; a cycle that passes through no ``loop`` step is flagged.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from ai_schedule.domain.workflow import StepType, Workflow, WorkflowStep

Severity = Literal["error", "warning"]

SUCCESS_LABEL_KEY = "onSuccess"
FAILURE_LABEL_KEY = "onFailure"


@dataclass(frozen=True, slots=True)
class GraphIssue:
    severity: Severity
    code: str
    step_id: str
    message: str
    target: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "severity": self.severity,
            "code": self.code,
            "stepId": self.step_id,
            "message": self.message,
        }
        if self.target is not None:
            out["target"] = self.target
        return out


@dataclass(frozen=True, slots=True)
class ValidationReport:
    workflow_id: str
    issues: tuple[GraphIssue, ...] = field(default_factory=tuple)

    @property
    def errors(self) -> list[GraphIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[GraphIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_json(self) -> dict[str, object]:
        return {
            "workflowId": self.workflow_id,
            "ok": self.ok,
            "issues": [i.to_json() for i in self.issues],
        }


class StepGraph:
    """Read-only adjacency view over a workflow."""

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow
        self._steps: dict[str, WorkflowStep] = {s.id: s for s in workflow.steps}
        self._incoming: dict[str, list[str]] = {s.id: [] for s in workflow.steps}
        for step in workflow.steps:
            for target in step.next_steps:
                if target in self._incoming:
                    self._incoming[target].append(step.id)

    @property
    def entry(self) -> WorkflowStep | None:
        return self._workflow.steps[0] if self._workflow.steps else None

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._steps

    def __iter__(self) -> Iterator[WorkflowStep]:
        return iter(self._workflow.steps)

    def step(self, step_id: str) -> WorkflowStep:
        return self._steps[step_id]

    def successors(self, step_id: str) -> list[WorkflowStep]:
        """Resolvable successors, in ``next_steps`` order. Dangling ids are skipped."""
        return [self._steps[t] for t in self._steps[step_id].next_steps if t in self._steps]

    def fan_out(self, step_id: str) -> list[WorkflowStep]:
        return self.successors(step_id)

    def predecessors(self, step_id: str) -> list[WorkflowStep]:
        return [self._steps[s] for s in self._incoming.get(step_id, [])]

    def dangling_edges(self) -> list[tuple[str, str]]:
        return [
            (step.id, target)
            for step in self._workflow.steps
            for target in step.next_steps
            if target not in self._steps
        ]

    def terminal_steps(self) -> list[WorkflowStep]:
        return [s for s in self._workflow.steps if not s.next_steps]

    def reachable(self) -> list[WorkflowStep]:
        """Breadth-first order from the entry step, each step once."""
        entry = self.entry
        if entry is None:
            return []
        order: list[WorkflowStep] = []
        seen = {entry.id}
        queue = deque([entry.id])
        while queue:
            current = queue.popleft()
            order.append(self._steps[current])
            for nxt in self.successors(current):
                if nxt.id not in seen:
                    seen.add(nxt.id)
                    queue.append(nxt.id)
        return order

    def unreachable(self) -> list[WorkflowStep]:
        reached = {s.id for s in self.reachable()}
        return [s for s in self._workflow.steps if s.id not in reached]

    def cycles(self) -> list[list[str]]:
        """One representative cycle per strongly connected component with a cycle."""
        cycles: list[list[str]] = []
        for component in self._strongly_connected():
            if len(component) > 1:
                cycles.append(component)
            elif component[0] in self._steps[component[0]].next_steps:
                cycles.append(component)
        return cycles

    def _strongly_connected(self) -> list[list[str]]:
        # Tarjan's algorithm, iterative to stay clear of the recursion limit.
        index: dict[str, int] = {}
        low: dict[str, int] = {}
        on_stack: set[str] = set()
        stack: list[str] = []
        components: list[list[str]] = []
        counter = 0

        for root in self._steps:
            if root in index:
                continue
            work: list[tuple[str, Iterator[WorkflowStep]]] = []
            index[root] = low[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            work.append((root, iter(self.successors(root))))
            while work:
                node, it = work[-1]
                advanced = False
                for nxt in it:
                    if nxt.id not in index:
                        index[nxt.id] = low[nxt.id] = counter
                        counter += 1
                        stack.append(nxt.id)
                        on_stack.add(nxt.id)
                        work.append((nxt.id, iter(self.successors(nxt.id))))
                        advanced = True
                        break
                    if nxt.id in on_stack:
                        low[node] = min(low[node], index[nxt.id])
                if advanced:
                    continue
                work.pop()
                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])
                if low[node] == index[node]:
                    component: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    component.reverse()
                    components.append(component)
        return components


def _label_list(step: WorkflowStep, key: str) -> list[str]:
    raw = step.config.get(key)
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list | tuple):
        return [str(v) for v in raw]
    return []


def condition_branches(step: WorkflowStep) -> dict[str, list[str]]:
    """Split a condition step's successors by outcome label.

    Labels come from ``config["onSuccess"]`` / ``config["onFailure"]``. Successors with
    no label are returned under ``"unlabeled"``. Labels naming ids outside
    ``next_steps`` are ignored here and reported by :func:`validate_workflow`.
    """

    success = [t for t in _label_list(step, SUCCESS_LABEL_KEY) if t in step.next_steps]
    failure = [t for t in _label_list(step, FAILURE_LABEL_KEY) if t in step.next_steps]
    labelled = set(success) | set(failure)
    return {
        "success": success,
        "failure": failure,
        "unlabeled": [t for t in step.next_steps if t not in labelled],
    }


def validate_workflow(workflow: Workflow) -> ValidationReport:
    graph = StepGraph(workflow)
    issues: list[GraphIssue] = []

    for source, target in graph.dangling_edges():
        issues.append(
            GraphIssue(
                severity="error",
                code="dangling_reference",
                step_id=source,
                target=target,
                message=f"Step {source!r} transitions to unknown step {target!r}",
            )
        )

    for step in graph.unreachable():
        issues.append(
            GraphIssue(
                severity="warning",
                code="unreachable_step",
                step_id=step.id,
                message=f"Step {step.id!r} is not reachable from the entry step",
            )
        )

    for cycle in graph.cycles():
        if len(cycle) == 1:
            issues.append(
                GraphIssue(
                    severity="warning",
                    code="self_loop",
                    step_id=cycle[0],
                    target=cycle[0],
                    message=f"Step {cycle[0]!r} transitions to itself",
                )
            )
        if not any(graph.step(s).type == StepType.LOOP for s in cycle):
            issues.append(
                GraphIssue(
                    severity="warning",
                    code="cycle_without_loop",
                    step_id=cycle[0],
                    message=f"Cycle {' -> '.join(cycle)} passes through no loop step",
                )
            )

    for step in workflow.steps:
        if step.type != StepType.CONDITION:
            continue
        for key in (SUCCESS_LABEL_KEY, FAILURE_LABEL_KEY):
            for target in _label_list(step, key):
                if target not in step.next_steps:
                    issues.append(
                        GraphIssue(
                            severity="warning",
                            code="unknown_branch_target",
                            step_id=step.id,
                            target=target,
                            message=f"{key} of step {step.id!r} names {target!r}, "
                            "which is not one of its next steps",
                        )
                    )

    return ValidationReport(workflow_id=workflow.id, issues=tuple(issues))


def duplicate_workflow(
    workflow: Workflow, *, new_id: str, now: datetime, name: str | None = None
) -> Workflow:
    """Deep copy a workflow under a new id. Step ids are kept; they are workflow-scoped."""

    return workflow.model_copy(
        update={
            "id": new_id,
            "name": name if name is not None else f"{workflow.name} (copy)",
            "is_template": False,
            "created_at": now,
            "updated_at": now,
        },
        deep=True,
    )
