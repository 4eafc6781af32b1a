"""Workflow entity and its step nodes.

The order of ``Workflow.steps`` carries no execution meaning; transitions are given by
each step's ``next_steps``. Graph semantics live in :mod:`ai_schedule.workflow.graph`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from ai_schedule.domain.base import DomainModel


class StepType(str, Enum):
    ACTION = "action"
    CONDITION = "condition"
    LOOP = "loop"


class StepPosition(DomainModel):
    """Editor layout coordinate. Cosmetic only."""

    x: float = 0.0
    y: float = 0.0


class WorkflowStep(DomainModel):
    id: str
    name: str
    type: StepType = StepType.ACTION
    # Interpreted by an external executor according to `type`.
    config: dict[str, Any] = Field(default_factory=dict)
    next_steps: tuple[str, ...] = ()
    position: StepPosition = Field(default_factory=StepPosition)

    @model_validator(mode="after")
    def _unique_next_steps(self) -> WorkflowStep:
        if len(set(self.next_steps)) != len(self.next_steps):
            raise ValueError(f"step {self.id!r} lists a successor more than once")
        return self


class Workflow(DomainModel):
    id: str
    name: str
    description: str = ""
    steps: tuple[WorkflowStep, ...] = ()
    is_template: bool = False
    category: str = ""
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _unique_step_ids(self) -> Workflow:
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise ValueError(f"duplicate step id {step.id!r} in workflow {self.id!r}")
            seen.add(step.id)
        return self

    def step(self, step_id: str) -> WorkflowStep | None:
        for s in self.steps:
            if s.id == step_id:
                return s
        return None
