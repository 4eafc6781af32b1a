"""Workflow step graph: traversal, branch labels, validation and duplication."""

from ai_schedule.workflow.graph import (
    GraphIssue,
    StepGraph,
    ValidationReport,
    condition_branches,
    duplicate_workflow,
    validate_workflow,
)

__all__ = [
    "GraphIssue",
    "StepGraph",
    "ValidationReport",
    "condition_branches",
    "duplicate_workflow",
    "validate_workflow",
]
