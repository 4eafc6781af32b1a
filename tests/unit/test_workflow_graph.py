"""Unit tests for workflow step graph semantics."""

from __future__ import annotations

from datetime import timedelta

from factories import NOW, make_step, make_workflow

from ai_schedule.domain import StepType
from ai_schedule.workflow import (
    StepGraph,
    condition_branches,
    duplicate_workflow,
    validate_workflow,
)


def _codes(report) -> list[tuple[str, str]]:
    return [(i.code, i.step_id) for i in report.issues]


def test_linear_workflow_is_clean() -> None:
    workflow = make_workflow(steps=(make_step("a", "b"), make_step("b", "c"), make_step("c")))
    graph = StepGraph(workflow)

    assert graph.entry.id == "a"
    assert [s.id for s in graph.reachable()] == ["a", "b", "c"]
    assert [s.id for s in graph.terminal_steps()] == ["c"]
    assert [s.id for s in graph.predecessors("c")] == ["b"]
    assert graph.cycles() == []

    report = validate_workflow(workflow)
    assert report.ok
    assert report.issues == ()


def test_empty_workflow() -> None:
    graph = StepGraph(make_workflow())
    assert graph.entry is None
    assert graph.reachable() == []
    assert validate_workflow(make_workflow()).ok


def test_action_fans_out_to_every_successor() -> None:
    workflow = make_workflow(
        steps=(make_step("a", "b", "c"), make_step("b", "d"), make_step("c", "d"), make_step("d"))
    )
    graph = StepGraph(workflow)

    assert [s.id for s in graph.fan_out("a")] == ["b", "c"]
    assert [s.id for s in graph.predecessors("d")] == ["b", "c"]
    # Each step is visited once even with two incoming edges.
    assert [s.id for s in graph.reachable()] == ["a", "b", "c", "d"]


def test_dangling_reference_is_an_error() -> None:
    workflow = make_workflow(steps=(make_step("a", "b", "ghost"), make_step("b")))

    report = validate_workflow(workflow)

    assert not report.ok
    assert [(i.code, i.step_id, i.target) for i in report.errors] == [
        ("dangling_reference", "a", "ghost")
    ]
    assert [s.id for s in StepGraph(workflow).successors("a")] == ["b"]
    assert report.to_json()["issues"][0]["stepId"] == "a"


def test_unreachable_step_is_a_warning() -> None:
    workflow = make_workflow(steps=(make_step("a", "b"), make_step("b"), make_step("orphan")))

    report = validate_workflow(workflow)

    assert report.ok
    assert _codes(report) == [("unreachable_step", "orphan")]


def test_cycle_through_loop_step_is_allowed() -> None:
    workflow = make_workflow(
        steps=(
            make_step("start", "retry"),
            make_step("retry", "work", type=StepType.LOOP),
            make_step("work", "retry", "done"),
            make_step("done"),
        )
    )

    graph = StepGraph(workflow)
    assert [sorted(c) for c in graph.cycles()] == [["retry", "work"]]
    assert validate_workflow(workflow).issues == ()


def test_cycle_without_loop_step_is_flagged() -> None:
    workflow = make_workflow(steps=(make_step("a", "b"), make_step("b", "a")))

    report = validate_workflow(workflow)

    assert report.ok
    assert [i.code for i in report.warnings] == ["cycle_without_loop"]


def test_self_loop() -> None:
    plain = make_workflow(steps=(make_step("a", "a"),))
    assert [i.code for i in validate_workflow(plain).issues] == ["self_loop", "cycle_without_loop"]

    looping = make_workflow(steps=(make_step("a", "a", type=StepType.LOOP),))
    assert [i.code for i in validate_workflow(looping).issues] == ["self_loop"]


def test_condition_branches_use_labels() -> None:
    step = make_step(
        "gate",
        "deploy",
        "notify",
        "audit",
        type=StepType.CONDITION,
        config={"onSuccess": "deploy", "onFailure": ["notify"]},
    )

    assert condition_branches(step) == {
        "success": ["deploy"],
        "failure": ["notify"],
        "unlabeled": ["audit"],
    }


def test_unknown_branch_target_is_a_warning() -> None:
    workflow = make_workflow(
        steps=(
            make_step("gate", "ok", type=StepType.CONDITION, config={"onFailure": ["missing"]}),
            make_step("ok"),
        )
    )

    report = validate_workflow(workflow)

    assert report.ok
    assert [(i.code, i.target) for i in report.issues] == [("unknown_branch_target", "missing")]
    assert condition_branches(workflow.steps[0])["failure"] == []


def test_duplicate_workflow_is_a_deep_copy() -> None:
    source = make_workflow(
        "w-1", steps=(make_step("a", config={"items": [1]}),), is_template=True, category="ops"
    )
    later = NOW + timedelta(days=1)

    copy = duplicate_workflow(source, new_id="w-2", now=later)

    assert copy.id == "w-2"
    assert copy.name == "Workflow w-1 (copy)"
    assert copy.is_template is False
    assert copy.category == "ops"
    assert copy.created_at == copy.updated_at == later
    assert [s.id for s in copy.steps] == ["a"]

    copy.steps[0].config["items"].append(2)
    assert source.steps[0].config == {"items": [1]}

    assert duplicate_workflow(source, new_id="w-3", now=later, name="Mine").name == "Mine"
