from __future__ import annotations

from factories import make_agent, make_step, make_task, make_workflow

from ai_schedule.state import check_integrity


def test_clean_store_has_no_issues(store) -> None:
    store.agents.set_all([make_agent("agent-1")])
    store.workflows.add(make_workflow("workflow-1", steps=(make_step("a"),)))
    store.tasks.add(make_task("t-1"))

    report = check_integrity(store)

    assert report.ok
    assert report.issue_count == 0
    assert report.task_issues == ()


def test_reports_dangling_task_references(store) -> None:
    store.agents.set_all([make_agent("agent-1")])
    store.tasks.add(make_task("t-1", agent_id="ghost", workflow_id="nowhere"))

    report = check_integrity(store)

    assert [(i.task_id, i.attribute, i.target) for i in report.task_issues] == [
        ("t-1", "agentId", "ghost"),
        ("t-1", "workflowId", "nowhere"),
    ]
    # Task references only warn.
    assert report.ok
    assert report.to_json()["taskIssues"][0]["message"] == (
        "Task 't-1' agentId references unknown id 'ghost'"
    )


def test_reports_workflow_graph_errors(store) -> None:
    store.workflows.add(make_workflow("workflow-1", steps=(make_step("a", "missing"),)))

    report = check_integrity(store)

    assert not report.ok
    assert report.issue_count == 1
    assert report.to_json()["workflows"][0]["workflowId"] == "workflow-1"


def test_seeded_store_integrity(seeded_store) -> None:
    report = check_integrity(seeded_store)

    assert report.ok
    assert report.task_issues == ()
    assert all(r.issues == () for r in report.workflows)
