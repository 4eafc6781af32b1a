"""Dashboard REST API.

Thin wrappers over :class:`ai_schedule.state.DomainStore`. All routes are mounted
under `/api` and speak the dashboard's camelCase JSON.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from ai_schedule import __version__
from ai_schedule.domain import TaskDraft, Workflow
from ai_schedule.domain.lifecycle import start_execution
from ai_schedule.state import DomainStore, check_integrity
from ai_schedule.state import views
from ai_schedule.workflow.graph import validate_workflow

from .models import (
    ExecutionFinish,
    ExecutionStart,
    SelectRequest,
    SystemConfigPatch,
    TaskFiltersPatch,
    TaskPatch,
    WorkflowCreate,
    WorkflowPatch,
)

router = APIRouter()

Json = dict[str, object]


def _store(request: Request) -> DomainStore:
    store = getattr(request.app.state, "store", None)
    if not isinstance(store, DomainStore):
        # Only reachable when the router is mounted outside create_app().
        raise HTTPException(status_code=500, detail="Store not configured")
    return store


def _not_found(kind: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{kind} not found")


@router.get("/health")
def health(request: Request) -> Json:
    store = _store(request)
    return {
        "status": "ok",
        "version": __version__,
        "tasks": len(store.tasks),
        "workflows": len(store.workflows),
        "strictReferences": store.config.strict_references,
    }


# Tasks


@router.get("/tasks")
def list_tasks(request: Request) -> list[Json]:
    return [t.to_json() for t in _store(request).tasks.all()]


@router.get("/tasks/filtered")
def list_filtered_tasks(request: Request) -> list[Json]:
    return [t.to_json() for t in _store(request).filtered_tasks()]


@router.get("/tasks/stats")
def get_task_stats(request: Request) -> Json:
    return _store(request).task_stats().to_json()


@router.get("/tasks/selected")
def get_selected_task(request: Request) -> Json | None:
    task = _store(request).tasks.selected
    return task.to_json() if task is not None else None


@router.post("/tasks/select")
def select_task(request: Request, req: SelectRequest) -> Json | None:
    store = _store(request)
    if req.id is None:
        store.tasks.set_selected(None)
        return None
    task = store.tasks.get(req.id)
    if task is None:
        raise _not_found("Task")
    store.tasks.set_selected(task)
    return task.to_json()


@router.get("/tasks/{task_id}")
def get_task(request: Request, task_id: str) -> Json:
    task = _store(request).tasks.get(task_id)
    if task is None:
        raise _not_found("Task")
    return task.to_json()


@router.post("/tasks", status_code=201)
def create_task(request: Request, draft: TaskDraft) -> Json:
    return _store(request).create_task(draft).to_json()


@router.patch("/tasks/{task_id}")
def update_task(request: Request, task_id: str, patch: TaskPatch) -> Json:
    updated = _store(request).tasks.update(task_id, **patch.changes())
    if updated is None:
        raise _not_found("Task")
    return updated.to_json()


@router.delete("/tasks/{task_id}")
def delete_task(request: Request, task_id: str) -> Json:
    if not _store(request).tasks.remove(task_id):
        raise _not_found("Task")
    return {"deleted": task_id}


@router.post("/tasks/{task_id}/toggle")
def toggle_task(request: Request, task_id: str) -> Json:
    updated = _store(request).toggle_task(task_id)
    if updated is None:
        raise _not_found("Task")
    return updated.to_json()


@router.get("/task-filters")
def get_task_filters(request: Request) -> Json:
    return _store(request).task_filters.to_json()


@router.patch("/task-filters")
def update_task_filters(request: Request, patch: TaskFiltersPatch) -> Json:
    return _store(request).set_task_filters(**patch.changes()).to_json()


# Workflows


@router.get("/workflows")
def list_workflows(
    request: Request,
    search: str = "",
    category: str = "all",
    templates: bool = False,
) -> list[Json]:
    workflows = views.filter_workflows(
        _store(request).workflows.all(),
        search=search,
        category=category,
        templates_only=templates,
    )
    return [w.to_json() for w in workflows]


@router.get("/workflows/categories")
def list_workflow_categories(request: Request) -> list[str]:
    return views.workflow_categories(_store(request).workflows.all())


@router.get("/workflows/{workflow_id}")
def get_workflow(request: Request, workflow_id: str) -> Json:
    workflow = _store(request).workflows.get(workflow_id)
    if workflow is None:
        raise _not_found("Workflow")
    return workflow.to_json()


@router.post("/workflows", status_code=201)
def create_workflow(request: Request, req: WorkflowCreate) -> Json:
    store = _store(request)
    now = store.now()
    workflow = Workflow(
        id=req.id or store.new_id(),
        name=req.name,
        description=req.description,
        steps=req.steps,
        is_template=req.is_template,
        category=req.category,
        created_at=now,
        updated_at=now,
    )
    return store.workflows.add(workflow).to_json()


@router.patch("/workflows/{workflow_id}")
def update_workflow(request: Request, workflow_id: str, patch: WorkflowPatch) -> Json:
    updated = _store(request).workflows.update(workflow_id, **patch.changes())
    if updated is None:
        raise _not_found("Workflow")
    return updated.to_json()


@router.delete("/workflows/{workflow_id}")
def delete_workflow(request: Request, workflow_id: str) -> Json:
    if not _store(request).workflows.remove(workflow_id):
        raise _not_found("Workflow")
    return {"deleted": workflow_id}


@router.post("/workflows/{workflow_id}/duplicate", status_code=201)
def duplicate_workflow(request: Request, workflow_id: str) -> Json:
    copy = _store(request).duplicate_workflow(workflow_id)
    if copy is None:
        raise _not_found("Workflow")
    return copy.to_json()


@router.get("/workflows/{workflow_id}/validate")
def validate(request: Request, workflow_id: str) -> Json:
    workflow = _store(request).workflows.get(workflow_id)
    if workflow is None:
        raise _not_found("Workflow")
    return validate_workflow(workflow).to_json()


# Agents


@router.get("/agents")
def list_agents(request: Request) -> list[Json]:
    return [a.to_json() for a in _store(request).agents.all()]


# Execution logs


@router.get("/executions")
def list_executions(
    request: Request,
    status: str = "all",
    search: str = "",
    time_range: views.TimeRange = Query(default="all", alias="timeRange"),
) -> list[Json]:
    store = _store(request)
    logs = views.filter_execution_logs(
        store.execution_logs.all(),
        now=store.now(),
        status=status,
        search=search,
        time_range=time_range,
    )
    return [log.to_json() for log in logs]


@router.get("/executions/stats")
def get_execution_stats(request: Request) -> Json:
    return views.execution_stats(_store(request).execution_logs.all()).to_json()


@router.post("/executions", status_code=201)
def start_execution_log(request: Request, req: ExecutionStart) -> Json:
    store = _store(request)
    task = store.tasks.get(req.task_id)
    if task is None:
        raise _not_found("Task")
    log = start_execution(
        task,
        at=store.now(),
        agent_id=req.agent_id,
        metadata=req.metadata,
        log_id=store.new_id(),
    )
    return store.execution_logs.add(log).to_json()


@router.post("/executions/{log_id}/finish")
def finish_execution_log(request: Request, log_id: str, req: ExecutionFinish) -> Json:
    finished = _store(request).execution_logs.finish(
        log_id, req.status, result=req.result, error=req.error
    )
    if finished is None:
        raise _not_found("Execution log")
    return finished.to_json()


# System


@router.get("/system-config")
def get_system_config(request: Request) -> Json:
    return _store(request).system_config.to_json()


@router.patch("/system-config")
def update_system_config(request: Request, patch: SystemConfigPatch) -> Json:
    return _store(request).update_system_config(**patch.changes()).to_json()


@router.get("/metrics")
def get_metrics(request: Request) -> Json:
    return _store(request).metrics.to_json()


@router.get("/integrity")
def get_integrity(request: Request) -> Json:
    return check_integrity(_store(request)).to_json()
