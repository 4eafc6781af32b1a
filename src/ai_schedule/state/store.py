"""In-memory domain store.

The store is the single owner of every entity collection. Consumers get deep copies
and change state only through the operations below. One re-entrant lock guards all
operations so timer-driven refresh callbacks cannot interleave with callers.

Policies:
- ``add`` with an existing id raises :class:`DuplicateIdError`.
- ``update`` with an unknown id returns ``None``; ``remove`` returns ``False``.
- Referential integrity is only enforced when ``StoreConfig.strict_references`` is set.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from typing import Generic, TypeVar

from ai_schedule.config import StoreConfig
from ai_schedule.domain import (
    COUNTER_FIELDS,
    Agent,
    DomainModel,
    ExecutionLog,
    ExecutionStatus,
    RealtimeMetrics,
    SystemConfig,
    Task,
    TaskDraft,
    TaskFilters,
    TaskStatus,
    UiState,
    Workflow,
    utc_now,
)
from ai_schedule.domain.lifecycle import IllegalTransitionError, transition
from ai_schedule.errors import DanglingReferenceError, DomainError, DuplicateIdError
from ai_schedule.state import views
from ai_schedule.workflow.graph import StepGraph, duplicate_workflow

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DomainModel)

Clock = Callable[[], datetime]
ReplaceGuard = Callable[[T | None, T], None]


class EntityCollection(Generic[T]):
    """Replace-only collection with a single tracked selection."""

    def __init__(self, name: str, lock: threading.RLock) -> None:
        self.name = name
        self._lock = lock
        self._items: list[T] = []
        self._selected_id: str | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        with self._lock:
            return self._index(item_id) is not None

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def _index(self, item_id: object) -> int | None:
        for idx, item in enumerate(self._items):
            if getattr(item, "id") == item_id:
                return idx
        return None

    def all(self) -> list[T]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items]

    def ids(self) -> list[str]:
        with self._lock:
            return [getattr(item, "id") for item in self._items]

    def get(self, item_id: str) -> T | None:
        with self._lock:
            idx = self._index(item_id)
            return None if idx is None else self._items[idx].model_copy(deep=True)

    def set_all(self, items: Iterable[T]) -> None:
        new_items = list(items)
        seen: set[str] = set()
        for item in new_items:
            item_id = getattr(item, "id")
            if item_id in seen:
                raise DuplicateIdError(self.name, item_id)
            seen.add(item_id)
        with self._lock:
            self._items = [item.model_copy(deep=True) for item in new_items]
        logger.debug("Collection replaced", extra={"collection": self.name, "count": len(seen)})

    @property
    def selected(self) -> T | None:
        with self._lock:
            if self._selected_id is None:
                return None
            return self.get(self._selected_id)

    def set_selected(self, item: T | None) -> None:
        with self._lock:
            self._selected_id = None if item is None else getattr(item, "id")


class CrudCollection(EntityCollection[T]):
    """Collection of entities carrying ``updated_at``, with add/update/remove."""

    def __init__(
        self,
        name: str,
        lock: threading.RLock,
        clock: Clock,
        guards: Iterable[ReplaceGuard[T]] = (),
    ) -> None:
        super().__init__(name, lock)
        self._clock = clock
        self._guards = list(guards)

    def _check(self, old: T | None, new: T) -> None:
        try:
            for guard in self._guards:
                guard(old, new)
        except (DomainError, ValueError) as exc:
            logger.warning(
                "Rejected write",
                extra={"collection": self.name, "id": getattr(new, "id"), "error": str(exc)},
            )
            raise

    def add(self, item: T) -> T:
        with self._lock:
            item_id = getattr(item, "id")
            if self._index(item_id) is not None:
                logger.warning(
                    "Rejected duplicate id", extra={"collection": self.name, "id": item_id}
                )
                raise DuplicateIdError(self.name, item_id)
            self._check(None, item)
            self._items.append(item.model_copy(deep=True))
        logger.debug("Item added", extra={"collection": self.name, "id": item_id})
        return item.model_copy(deep=True)

    def update(self, item_id: str, **updates: object) -> T | None:
        """Merge ``updates`` into the item and refresh ``updated_at``.

        Returns the updated item, or ``None`` when ``item_id`` is unknown.
        """
        with self._lock:
            idx = self._index(item_id)
            if idx is None:
                logger.debug(
                    "Update ignored, id not found",
                    extra={"collection": self.name, "id": item_id},
                )
                return None
            current = self._items[idx]
            model = type(current)
            unknown = set(updates) - set(model.model_fields)
            if unknown:
                logger.warning(
                    "Rejected unknown fields",
                    extra={"collection": self.name, "id": item_id, "fields": sorted(unknown)},
                )
                raise ValueError(f"Unknown {self.name} fields: {sorted(unknown)}")
            if "id" in updates and updates["id"] != item_id:
                logger.warning("Rejected id change", extra={"collection": self.name, "id": item_id})
                raise ValueError(f"{self.name} id is immutable")

            merged = model.model_validate(
                {**current.model_dump(), **updates, "updated_at": self._clock()}
            )
            self._check(current, merged)
            self._items[idx] = merged
        logger.debug(
            "Item updated",
            extra={"collection": self.name, "id": item_id, "fields": sorted(updates)},
        )
        return merged.model_copy(deep=True)

    def remove(self, item_id: str) -> bool:
        with self._lock:
            idx = self._index(item_id)
            if idx is None:
                return False
            del self._items[idx]
            if self._selected_id == item_id:
                self._selected_id = None
        logger.debug("Item removed", extra={"collection": self.name, "id": item_id})
        return True


class ExecutionLogCollection(EntityCollection[ExecutionLog]):
    """Most-recent-first log list. Logs are only ever finished, never edited."""

    def __init__(self, lock: threading.RLock, clock: Clock) -> None:
        super().__init__("execution_logs", lock)
        self._clock = clock

    def add(self, log: ExecutionLog) -> ExecutionLog:
        """Prepend a newly started log. Use ``set_all`` to load finished history."""
        if log.status is not ExecutionStatus.RUNNING:
            logger.warning(
                "Rejected finished log", extra={"id": log.id, "status": log.status.value}
            )
            raise IllegalTransitionError(
                f"New execution logs must be running, got {log.status.value}"
            )
        with self._lock:
            if self._index(log.id) is not None:
                raise DuplicateIdError(self.name, log.id)
            self._items.insert(0, log.model_copy(deep=True))
        logger.debug("Execution log added", extra={"id": log.id, "task_id": log.task_id})
        return log.model_copy(deep=True)

    def finish(
        self,
        log_id: str,
        status: ExecutionStatus,
        *,
        result: str | None = None,
        error: str | None = None,
    ) -> ExecutionLog | None:
        """Move a running log to a terminal state.

        Raises :class:`IllegalTransitionError` if the log is already terminal.
        """
        with self._lock:
            idx = self._index(log_id)
            if idx is None:
                return None
            finished = transition(
                self._items[idx], status, at=self._clock(), result=result, error=error
            )
            self._items[idx] = finished
        logger.debug("Execution log finished", extra={"id": log_id, "status": status.value})
        return finished.model_copy(deep=True)


class DomainStore:
    """Process-wide state container. Create one and pass it to its consumers."""

    def __init__(
        self,
        config: StoreConfig | None = None,
        *,
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self.config = config or StoreConfig()
        self._clock = clock
        self._new_id = id_factory
        self._lock = threading.RLock()

        self.agents: EntityCollection[Agent] = EntityCollection("agents", self._lock)
        self.workflows: CrudCollection[Workflow] = CrudCollection(
            "workflows", self._lock, clock, guards=[self._check_workflow_refs]
        )
        self.tasks: CrudCollection[Task] = CrudCollection(
            "tasks", self._lock, clock, guards=[_counters_never_decrease, self._check_task_refs]
        )
        self.execution_logs = ExecutionLogCollection(self._lock, clock)

        self._task_filters = TaskFilters()
        self._system_config = SystemConfig()
        self._ui = UiState()
        self._metrics = RealtimeMetrics()

    def now(self) -> datetime:
        return self._clock()

    def new_id(self) -> str:
        return self._new_id()

    # Referential integrity (strict mode only)

    def _check_task_refs(self, _old: Task | None, new: Task) -> None:
        if not self.config.strict_references:
            return
        if new.agent_id not in self.agents:
            raise DanglingReferenceError(new.id, "agentId", new.agent_id)
        if new.workflow_id not in self.workflows:
            raise DanglingReferenceError(new.id, "workflowId", new.workflow_id)

    def _check_workflow_refs(self, _old: Workflow | None, new: Workflow) -> None:
        if not self.config.strict_references:
            return
        for source, target in StepGraph(new).dangling_edges():
            raise DanglingReferenceError(f"{new.id}/{source}", "nextSteps", target)

    # Filters, config and UI state

    @property
    def task_filters(self) -> TaskFilters:
        with self._lock:
            return self._task_filters

    def set_task_filters(self, **partial: object) -> TaskFilters:
        with self._lock:
            unknown = set(partial) - set(TaskFilters.model_fields)
            if unknown:
                raise ValueError(f"Unknown task filters: {sorted(unknown)}")
            self._task_filters = TaskFilters.model_validate(
                {**self._task_filters.model_dump(), **partial}
            )
            return self._task_filters

    @property
    def system_config(self) -> SystemConfig:
        with self._lock:
            return self._system_config.model_copy(deep=True)

    def update_system_config(self, **partial: object) -> SystemConfig:
        with self._lock:
            self._system_config = self._system_config.merged(**partial)
            logger.debug("System config updated", extra={"sections": sorted(partial)})
            return self._system_config.model_copy(deep=True)

    @property
    def ui(self) -> UiState:
        with self._lock:
            return self._ui

    def set_sidebar_collapsed(self, collapsed: bool) -> UiState:
        with self._lock:
            self._ui = self._ui.model_copy(update={"sidebar_collapsed": collapsed})
            return self._ui

    def set_current_page(self, page: str) -> UiState:
        with self._lock:
            self._ui = self._ui.model_copy(update={"current_page": page})
            return self._ui

    @property
    def metrics(self) -> RealtimeMetrics:
        with self._lock:
            return self._metrics

    def update_metrics(self, fn: Callable[[RealtimeMetrics], RealtimeMetrics]) -> RealtimeMetrics:
        """Atomic read-modify-write of the live metrics."""
        with self._lock:
            self._metrics = fn(self._metrics)
            return self._metrics

    # Task and workflow helpers used by the dashboard

    def create_task(self, draft: TaskDraft) -> Task:
        return self.tasks.add(draft.to_task(id=self._new_id(), now=self._clock()))

    def toggle_task(self, task_id: str) -> Task | None:
        with self._lock:
            task = self.tasks.get(task_id)
            if task is None:
                return None
            status = TaskStatus.PAUSED if task.status == TaskStatus.RUNNING else TaskStatus.RUNNING
            return self.tasks.update(task_id, status=status)

    def duplicate_workflow(self, workflow_id: str) -> Workflow | None:
        with self._lock:
            source = self.workflows.get(workflow_id)
            if source is None:
                return None
            copy = duplicate_workflow(source, new_id=self._new_id(), now=self._clock())
            return self.workflows.add(copy)

    # Derived views

    def filtered_tasks(self) -> list[Task]:
        with self._lock:
            return views.filter_tasks(self.tasks.all(), self._task_filters)

    def task_stats(self) -> views.TaskStats:
        return views.task_stats(self.tasks.all())


def _counters_never_decrease(old: Task | None, new: Task) -> None:
    if old is None:
        return
    for name in COUNTER_FIELDS:
        if getattr(new, name) < getattr(old, name):
            raise ValueError(
                f"{name} cannot decrease ({getattr(old, name)} -> {getattr(new, name)})"
            )
