"""Entity schemas for tasks, agents, workflows and execution logs."""

from ai_schedule.domain.agent import Agent, AgentStatus
from ai_schedule.domain.base import DomainModel, utc_now
from ai_schedule.domain.execution_log import TERMINAL_STATUSES, ExecutionLog, ExecutionStatus
from ai_schedule.domain.filters import ALL, TaskFilters, UiState
from ai_schedule.domain.metrics import RealtimeMetrics, drift_metrics
from ai_schedule.domain.system_config import (
    McpServerConfig,
    NotificationConfig,
    PerformanceConfig,
    SystemConfig,
)
from ai_schedule.domain.task import (
    COUNTER_FIELDS,
    Task,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    task_success_rate,
)
from ai_schedule.domain.workflow import StepPosition, StepType, Workflow, WorkflowStep

__all__ = [
    "ALL",
    "COUNTER_FIELDS",
    "Agent",
    "AgentStatus",
    "DomainModel",
    "ExecutionLog",
    "ExecutionStatus",
    "McpServerConfig",
    "NotificationConfig",
    "PerformanceConfig",
    "RealtimeMetrics",
    "StepPosition",
    "StepType",
    "SystemConfig",
    "TERMINAL_STATUSES",
    "Task",
    "TaskDraft",
    "TaskFilters",
    "TaskPriority",
    "TaskStatus",
    "UiState",
    "Workflow",
    "WorkflowStep",
    "drift_metrics",
    "task_success_rate",
    "utc_now",
]
