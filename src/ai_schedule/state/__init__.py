"""Domain store, derived views and the helpers that feed them."""

from ai_schedule.state.integrity import IntegrityReport, ReferenceIssue, check_integrity
from ai_schedule.state.refresh import PeriodicRefresh, start_metrics_refresh
from ai_schedule.state.seed import SeedData, build_seed, seed_if_empty
from ai_schedule.state.store import (
    CrudCollection,
    DomainStore,
    EntityCollection,
    ExecutionLogCollection,
)

__all__ = [
    "CrudCollection",
    "DomainStore",
    "EntityCollection",
    "ExecutionLogCollection",
    "IntegrityReport",
    "PeriodicRefresh",
    "ReferenceIssue",
    "SeedData",
    "build_seed",
    "check_integrity",
    "seed_if_empty",
    "start_metrics_refresh",
]
