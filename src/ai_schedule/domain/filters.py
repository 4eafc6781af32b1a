"""UI-adjacent state kept alongside the entity collections."""

from __future__ import annotations

from ai_schedule.domain.base import DomainModel

ALL = "all"


class TaskFilters(DomainModel):
    # Raw values matched exactly and case-sensitively; anything outside the
    # enumerations is read as "all".
    status: str = ALL
    priority: str = ALL
    search: str = ""


class UiState(DomainModel):
    sidebar_collapsed: bool = False
    current_page: str = "dashboard"
