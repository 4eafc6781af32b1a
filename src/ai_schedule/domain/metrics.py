from __future__ import annotations

import random

from pydantic import Field

from ai_schedule.domain.base import DomainModel


class RealtimeMetrics(DomainModel):
    """Live gauges shown on the monitor page."""

    active_jobs: int = Field(default=3, ge=0)
    queued_jobs: int = Field(default=7, ge=0)
    cpu_usage: float = Field(default=45.0, ge=0, le=100)
    memory_usage: float = Field(default=62.0, ge=0, le=100)
    network_io: float = Field(default=1.2, ge=0)
    disk_io: float = Field(default=0.8, ge=0)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def drift_metrics(metrics: RealtimeMetrics, rng: random.Random) -> RealtimeMetrics:
    """Random-walk every gauge by a small step, keeping it in range."""

    return metrics.model_copy(
        update={
            "cpu_usage": _clamp(metrics.cpu_usage + (rng.random() - 0.5) * 10, 0.0, 100.0),
            "memory_usage": _clamp(metrics.memory_usage + (rng.random() - 0.5) * 5, 0.0, 100.0),
            "network_io": max(0.0, metrics.network_io + (rng.random() - 0.5) * 0.5),
            "disk_io": max(0.0, metrics.disk_io + (rng.random() - 0.5) * 0.3),
        }
    )
