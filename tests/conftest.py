"""Test configuration and fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from factories import NOW

from ai_schedule.config import StoreConfig
from ai_schedule.state import DomainStore, seed_if_empty


class FakeClock:
    """Deterministic clock; advance it explicitly."""

    def __init__(self, start: datetime = NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class SequentialIds:
    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fixed clock starting at NOW."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> DomainStore:
    """Provide an empty, permissive store."""
    return DomainStore(StoreConfig(), clock=clock, id_factory=SequentialIds())


@pytest.fixture
def strict_store(clock: FakeClock) -> DomainStore:
    """Provide an empty store that enforces references on write."""
    return DomainStore(
        StoreConfig(strict_references=True), clock=clock, id_factory=SequentialIds()
    )


@pytest.fixture
def seeded_store(store: DomainStore) -> DomainStore:
    """Provide a store loaded with the dashboard fixtures."""
    seed_if_empty(store)
    return store
