"""Cancelable periodic refresh of store state.

Each tick runs one callback on a single background thread, so ticks never overlap.
``stop()`` releases the schedule; no new tick starts after it is called.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable

from ai_schedule.domain import RealtimeMetrics, drift_metrics

from .store import DomainStore

logger = logging.getLogger(__name__)


class PeriodicRefresh:
    def __init__(
        self,
        callback: Callable[[], object],
        interval_seconds: float,
        *,
        name: str = "refresh",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> PeriodicRefresh:
        with self._lock:
            if self.running:
                return self
            self._stop.clear()
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
        logger.debug("Refresh started", extra={"refresh": self._name, "interval": self._interval})
        return self

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            self._stop.set()
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Refresh stopped", extra={"refresh": self._name})

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Refresh callback failed", extra={"refresh": self._name})

    def __enter__(self) -> PeriodicRefresh:
        return self.start()

    def __exit__(self, *_exc: object) -> None:
        self.stop()


def start_metrics_refresh(
    store: DomainStore,
    interval_seconds: float = 2.0,
    rng: random.Random | None = None,
) -> PeriodicRefresh:
    """Random-walk the store's live metrics every ``interval_seconds``."""

    source = rng or random.Random()

    def _tick() -> RealtimeMetrics:
        return store.update_metrics(lambda m: drift_metrics(m, source))

    return PeriodicRefresh(_tick, interval_seconds, name="metrics-refresh").start()
