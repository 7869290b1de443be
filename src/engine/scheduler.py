"""One-shot deferred callbacks guarded by a generation counter."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        ...


class DeferredTask:
    """Schedules callback through a Scheduler. cancel() turns every pending fire into a no-op.

    Each schedule() captures the current generation; cancel() bumps it, so a callback
    scheduled before the cancel sees a stale token when it fires and does nothing.
    """

    def __init__(self, scheduler: Scheduler, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._callback = callback
        self._generation = 0
        self._pending = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> int:
        """Number of scheduled fires still carrying the current generation."""
        return self._pending

    def schedule(self, delay_ms: int) -> int:
        token = self._generation
        self._pending += 1
        self._scheduler.call_later(delay_ms, lambda: self._fire(token))
        return token

    def cancel(self) -> None:
        self._generation += 1
        self._pending = 0

    def _fire(self, token: int) -> None:
        if token != self._generation:
            logger.debug("Deferred task generation %s is stale (now %s), skipping", token, self._generation)
            return
        self._pending = max(0, self._pending - 1)
        self._callback()
