"""Time-gated switch between the primary and secondary history providers."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Protocol


logger = logging.getLogger(__name__)


class BreakerState(Enum):
    CLOSED = "closed"  # primary provider in use
    OPEN = "open"  # secondary only until the cooldown elapses


class FailureMemory(Protocol):
    """Single slot holding the time of the latest primary failure."""

    def last_failure(self) -> float | None:
        ...

    def record_failure(self, at: float) -> None:
        ...


class InMemoryFailureMemory:
    def __init__(self) -> None:
        self._last: float | None = None

    def last_failure(self) -> float | None:
        return self._last

    def record_failure(self, at: float) -> None:
        self._last = at


class FailoverBreaker:
    """
    Two-state circuit breaker over a FailureMemory.

    A recorded failure opens the breaker for ``cooldown_seconds``; afterwards it
    reads as closed again without any reset. There is no half-open probing:
    the first request after the cooldown simply goes to the primary provider.
    """

    def __init__(
        self,
        memory: FailureMemory,
        cooldown_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.memory = memory
        self.cooldown_seconds = cooldown_seconds
        self.clock = clock

    @property
    def state(self) -> BreakerState:
        last = self.memory.last_failure()
        if last is not None and self.clock() - last < self.cooldown_seconds:
            return BreakerState.OPEN
        return BreakerState.CLOSED

    def allows_primary(self) -> bool:
        return self.state is BreakerState.CLOSED

    def record_failure(self) -> None:
        now = self.clock()
        self.memory.record_failure(now)
        logger.warning(
            f"Primary history provider failed; using secondary provider for {self.cooldown_seconds:.0f}s"
        )
