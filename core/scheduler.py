# core/scheduler.py
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, List

log = logging.getLogger(__name__)


class ScheduledCall:
    """Cancellable token for a deferred callback."""

    def __init__(self, call_id: int, delay: float, callback: Callable[[], Any], name: str = ""):
        self.call_id = call_id
        self.remaining = float(delay)
        self.callback = callback
        self.name = name or getattr(callback, "__name__", "call")
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Returns True if this actually stopped a pending call."""
        if not self.pending:
            return False
        self.cancelled = True
        log.debug("scheduler: cancelled %s#%d", self.name, self.call_id)
        return True


class Scheduler:
    """
    Deferred work on the game thread.
    - Delays are accumulated from tick(dt); nothing blocks or sleeps
    - Due calls fire in order of remaining time, ties in scheduling order
    - A call scheduled from inside a callback waits for the next tick
    """

    def __init__(self):
        self._calls: List[ScheduledCall] = []
        self._ids = itertools.count(1)

    def call_later(self, delay: float, callback: Callable[[], Any], name: str = "") -> ScheduledCall:
        if delay < 0.0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        call = ScheduledCall(next(self._ids), delay, callback, name)
        self._calls.append(call)
        return call

    def tick(self, dt: float) -> int:
        """Advance all timers by dt; returns how many calls fired."""
        batch = [c for c in self._calls if c.pending]
        for c in batch:
            c.remaining -= dt

        due = sorted((c for c in batch if c.remaining <= 0.0), key=lambda c: (c.remaining, c.call_id))
        fired = 0
        for c in due:
            # an earlier callback in this batch may have cancelled it
            if not c.pending:
                continue
            c.fired = True
            fired += 1
            log.debug("scheduler: firing %s#%d", c.name, c.call_id)
            c.callback()

        self._calls = [c for c in self._calls if c.pending]
        return fired

    def cancel_all(self) -> int:
        n = 0
        for c in self._calls:
            if c.cancel():
                n += 1
        self._calls.clear()
        return n

    @property
    def pending(self) -> int:
        return sum(1 for c in self._calls if c.pending)
