# core/events.py
"""
Tiny observer registry.

Every notification is its own Signal. Connecting returns a Subscription
token; owners that subscribe to several signals keep them in a
SubscriptionScope and close it on shutdown so no callback outlives its
subscriber.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

log = logging.getLogger(__name__)


class Subscription:
    def __init__(self, signal: "Signal", callback: Callable[..., Any]):
        self._signal: Optional[Signal] = signal
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._signal is not None

    def cancel(self):
        if self._signal is None:
            return
        signal = self._signal
        self._signal = None
        signal._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cancel()


class Signal:
    """
    Ordered multicast notification.
    - emit() iterates over a snapshot, so handlers may cancel themselves
      (or others) mid-emit without skipping anyone
    - handlers connected during emit() are first called on the next emit()
    - exceptions raised by handlers propagate to the emitter
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._subs: List[Subscription] = []

    def connect(self, callback: Callable[..., Any]) -> Subscription:
        sub = Subscription(self, callback)
        self._subs.append(sub)
        return sub

    def emit(self, *args: Any):
        for sub in list(self._subs):
            if sub.active:
                sub.callback(*args)

    def clear(self):
        for sub in list(self._subs):
            sub.cancel()

    def _remove(self, sub: Subscription):
        try:
            self._subs.remove(sub)
        except ValueError:
            log.debug("signal %s: subscription already removed", self.name)

    def __len__(self) -> int:
        return len(self._subs)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, subscribers={len(self._subs)})"


class SubscriptionScope:
    """Owns the subscriptions of one subscriber; close() drops them all."""

    def __init__(self):
        self._subs: List[Subscription] = []

    def connect(self, signal: Signal, callback: Callable[..., Any]) -> Subscription:
        sub = signal.connect(callback)
        self._subs.append(sub)
        return sub

    def close(self):
        subs, self._subs = self._subs, []
        for sub in subs:
            sub.cancel()

    def __len__(self) -> int:
        return sum(1 for s in self._subs if s.active)

    def __enter__(self) -> "SubscriptionScope":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
