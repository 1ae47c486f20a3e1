# world/pool.py
"""
Actor allocation strategies.

Two interchangeable allocators share one acquire/release contract and are
picked once at startup (make_allocator):

- PooledAllocator keeps a queue of inactive handles per type id and only
  builds new actors when the matching queue is empty.
- DirectAllocator builds on every acquire and destroys on every release.

Type id -1 (UNTYPED) is the shared queue used when type-based spawning is
off or the catalog has nothing spawnable.
"""
from __future__ import annotations

import logging
import weakref
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional

log = logging.getLogger(__name__)

UNTYPED = -1


class ActorHandle:
    """
    Reusable wrapper around one actor instance.

    The allocator that built it is held weakly; an active handle is only
    borrowed by whoever acquired it until release().
    """

    def __init__(self, type_id: int, actor: Any, allocator: Optional["Allocator"] = None):
        self.type_id = type_id
        self.actor = actor
        self.active = False
        self._allocator_ref = weakref.ref(allocator) if allocator is not None else None
        self._death_sub = None

    @property
    def allocator(self) -> Optional["Allocator"]:
        return self._allocator_ref() if self._allocator_ref is not None else None

    def on_death(self, callback: Callable[..., Any]):
        """Route the actor's died signal to callback; replaces any earlier one."""
        self.clear_death_callback()
        self._death_sub = self.actor.died.connect(callback)

    def clear_death_callback(self):
        if self._death_sub is not None:
            self._death_sub.cancel()
            self._death_sub = None

    @property
    def has_death_callback(self) -> bool:
        return self._death_sub is not None and self._death_sub.active

    def __repr__(self) -> str:
        return f"ActorHandle(type={self.type_id}, active={self.active})"


class Allocator:
    """Acquire/release contract shared by both strategies."""

    pooled = False

    def __init__(self, factory: Callable[[int], Any], type_based: bool = True):
        self.factory = factory
        self.type_based = type_based
        self.constructed = 0

    def key_for(self, type_id: Optional[int]) -> int:
        if not self.type_based or type_id is None:
            return UNTYPED
        return type_id

    def _construct(self, key: int) -> ActorHandle:
        actor = self.factory(key)
        self.constructed += 1
        log.debug("allocator: constructed actor for type %d (total %d)", key, self.constructed)
        return ActorHandle(key, actor, self)

    def _check_owner(self, handle: ActorHandle):
        if handle.allocator is not self:
            raise ValueError(f"{handle!r} was not allocated here")

    def acquire(self, type_id: Optional[int] = None) -> ActorHandle:
        raise NotImplementedError

    def release(self, handle: ActorHandle):
        raise NotImplementedError

    def warm_up(self, type_id: Optional[int], count: int) -> int:
        return 0

    def available(self, type_id: Optional[int] = None) -> int:
        return 0

    def shutdown(self):
        pass


class PooledAllocator(Allocator):
    pooled = True

    def __init__(self, factory: Callable[[int], Any], type_based: bool = True):
        super().__init__(factory, type_based)
        self.queues: Dict[int, Deque[ActorHandle]] = {}

    def _queue(self, key: int) -> Deque[ActorHandle]:
        q = self.queues.get(key)
        if q is None:
            q = deque()
            self.queues[key] = q
        return q

    def acquire(self, type_id: Optional[int] = None) -> ActorHandle:
        key = self.key_for(type_id)
        q = self._queue(key)
        if q:
            handle = q.popleft()
        else:
            # underflow is fine, just build one
            handle = self._construct(key)
        handle.active = True
        return handle

    def release(self, handle: ActorHandle):
        self._check_owner(handle)
        if not handle.active:
            return

        handle.active = False
        handle.clear_death_callback()
        reset = getattr(handle.actor, "reset", None)
        if reset is not None:
            reset()
        # handle.type_id is fixed at construction, so it can only go home
        self._queue(handle.type_id).append(handle)

    def warm_up(self, type_id: Optional[int], count: int) -> int:
        key = self.key_for(type_id)
        for _ in range(max(0, count)):
            handle = self._construct(key)
            handle.active = True
            self.release(handle)
        return len(self._queue(key))

    def available(self, type_id: Optional[int] = None) -> int:
        return len(self.queues.get(self.key_for(type_id), ()))

    def shutdown(self):
        for q in self.queues.values():
            for handle in q:
                destroy = getattr(handle.actor, "destroy", None)
                if destroy is not None:
                    destroy()
            q.clear()
        self.queues.clear()


class DirectAllocator(Allocator):
    def acquire(self, type_id: Optional[int] = None) -> ActorHandle:
        handle = self._construct(self.key_for(type_id))
        handle.active = True
        return handle

    def release(self, handle: ActorHandle):
        self._check_owner(handle)
        if not handle.active:
            return

        handle.active = False
        handle.clear_death_callback()
        destroy = getattr(handle.actor, "destroy", None)
        if destroy is not None:
            destroy()


def make_allocator(factory: Callable[[int], Any], pooling: bool = True, type_based: bool = True) -> Allocator:
    if pooling:
        return PooledAllocator(factory, type_based=type_based)
    return DirectAllocator(factory, type_based=type_based)
