# entities/registry.py
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from entities.enemy import Enemy
from world.enemy_types import EnemyTypeDefinition
from world.pool import UNTYPED

ActorFactory = Callable[[int], Any]


class ActorRegistry:
    """
    Type id -> factory table, filled once at startup.
    Untyped ids (and ids without their own entry) go to the default factory.
    """

    def __init__(self, default_factory: Optional[ActorFactory] = None):
        self.default_factory = default_factory
        self._factories: Dict[int, ActorFactory] = {}

    def register(self, type_id: int, factory: ActorFactory):
        if type_id == UNTYPED:
            self.default_factory = factory
            return
        self._factories[type_id] = factory

    def unregister(self, type_id: int):
        self._factories.pop(type_id, None)

    def has(self, type_id: int) -> bool:
        return type_id in self._factories

    @property
    def type_ids(self) -> List[int]:
        return sorted(self._factories)

    def create(self, type_id: int = UNTYPED) -> Any:
        factory = self._factories.get(type_id, self.default_factory)
        if factory is None:
            raise KeyError(f"no actor factory for type {type_id}")
        return factory(type_id)

    __call__ = create


def build_enemy_registry(catalog: Iterable[EnemyTypeDefinition]) -> ActorRegistry:
    registry = ActorRegistry(default_factory=lambda type_id: Enemy(UNTYPED))
    for d in catalog:
        registry.register(d.type_id, lambda type_id: Enemy(type_id))
    return registry
