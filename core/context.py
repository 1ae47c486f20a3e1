# core/context.py
"""
Explicit game context.

Everything the round engine shares (config, rng, scheduler, economy,
actor registry, allocator, type selector, tower) hangs off one object that
is built here and handed to each component's constructor. Whoever builds
it owns shutdown().
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from core.config import GameConfig
from core.scheduler import Scheduler
from entities.registry import ActorRegistry, build_enemy_registry
from entities.tower import Tower
from world.economy import Economy
from world.enemy_types import EnemyTypeDefinition, EnemyTypeSelector, load_catalog
from world.pool import UNTYPED, Allocator, make_allocator

log = logging.getLogger(__name__)


@dataclass
class GameContext:
    config: GameConfig
    rng: random.Random
    scheduler: Scheduler
    economy: Economy
    catalog: List[EnemyTypeDefinition]
    registry: ActorRegistry
    allocator: Allocator
    selector: EnemyTypeSelector
    tower: Optional[Tower] = None

    def warm_up(self) -> int:
        """Pre-build pooled actors for every spawnable type (or the untyped pool)."""
        count = self.config.pool.warm_up
        if count <= 0 or not self.allocator.pooled:
            return 0

        keys = [d.type_id for d in self.selector.valid] or [UNTYPED]
        for key in keys:
            self.allocator.warm_up(key, count)
        log.debug("warmed %d actor(s) for %d pool(s)", count * len(keys), len(keys))
        return count * len(keys)

    def shutdown(self):
        self.scheduler.cancel_all()
        self.allocator.shutdown()


def build_context(
    config: Optional[GameConfig] = None,
    seed: Optional[int] = None,
    catalog: Optional[Iterable[EnemyTypeDefinition]] = None,
    registry: Optional[ActorRegistry] = None,
    tower: Optional[Tower] = None,
    warm: bool = True,
) -> GameContext:
    config = config or GameConfig()
    rng = random.Random(seed)

    catalog = list(catalog) if catalog is not None else load_catalog()
    registry = registry or build_enemy_registry(catalog)

    type_based = config.spawn.type_based
    allocator = make_allocator(registry.create, pooling=config.pool.enabled, type_based=type_based)
    has_factory = registry.has if type_based else (lambda type_id: False)
    selector = EnemyTypeSelector(catalog, has_factory, rng)

    ctx = GameContext(
        config=config,
        rng=rng,
        scheduler=Scheduler(),
        economy=Economy(config.economy.starting_money, config.economy.reward_per_kill),
        catalog=catalog,
        registry=registry,
        allocator=allocator,
        selector=selector,
        tower=tower,
    )
    if warm:
        ctx.warm_up()
    return ctx
