# world/spawner.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from core.config import SpawnTuning
from core.difficulty import RoundParameters
from core.events import Signal, SubscriptionScope
from core.utils import clamp_int
from entities.enemy import EnemyConfig
from world.enemy_types import EnemyTypeDefinition
from world.paths import PathProvider
from world.pool import UNTYPED, ActorHandle

if TYPE_CHECKING:
    from core.context import GameContext

log = logging.getLogger(__name__)

_BASE_ROUND = RoundParameters(round_number=1, round_index=0, total_enemies=0)


def build_enemy_config(
    definition: Optional[EnemyTypeDefinition],
    params: RoundParameters,
    spawn: SpawnTuning,
) -> EnemyConfig:
    """Round stats x type multipliers; range/interval overrides only if the type sets them."""
    if definition is None:
        return EnemyConfig(
            max_health=spawn.enemy_max_health * params.health_multiplier,
            speed=spawn.enemy_speed * params.speed_multiplier,
            tower_damage=spawn.damage_to_tower * params.damage_multiplier,
            defender_damage=spawn.damage_to_defender * params.damage_multiplier,
            attack_range=spawn.defender_attack_range,
            attack_interval=spawn.defender_attack_interval,
        )

    return EnemyConfig(
        max_health=spawn.enemy_max_health * params.health_multiplier * definition.health_multiplier,
        speed=spawn.enemy_speed * params.speed_multiplier * definition.speed_multiplier,
        tower_damage=spawn.damage_to_tower * params.damage_multiplier * definition.tower_damage_multiplier,
        defender_damage=spawn.damage_to_defender * params.damage_multiplier * definition.defender_damage_multiplier,
        attack_range=definition.attack_range if definition.overrides_attack_range else spawn.defender_attack_range,
        attack_interval=(
            definition.attack_interval if definition.overrides_attack_interval else spawn.defender_attack_interval
        ),
        attack_priority=definition.attack_priority,
        damage_taken_multiplier=definition.damage_taken_multiplier,
        enrage=definition.enrage,
        color=definition.color,
    )


class SpawnLane:
    """
    One path, one quota per round.
    - tick() spawns on its own interval: 1 per interval in one-per-tick mode,
      spawns_per_tick in burst mode, always capped by what's left of the quota
    - every spawned actor gets a death callback that drops alive and returns
      the handle to the allocator
    - round_completed fires once per round, when spawned == quota and alive == 0
    - a topology change zeroes the counters and despawns what's on the lane
    """

    def __init__(self, index: int, ctx: "GameContext", paths: PathProvider):
        self.index = index
        self.ctx = ctx
        self.paths = paths

        self.path = paths.path_for(index)
        self.enabled = True

        self.quota = 0
        self.spawned = 0
        self.alive = 0
        self.params: Optional[RoundParameters] = None
        self.round_active = False
        self._completion_reported = False
        self.timer = 0.0
        self.handles: List[ActorHandle] = []

        self.round_completed = Signal(f"lane{index}.round_completed")
        self.actor_spawned = Signal(f"lane{index}.actor_spawned")
        self.actor_died = Signal(f"lane{index}.actor_died")

        self._scope = SubscriptionScope()
        self._scope.connect(paths.changed, self._on_topology_changed)

        if self.path is None:
            log.warning("lane %d: no path data, spawning disabled", index)

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------
    @property
    def has_path(self) -> bool:
        return self.path is not None

    @property
    def active(self) -> bool:
        return self.enabled and self.has_path

    @property
    def remaining(self) -> int:
        return self.quota - self.spawned

    @property
    def complete(self) -> bool:
        return self.spawned == self.quota and self.alive == 0

    @property
    def actors(self) -> list:
        return [h.actor for h in self.handles]

    @property
    def spawn_interval(self) -> float:
        mult = self.params.spawn_interval_multiplier if self.params else 1.0
        return self.ctx.config.spawn.spawn_interval * mult

    def ensure_path(self) -> bool:
        if self.path is not None:
            return True
        # cached path is gone; ask once more before giving up
        self.path = self.paths.path_for(self.index)
        if self.path is None:
            log.debug("lane %d: path still unavailable", self.index)
            return False
        return True

    def ready(self) -> bool:
        """Enabled and holding a path, re-querying the provider if the cache is empty."""
        return self.enabled and self.ensure_path()

    def disable(self):
        self.enabled = False

    # ------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------
    def start_round(self, params: RoundParameters, quota: int):
        self.params = params
        self.quota = max(0, int(quota))
        self.spawned = 0
        self.round_active = True
        self._completion_reported = False
        # first spawn goes out on the first tick
        self.timer = self.spawn_interval
        log.debug("lane %d: round %d quota %d", self.index, params.round_number, self.quota)
        self._check_complete()

    def tick(self, dt: float) -> int:
        if not self.round_active or not self.ready():
            return 0
        if self.remaining <= 0:
            return 0

        self.timer += dt
        if self.timer < self.spawn_interval:
            return 0
        self.timer = 0.0

        budget = 1 if self.ctx.config.spawn.one_per_tick else self.params.spawns_per_tick
        return self.spawn_batch(budget)

    def spawn_batch(self, count: int) -> int:
        n = 0
        for _ in range(max(0, min(count, self.remaining))):
            if self.spawn_one() is None:
                break
            n += 1
        return n

    def spawn_one(self, enforce_quota: bool = True, params: Optional[RoundParameters] = None) -> Optional[ActorHandle]:
        if not self.enabled or not self.ensure_path():
            return None
        if enforce_quota and self.remaining <= 0:
            return None

        params = params or self.params or _BASE_ROUND
        definition = self.ctx.selector.select()
        type_id = definition.type_id if definition is not None else UNTYPED

        handle = self.ctx.allocator.acquire(type_id)
        config = build_enemy_config(definition, params, self.ctx.config.spawn)
        handle.actor.initialize(self.path, config, self.ctx.tower)

        self.spawned += 1
        self.alive += 1
        self.handles.append(handle)
        handle.on_death(lambda actor, killed, h=handle: self._on_actor_died(h, killed))

        log.debug("lane %d: spawned type %d (%d/%d, %d alive)",
                  self.index, handle.type_id, self.spawned, self.quota, self.alive)
        self.actor_spawned.emit(self, handle)
        return handle

    def _on_actor_died(self, handle: ActorHandle, killed: bool):
        if handle not in self.handles:
            return
        self.handles.remove(handle)
        self.alive = max(0, self.alive - 1)

        self.actor_died.emit(self, handle, killed)
        self.ctx.allocator.release(handle)
        self._check_complete()

    def _check_complete(self):
        if not self.round_active or self._completion_reported:
            return
        if self.spawned < self.quota or self.alive > 0:
            return
        self._completion_reported = True
        self.round_active = False
        log.debug("lane %d: round complete", self.index)
        self.round_completed.emit(self)

    # ------------------------------------------------------------
    # Topology / teardown
    # ------------------------------------------------------------
    def despawn_all(self):
        for handle in list(self.handles):
            handle.actor.despawn()
        # anything that didn't report back still goes home
        for handle in list(self.handles):
            self._on_actor_died(handle, False)

    def _on_topology_changed(self, version: int):
        was_active = self.round_active

        self.despawn_all()
        self.quota = 0
        self.spawned = 0
        self.alive = 0
        self.timer = 0.0
        self.path = self.paths.path_for(self.index)
        if self.path is None:
            log.warning("lane %d: no path after topology change, spawning disabled", self.index)

        if was_active:
            # counters are 0/0 now, so the lane counts as done for this round
            self._check_complete()

    def shutdown(self):
        self._scope.close()
        self.round_active = False
        self.despawn_all()
        self.round_completed.clear()
        self.actor_spawned.clear()
        self.actor_died.clear()


class ContinuousSpawner:
    """Round-robin mode: one spawn per interval, cursor cycling over the active lanes."""

    def __init__(self, lanes: List[SpawnLane], interval: float, params: RoundParameters):
        self.lanes = lanes
        self.interval = interval
        self.params = params
        self.cursor = 0
        self.timer = 0.0

    def tick(self, dt: float) -> Optional[ActorHandle]:
        self.timer += dt
        if self.timer < self.interval:
            return None
        self.timer = 0.0

        active = [lane for lane in self.lanes if lane.ready()]
        if not active:
            return None

        self.cursor = clamp_int(self.cursor, 0, len(active) - 1)
        lane = active[self.cursor]
        self.cursor = (self.cursor + 1) % len(active)
        return lane.spawn_one(enforce_quota=False, params=self.params)
