# entities/enemy.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import pygame

from core.events import Signal
from core.settings import ENEMY_COLOR, ENEMY_RADIUS
from world.enemy_types import AttackPriority, EnrageParams
from world.pool import UNTYPED

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnemyConfig:
    """Effective stats for one spawned enemy (round scaling x type multipliers)."""
    max_health: float
    speed: float
    tower_damage: float
    defender_damage: float
    attack_range: float
    attack_interval: float
    attack_priority: AttackPriority = AttackPriority.TOWER_FIRST
    damage_taken_multiplier: float = 1.0
    enrage: EnrageParams = field(default_factory=EnrageParams)
    color: Tuple[int, int, int] = ENEMY_COLOR


class Enemy:
    """
    Path walker:
    - Follows its waypoint list at config speed
    - At the end of the path it hits the tower every attack interval
    - Enrages once when health drops to the trigger fraction
    - died(enemy, killed) fires exactly once per life; killed=False for despawns

    Instances are reused by the pool: initialize() starts a new life,
    reset() wipes the old one.
    """

    def __init__(self, type_id: int = UNTYPED, radius: int = ENEMY_RADIUS):
        self.type_id = type_id
        self.radius = radius
        self.died = Signal("enemy.died")

        self.pos = pygame.Vector2(0, 0)
        self.path: List[pygame.Vector2] = []
        self.path_index = 0
        self.config: Optional[EnemyConfig] = None
        self.tower = None

        self.max_health = 1.0
        self.health = 1.0
        self.dead = False
        self.active = False
        self.enraged = False
        self.reached_end = False
        self.attack_cd = 0.0
        self.lives = 0

    # ------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------
    def initialize(self, path: Sequence, config: EnemyConfig, tower=None):
        if not path:
            raise ValueError("enemy path must contain at least one waypoint")

        self.path = [pygame.Vector2(p) for p in path]
        self.pos = pygame.Vector2(self.path[0])
        self.path_index = 1
        self.config = config
        self.tower = tower

        self.max_health = config.max_health
        self.health = config.max_health
        self.dead = False
        self.active = True
        self.enraged = False
        self.reached_end = len(self.path) <= 1
        self.attack_cd = 0.0
        self.lives += 1

    def reset(self):
        self.active = False
        self.dead = False
        self.enraged = False
        self.reached_end = False
        self.path = []
        self.path_index = 0
        self.tower = None
        self.attack_cd = 0.0

    def destroy(self):
        self.reset()
        self.died.clear()
        self.config = None

    def despawn(self):
        """Remove without a kill (lane reset, shutdown)."""
        if self.dead or not self.active:
            return
        self.dead = True
        self.died.emit(self, False)

    # ------------------------------------------------------------
    # Stats (enrage aware)
    # ------------------------------------------------------------
    @property
    def speed(self) -> float:
        if self.config is None:
            return 0.0
        bonus = self.config.enrage.speed_bonus if self.enraged else 0.0
        return self.config.speed * (1.0 + bonus)

    @property
    def tower_damage(self) -> float:
        if self.config is None:
            return 0.0
        bonus = self.config.enrage.damage_bonus if self.enraged else 0.0
        return self.config.tower_damage * (1.0 + bonus)

    @property
    def attack_interval(self) -> float:
        if self.config is None:
            return 0.0
        mult = self.config.enrage.interval_multiplier if self.enraged else 1.0
        return self.config.attack_interval * mult

    @property
    def health_fraction(self) -> float:
        return max(0.0, min(1.0, self.health / self.max_health)) if self.max_health > 0 else 0.0

    # ------------------------------------------------------------
    # Damage
    # ------------------------------------------------------------
    def take_damage(self, dmg: float) -> float:
        if self.dead or not self.active or dmg <= 0.0:
            return 0.0

        applied = float(dmg) * self.config.damage_taken_multiplier
        self.health -= applied

        if self.health <= 0.0:
            self.health = 0.0
            self.dead = True
            self.died.emit(self, True)
            return applied

        enrage = self.config.enrage
        if enrage.enabled and not self.enraged and self.health_fraction <= enrage.trigger_fraction:
            self.enraged = True
            log.debug("enemy type %d enraged at %.2f health", self.type_id, self.health_fraction)
        return applied

    # ------------------------------------------------------------
    # Update
    # ------------------------------------------------------------
    def update(self, dt: float):
        if self.dead or not self.active:
            return

        if not self.reached_end:
            self._advance(self.speed * dt)
            return

        self.attack_cd -= dt
        if self.attack_cd > 0.0:
            return
        if self.tower is not None and self.tower.alive:
            self.tower.take_damage(self.tower_damage)
        self.attack_cd = self.attack_interval

    def _advance(self, step: float):
        while step > 0.0 and self.path_index < len(self.path):
            target = self.path[self.path_index]
            d = target - self.pos
            dist = d.length()
            if dist <= step:
                self.pos.update(target)
                step -= dist
                self.path_index += 1
            else:
                self.pos += d * (step / dist)
                step = 0.0

        if self.path_index >= len(self.path):
            self.reached_end = True

    # ------------------------------------------------------------
    # Geometry / Draw
    # ------------------------------------------------------------
    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(
            int(self.pos.x - self.radius),
            int(self.pos.y - self.radius),
            self.radius * 2,
            self.radius * 2
        )

    def draw(self, surf: pygame.Surface):
        if self.dead or not self.active:
            return

        cx, cy = int(self.pos.x), int(self.pos.y)
        color = self.config.color if self.config else ENEMY_COLOR
        pygame.draw.circle(surf, color, (cx, cy), self.radius)
        if self.enraged:
            pygame.draw.circle(surf, (255, 240, 120), (cx, cy), self.radius + 2, 2)
