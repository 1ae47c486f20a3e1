# entities/tower.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import pygame

from core.config import TowerTuning
from core.events import Signal
from core.settings import TOWER_COLOR, TOWER_RADIUS

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpgradeStep:
    label: str = "Upgrade"
    cost: int = 50
    health_multiplier: float = 1.2
    damage_multiplier: float = 1.2


def load_upgrades(raw: Iterable) -> List[UpgradeStep]:
    return [
        UpgradeStep(label=str(label), cost=max(0, int(cost)),
                    health_multiplier=max(0.1, float(hm)), damage_multiplier=max(0.1, float(dm)))
        for label, cost, hm, dm in raw
    ]


class Tower:
    """
    The thing the lanes lead to.
    - destroyed fires once when health reaches zero (wired to game over)
    - update() hit-scans the closest live enemy in range every attack interval
    - upgrades scale max/current health and damage
    """

    def __init__(self, x: float, y: float, tuning: Optional[TowerTuning] = None):
        tuning = tuning or TowerTuning()
        self.pos = pygame.Vector2(x, y)
        self.radius = TOWER_RADIUS

        self.max_health = float(tuning.max_health)
        self.health = self.max_health
        self.attack_range = float(tuning.attack_range)
        self.attack_interval = float(tuning.attack_interval)
        self.damage = float(tuning.damage)
        self.cooldown = 0.0

        self.upgrades = load_upgrades(tuning.upgrades)
        self.upgrade_level = 0

        self.destroyed = Signal("tower.destroyed")
        self.health_changed = Signal("tower.health_changed")
        self.enabled = True

    @property
    def alive(self) -> bool:
        return self.health > 0.0

    def take_damage(self, dmg: float):
        if not self.alive or dmg <= 0.0:
            return
        self.health = max(0.0, self.health - float(dmg))
        self.health_changed.emit(self.health, self.max_health)
        if self.health <= 0.0:
            log.info("tower destroyed")
            self.destroyed.emit()

    # ------------------------------------------------------------
    # Upgrades
    # ------------------------------------------------------------
    def next_upgrade(self) -> Optional[UpgradeStep]:
        if self.upgrade_level >= len(self.upgrades):
            return None
        return self.upgrades[self.upgrade_level]

    def apply_upgrade(self, step: UpgradeStep):
        self.max_health *= step.health_multiplier
        self.health = min(self.max_health, self.health * step.health_multiplier)
        self.damage *= step.damage_multiplier
        self.upgrade_level += 1
        self.health_changed.emit(self.health, self.max_health)
        log.info("tower upgraded: %s (level %d)", step.label, self.upgrade_level)

    # ------------------------------------------------------------
    # Attack
    # ------------------------------------------------------------
    def find_target(self, enemies):
        best = None
        best_d2 = self.attack_range * self.attack_range
        for e in enemies:
            if e.dead or not e.active:
                continue
            d2 = (e.pos - self.pos).length_squared()
            if d2 <= best_d2:
                best_d2 = d2
                best = e
        return best

    def update(self, dt: float, enemies):
        if not self.enabled or not self.alive:
            return

        self.cooldown -= dt
        if self.cooldown > 0.0:
            return

        target = self.find_target(enemies)
        if target is None:
            return
        target.take_damage(self.damage)
        self.cooldown = self.attack_interval

    def draw(self, surf: pygame.Surface):
        cx, cy = int(self.pos.x), int(self.pos.y)
        pygame.draw.circle(surf, (*TOWER_COLOR, 40), (cx, cy), int(self.attack_range), 1)
        pygame.draw.circle(surf, TOWER_COLOR, (cx, cy), self.radius)
        pygame.draw.circle(surf, (20, 20, 26), (cx, cy), self.radius, 2)
