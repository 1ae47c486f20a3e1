# world/enemy_types.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from core.utils import clamp
from world.enemy_defs import ENEMY_TYPES

log = logging.getLogger(__name__)

DEFAULT_COLOR = (255, 77, 77)


class AttackPriority(Enum):
    TOWER_FIRST = "tower_first"
    DEFENDER_FIRST = "defender_first"


def _positive_or_one(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 1.0
    return v if v > 0.0 else 1.0


def _optional_positive(value) -> Optional[float]:
    if value is None:
        return None
    v = float(value)
    return v if v > 0.0 else None


@dataclass(frozen=True)
class EnrageParams:
    trigger_fraction: float = 0.0     # health fraction at/below which enrage kicks in; 0 = never
    speed_bonus: float = 0.0
    damage_bonus: float = 0.0
    interval_multiplier: float = 1.0

    @property
    def enabled(self) -> bool:
        return self.trigger_fraction > 0.0

    @classmethod
    def from_dict(cls, raw: Optional[Dict]) -> "EnrageParams":
        if not raw:
            return cls()
        return cls(
            trigger_fraction=clamp(float(raw.get("trigger", 0.0)), 0.0, 1.0),
            speed_bonus=max(0.0, float(raw.get("speed", 0.0))),
            damage_bonus=max(0.0, float(raw.get("damage", 0.0))),
            interval_multiplier=_positive_or_one(raw.get("interval", 1.0)),
        )


@dataclass(frozen=True)
class EnemyTypeDefinition:
    type_id: int
    name: str = ""
    spawn_weight: float = 1.0
    speed_multiplier: float = 1.0
    health_multiplier: float = 1.0
    tower_damage_multiplier: float = 1.0
    defender_damage_multiplier: float = 1.0
    attack_range: Optional[float] = None
    attack_interval: Optional[float] = None
    attack_priority: AttackPriority = AttackPriority.TOWER_FIRST
    damage_taken_multiplier: float = 1.0
    enrage: EnrageParams = field(default_factory=EnrageParams)
    color: Tuple[int, int, int] = DEFAULT_COLOR

    @property
    def overrides_attack_range(self) -> bool:
        return self.attack_range is not None

    @property
    def overrides_attack_interval(self) -> bool:
        return self.attack_interval is not None

    @classmethod
    def from_dict(cls, raw: Dict) -> "EnemyTypeDefinition":
        type_id = int(raw["id"])
        if type_id < 0:
            raise ValueError(f"enemy type id must be >= 0, got {type_id}")

        taken = _positive_or_one(raw.get("damage_taken", 1.0))
        return cls(
            type_id=type_id,
            name=str(raw.get("name", f"type-{type_id}")),
            spawn_weight=float(raw.get("weight", 1.0)),
            speed_multiplier=_positive_or_one(raw.get("speed", 1.0)),
            health_multiplier=_positive_or_one(raw.get("health", 1.0)),
            tower_damage_multiplier=_positive_or_one(raw.get("tower_damage", 1.0)),
            defender_damage_multiplier=_positive_or_one(raw.get("defender_damage", 1.0)),
            attack_range=_optional_positive(raw.get("attack_range")),
            attack_interval=_optional_positive(raw.get("attack_interval")),
            attack_priority=AttackPriority(raw.get("priority", AttackPriority.TOWER_FIRST.value)),
            damage_taken_multiplier=min(1.0, taken),
            enrage=EnrageParams.from_dict(raw.get("enrage")),
            color=tuple(raw.get("color", DEFAULT_COLOR)),
        )


def load_catalog(raw: Iterable[Dict] = ENEMY_TYPES) -> List[EnemyTypeDefinition]:
    catalog = [EnemyTypeDefinition.from_dict(r) for r in raw]
    seen = set()
    for d in catalog:
        if d.type_id in seen:
            raise ValueError(f"duplicate enemy type id {d.type_id}")
        seen.add(d.type_id)
    return catalog


class EnemyTypeSelector:
    """
    Weighted random pick over the catalog.
    - Only entries with weight > 0 and a registered factory take part (the valid set)
    - Empty valid set -> select() returns None (caller spawns untyped)
    - Walks the valid set in catalog order, so reordering other entries
      doesn't change who wins a given draw
    """

    def __init__(
        self,
        catalog: Iterable[EnemyTypeDefinition],
        has_factory: Callable[[int], bool],
        rng: Optional[random.Random] = None,
    ):
        self.catalog = list(catalog)
        self.has_factory = has_factory
        self.rng = rng or random.Random()
        self.valid: List[EnemyTypeDefinition] = []
        self.total_weight = 0.0
        self.refresh()

    def refresh(self):
        self.valid = [d for d in self.catalog if d.spawn_weight > 0.0 and self.has_factory(d.type_id)]
        self.total_weight = sum(d.spawn_weight for d in self.valid)
        if not self.valid:
            log.info("enemy catalog has no spawnable types; spawning untyped")

    def get(self, type_id: int) -> Optional[EnemyTypeDefinition]:
        for d in self.catalog:
            if d.type_id == type_id:
                return d
        return None

    def select(self) -> Optional[EnemyTypeDefinition]:
        if not self.valid or self.total_weight <= 0.0:
            return None

        draw = self.rng.random() * self.total_weight
        running = 0.0
        for d in self.valid:
            running += d.spawn_weight
            if running >= draw:
                return d

        # float drift pushed draw past the last cumulative total
        return self.valid[-1]
