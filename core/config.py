# core/config.py
"""
Grouped tuning for the round engine.

Defaults come from core.settings so the constants stay the single place to
tweak the game; tests and tools build their own instances instead.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from core import settings


@dataclass
class RoundTuning:
    starting_round: int = settings.STARTING_ROUND
    round_start_delay: float = settings.ROUND_START_DELAY
    base_enemies_per_round: int = settings.BASE_ENEMIES_PER_ROUND
    enemies_per_round_increment: int = settings.ENEMIES_PER_ROUND_INCREMENT

    health_per_round: float = settings.HEALTH_MULTIPLIER_PER_ROUND
    speed_per_round: float = settings.SPEED_MULTIPLIER_PER_ROUND
    damage_per_round: float = settings.DAMAGE_MULTIPLIER_PER_ROUND
    max_health_bonus: float = settings.MAX_HEALTH_BONUS
    max_speed_bonus: float = settings.MAX_SPEED_BONUS
    max_damage_bonus: float = settings.MAX_DAMAGE_BONUS

    spawn_interval_reduction_per_round: float = settings.SPAWN_INTERVAL_REDUCTION_PER_ROUND
    min_spawn_interval_multiplier: float = settings.MIN_SPAWN_INTERVAL_MULTIPLIER
    extra_spawns_per_round: float = settings.EXTRA_SPAWNS_PER_ROUND
    max_extra_spawns: float = settings.MAX_EXTRA_SPAWNS

    def __post_init__(self):
        if self.round_start_delay < 0.0:
            raise ValueError(f"round_start_delay must be >= 0, got {self.round_start_delay}")


@dataclass
class SpawnTuning:
    spawn_interval: float = settings.SPAWN_INTERVAL
    one_per_tick: bool = settings.SPAWN_ONE_PER_TICK
    continuous: bool = settings.SPAWN_CONTINUOUS
    type_based: bool = settings.TYPE_BASED_SPAWNING

    enemy_speed: float = settings.ENEMY_SPEED
    enemy_max_health: float = settings.ENEMY_MAX_HEALTH
    damage_to_tower: float = settings.DAMAGE_TO_TOWER
    defender_attack_range: float = settings.DEFENDER_ATTACK_RANGE
    defender_attack_interval: float = settings.DEFENDER_ATTACK_INTERVAL
    damage_to_defender: float = settings.DAMAGE_TO_DEFENDER

    def __post_init__(self):
        if self.spawn_interval <= 0.0:
            raise ValueError(f"spawn_interval must be > 0, got {self.spawn_interval}")
        if self.enemy_max_health <= 0.0:
            raise ValueError(f"enemy_max_health must be > 0, got {self.enemy_max_health}")


@dataclass
class PoolTuning:
    enabled: bool = settings.POOLING_ENABLED
    warm_up: int = settings.POOL_WARM_UP

    def __post_init__(self):
        if self.warm_up < 0:
            raise ValueError(f"warm_up must be >= 0, got {self.warm_up}")


@dataclass
class EconomyTuning:
    starting_money: int = settings.STARTING_MONEY
    reward_per_kill: int = settings.REWARD_PER_KILL

    def __post_init__(self):
        if self.starting_money < 0:
            raise ValueError(f"starting_money must be >= 0, got {self.starting_money}")
        if self.reward_per_kill < 0:
            raise ValueError(f"reward_per_kill must be >= 0, got {self.reward_per_kill}")


@dataclass
class TowerTuning:
    max_health: float = settings.TOWER_MAX_HEALTH
    attack_range: float = settings.TOWER_RANGE
    attack_interval: float = settings.TOWER_ATTACK_INTERVAL
    damage: float = settings.TOWER_DAMAGE
    upgrades: List[Tuple[str, int, float, float]] = field(
        default_factory=lambda: list(settings.TOWER_UPGRADES)
    )

    def __post_init__(self):
        if self.max_health <= 0.0:
            raise ValueError(f"tower max_health must be > 0, got {self.max_health}")


@dataclass
class GameConfig:
    rounds: RoundTuning = field(default_factory=RoundTuning)
    spawn: SpawnTuning = field(default_factory=SpawnTuning)
    pool: PoolTuning = field(default_factory=PoolTuning)
    economy: EconomyTuning = field(default_factory=EconomyTuning)
    tower: TowerTuning = field(default_factory=TowerTuning)
    start_on_launch: bool = False
