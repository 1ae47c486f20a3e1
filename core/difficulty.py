# core/difficulty.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from core.config import RoundTuning
from core.utils import clamp

MIN_FACTOR_FLOOR = 0.05
_MIN_CAP = 0.0001


def soft_capped_bonus(round_index: int, per_round: float, max_bonus: float) -> float:
    """
    Asymptotic per-round bonus:
    value = max_bonus * (1 - e^(-k * round_index)),  k = per_round / max_bonus
    - round_index <= 0 or per_round <= 0 -> 0
    - max_bonus <= 0 -> uncapped linear growth (round_index * per_round)
    - slope near round 0 is ~per_round, never reaches max_bonus
    """
    if round_index <= 0 or per_round <= 0.0:
        return 0.0
    if max_bonus <= 0.0:
        return round_index * per_round
    k = per_round / max(_MIN_CAP, max_bonus)
    bonus = max_bonus * (1.0 - math.exp(-k * round_index))
    # exp() underflows for huge indices; keep the cap exclusive
    return min(bonus, math.nextafter(max_bonus, 0.0))


def soft_capped_factor_down(round_index: int, per_round_reduction: float, min_factor: float) -> float:
    """
    Multiplicative shrink factor in [min_factor, 1], soft-capped the same way
    as soft_capped_bonus against max_reduction = 1 - min_factor.
    """
    min_factor = clamp(min_factor, MIN_FACTOR_FLOOR, 1.0)
    if round_index <= 0 or per_round_reduction <= 0.0:
        return 1.0

    max_reduction = 1.0 - min_factor
    if max_reduction <= 0.0:
        return 1.0

    k = per_round_reduction / max(_MIN_CAP, max_reduction)
    reduction = max_reduction * (1.0 - math.exp(-k * round_index))
    return clamp(1.0 - reduction, min_factor, 1.0)


@dataclass(frozen=True)
class RoundParameters:
    round_number: int
    round_index: int
    total_enemies: int
    health_multiplier: float = 1.0
    speed_multiplier: float = 1.0
    damage_multiplier: float = 1.0
    spawn_interval_multiplier: float = 1.0
    spawns_per_tick: int = 1


def compute_round_parameters(round_number: int, tuning: RoundTuning) -> RoundParameters:
    # curve is 0-based: round 1 gets no bonus
    round_index = max(0, round_number - 1)
    total = tuning.base_enemies_per_round + max(0, round_index * tuning.enemies_per_round_increment)

    health = 1.0 + soft_capped_bonus(round_index, tuning.health_per_round, tuning.max_health_bonus)
    speed = 1.0 + soft_capped_bonus(round_index, tuning.speed_per_round, tuning.max_speed_bonus)
    damage = 1.0 + soft_capped_bonus(round_index, tuning.damage_per_round, tuning.max_damage_bonus)
    interval = soft_capped_factor_down(
        round_index,
        tuning.spawn_interval_reduction_per_round,
        tuning.min_spawn_interval_multiplier,
    )
    extra = soft_capped_bonus(round_index, tuning.extra_spawns_per_round, tuning.max_extra_spawns)

    return RoundParameters(
        round_number=round_number,
        round_index=round_index,
        total_enemies=max(0, total),
        health_multiplier=health,
        speed_multiplier=speed,
        damage_multiplier=damage,
        spawn_interval_multiplier=interval,
        spawns_per_tick=max(1, 1 + int(math.floor(extra))),
    )


def split_quota(total: int, lane_count: int) -> List[int]:
    """
    Even split of total across lanes; the first (total % lane_count) lanes
    get one extra so the quotas always sum to total.
    """
    if lane_count <= 0:
        return []
    total = max(0, total)
    base, remainder = divmod(total, lane_count)
    return [base + (1 if i < remainder else 0) for i in range(lane_count)]
