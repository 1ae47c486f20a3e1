# world/waves.py
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Set

from core.difficulty import RoundParameters, compute_round_parameters, split_quota
from core.events import Signal, SubscriptionScope
from core.scheduler import ScheduledCall
from world.paths import PathProvider
from world.spawner import ContinuousSpawner, SpawnLane

if TYPE_CHECKING:
    from core.context import GameContext

log = logging.getLogger(__name__)


class RoundState(Enum):
    IDLE = "idle"
    PREP = "prep"
    ACTIVE = "active"
    GAME_OVER = "game_over"


class RoundDirector:
    """
    Round state machine:
        IDLE -> PREP -> ACTIVE -> PREP -> ACTIVE ... -> GAME_OVER (from anywhere)

    - begin_next_round() computes the round's parameters and splits the
      enemy total across the active lanes
    - once every active lane reports completion the next round is queued
      after round_start_delay (only one queued start at a time)
    - game_over() cancels the queued start and stops every lane; repeat calls do nothing

    Notifications: round_changed(round, in_progress), game_started(),
    game_over_triggered(), and the economy's money_changed(total).
    """

    def __init__(self, ctx: "GameContext", paths: PathProvider, lanes: Optional[List[SpawnLane]] = None):
        self.ctx = ctx
        self.paths = paths
        self.lanes: List[SpawnLane] = []

        self.state = RoundState.IDLE
        self.has_started = False
        self.round_in_progress = False
        self.params: Optional[RoundParameters] = None
        self.continuous: Optional[ContinuousSpawner] = None

        self._active_lanes: List[SpawnLane] = []
        self._completed: Set[int] = set()
        self._queued: Optional[ScheduledCall] = None

        self.round_changed = Signal("director.round_changed")
        self.game_started = Signal("director.game_started")
        self.game_over_triggered = Signal("director.game_over")

        self._scope = SubscriptionScope()
        if ctx.tower is not None:
            self._scope.connect(ctx.tower.destroyed, self.game_over)

        ctx.economy.advance_round(max(0, self.starting_round - 1))

        for lane in lanes if lanes is not None else []:
            self._add_lane(lane)
        self.refresh_lanes()

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------
    @property
    def starting_round(self) -> int:
        return self.ctx.config.rounds.starting_round

    @property
    def current_round(self) -> int:
        return self.ctx.economy.round

    @property
    def current_money(self) -> int:
        return self.ctx.economy.money

    @property
    def money_changed(self) -> Signal:
        return self.ctx.economy.money_changed

    @property
    def is_game_over(self) -> bool:
        return self.state == RoundState.GAME_OVER

    @property
    def round_queued(self) -> bool:
        return self._queued is not None and self._queued.pending

    @property
    def active_lanes(self) -> List[SpawnLane]:
        return list(self._active_lanes)

    @property
    def completed_lanes(self) -> int:
        return len(self._completed)

    @property
    def actors(self) -> list:
        out = []
        for lane in self.lanes:
            out.extend(lane.actors)
        return out

    # ------------------------------------------------------------
    # Lanes
    # ------------------------------------------------------------
    def _add_lane(self, lane: SpawnLane):
        self.lanes.append(lane)
        self._scope.connect(lane.round_completed, self._on_lane_complete)
        self._scope.connect(lane.actor_died, self._on_actor_died)

    def refresh_lanes(self):
        """One lane per provider path; new paths get new lanes."""
        for i in range(len(self.lanes), len(self.paths)):
            self._add_lane(SpawnLane(i, self.ctx, self.paths))

    # ------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------
    def begin_game(self):
        if self.has_started or self.is_game_over:
            return

        self.has_started = True
        self.round_in_progress = False
        self._cancel_queued()
        self.state = RoundState.PREP
        log.info("game started at round %d", max(1, self.starting_round))
        self.game_started.emit()

        if self.ctx.config.spawn.continuous:
            self._begin_continuous()
        else:
            self.begin_next_round()

    def begin_next_round(self):
        if not self.has_started or self.is_game_over:
            return
        if self.round_in_progress or self.continuous is not None:
            return

        self.refresh_lanes()
        self._active_lanes = [lane for lane in self.lanes if lane.ready()]
        if not self._active_lanes:
            log.warning("round start skipped: no active lanes")
            return

        round_number = max(1, self.current_round + 1)
        self.ctx.economy.advance_round(round_number)
        self.params = compute_round_parameters(round_number, self.ctx.config.rounds)
        self.round_in_progress = True
        self._cancel_queued()
        self._completed = set()
        self.state = RoundState.ACTIVE

        quotas = split_quota(self.params.total_enemies, len(self._active_lanes))
        log.info("round %d: %d enemies, quotas %s, hp x%.2f, speed x%.2f, dmg x%.2f, %d/tick",
                 round_number, self.params.total_enemies, quotas, self.params.health_multiplier,
                 self.params.speed_multiplier, self.params.damage_multiplier, self.params.spawns_per_tick)
        self.round_changed.emit(round_number, True)

        for lane, quota in zip(self._active_lanes, quotas):
            lane.start_round(self.params, quota)

    def _begin_continuous(self):
        self.refresh_lanes()
        round_number = max(1, self.current_round + 1)
        self.ctx.economy.advance_round(round_number)
        self.params = compute_round_parameters(round_number, self.ctx.config.rounds)
        self.continuous = ContinuousSpawner(self.lanes, self.ctx.config.spawn.spawn_interval, self.params)
        self.round_in_progress = True
        self.state = RoundState.ACTIVE
        log.info("continuous spawning across %d lane(s)", len(self.lanes))
        self.round_changed.emit(round_number, True)

    def on_actor_killed(self):
        self.ctx.economy.reward_kill()

    def try_purchase(self, cost: int) -> bool:
        ok = self.ctx.economy.try_spend(cost)
        if ok:
            log.info("purchase of %d ok, %d left", cost, self.ctx.economy.money)
        return ok

    def game_over(self):
        if self.is_game_over:
            return

        self.state = RoundState.GAME_OVER
        self.ctx.economy.mark_game_over()
        self.round_in_progress = False
        self._cancel_queued()
        self.continuous = None
        self.round_changed.emit(self.current_round, False)

        for lane in self.lanes:
            lane.disable()
        if self.ctx.tower is not None:
            self.ctx.tower.enabled = False

        log.info("game over at round %d", self.current_round)
        self.game_over_triggered.emit()

    # ------------------------------------------------------------
    # Lane callbacks
    # ------------------------------------------------------------
    def _on_lane_complete(self, lane: SpawnLane):
        if self.is_game_over or not self.round_in_progress:
            return
        if lane not in self._active_lanes:
            return

        self._completed.add(lane.index)
        if len(self._completed) < len(self._active_lanes):
            return

        self.round_in_progress = False
        self.state = RoundState.PREP
        log.info("round %d complete", self.current_round)
        self.round_changed.emit(self.current_round, False)

        if not self.round_queued:
            self._queued = self.ctx.scheduler.call_later(
                self.ctx.config.rounds.round_start_delay, self.begin_next_round, name="begin_next_round"
            )

    def _on_actor_died(self, lane: SpawnLane, handle, killed: bool):
        if killed:
            self.on_actor_killed()

    def _cancel_queued(self):
        if self._queued is not None:
            self._queued.cancel()
            self._queued = None

    # ------------------------------------------------------------
    # Tick / teardown
    # ------------------------------------------------------------
    def tick(self, dt: float):
        self.ctx.scheduler.tick(dt)
        if self.is_game_over:
            return

        if self.continuous is not None:
            self.continuous.tick(dt)
            return

        for lane in self._active_lanes:
            lane.tick(dt)

    def shutdown(self):
        self._cancel_queued()
        self._scope.close()
        for lane in self.lanes:
            lane.shutdown()
        self.round_changed.clear()
        self.game_started.clear()
        self.game_over_triggered.clear()
