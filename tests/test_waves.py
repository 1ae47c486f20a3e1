"""Tests for the round director state machine."""
from core.config import EconomyTuning, GameConfig, PoolTuning, RoundTuning, SpawnTuning, TowerTuning
from entities.tower import Tower
from world.paths import PathProvider
from world.waves import RoundDirector, RoundState

from conftest import LANE_PATHS, kill_all, play_out_round


def _record(signal):
    seen = []
    signal.connect(lambda *args: seen.append(args))
    return seen


def _config(**kwargs):
    kwargs.setdefault("pool", PoolTuning(warm_up=0))
    return GameConfig(**kwargs)


class LatePathProvider(PathProvider):
    """Holds its paths back until ready is set, without a changed() emit."""

    def __init__(self, paths):
        super().__init__(paths)
        self.ready = False

    def path_for(self, index):
        if not self.ready:
            return None
        return super().path_for(index)


class TestBeginGame:
    """Tests for starting the game."""

    def test_idle_before_start(self, make_director):
        d = make_director()
        assert d.state is RoundState.IDLE
        assert d.current_round == 0
        assert not d.has_started

    def test_begin_game_starts_round_one(self, make_director):
        d = make_director()
        started = _record(d.game_started)
        rounds = _record(d.round_changed)

        d.begin_game()

        assert d.state is RoundState.ACTIVE
        assert d.current_round == 1
        assert d.round_in_progress
        assert started == [()]
        assert rounds == [(1, True)]

    def test_duplicate_begin_game_is_noop(self, make_director):
        d = make_director()
        started = _record(d.game_started)
        d.begin_game()
        d.begin_game()
        assert started == [()]
        assert d.current_round == 1

    def test_starting_round_offset(self, make_director):
        d = make_director(_config(rounds=RoundTuning(starting_round=4)))
        assert d.current_round == 3
        d.begin_game()
        assert d.current_round == 4
        assert d.params.round_index == 3

    def test_no_active_lanes_stays_in_prep(self, make_director):
        d = make_director(paths=[[]])
        d.begin_game()
        assert d.has_started
        assert d.state is RoundState.PREP
        assert d.current_round == 0
        assert not d.round_in_progress


class TestRoundFlow:
    """Tests for quotas, completion and advancing rounds."""

    def test_quotas_sum_to_total(self, make_director):
        d = make_director(lanes=2)
        d.begin_game()
        assert d.params.total_enemies == 3
        assert [lane.quota for lane in d.active_lanes] == [2, 1]

    def test_quotas_sum_every_round(self, make_director):
        d = make_director(lanes=3)
        d.begin_game()
        for _ in range(5):
            assert sum(lane.quota for lane in d.active_lanes) == d.params.total_enemies
            play_out_round(d)
            d.tick(d.ctx.config.rounds.round_start_delay)

    def test_no_reentry_while_active(self, make_director):
        d = make_director()
        d.begin_game()
        quotas = [lane.quota for lane in d.lanes]
        d.begin_next_round()
        assert d.current_round == 1
        assert [lane.quota for lane in d.lanes] == quotas

    def test_round_completes_when_all_lanes_clear(self, make_director):
        d = make_director(lanes=2)
        rounds = _record(d.round_changed)
        d.begin_game()

        d.tick(0.0)
        kill_all(d)
        # lane 1 (quota 1) is done, lane 0 still owes one spawn
        assert d.round_in_progress
        assert d.completed_lanes == 1

        d.tick(2.0)
        kill_all(d)
        assert not d.round_in_progress
        assert d.state is RoundState.PREP
        assert rounds[-1] == (1, False)
        assert d.round_queued

    def test_next_round_after_delay(self, make_director):
        d = make_director()
        d.begin_game()
        play_out_round(d)

        d.tick(1.0)
        assert d.current_round == 1
        assert d.state is RoundState.PREP
        d.tick(1.0)
        assert d.current_round == 2
        assert d.state is RoundState.ACTIVE

    def test_enemy_totals_by_round(self, make_director):
        cfg = _config(rounds=RoundTuning(starting_round=1, base_enemies_per_round=3, enemies_per_round_increment=2))
        d = make_director(cfg)
        d.begin_game()
        assert d.params.total_enemies == 3

        for _ in range(2):
            play_out_round(d)
            d.tick(cfg.rounds.round_start_delay)

        assert d.current_round == 3
        assert d.params.total_enemies == 7
        assert sum(lane.quota for lane in d.active_lanes) == 7

    def test_duplicate_completion_queues_once(self, make_director):
        d = make_director()
        d.begin_game()
        play_out_round(d)
        assert d.ctx.scheduler.pending == 1

        for lane in d.lanes:
            lane.round_completed.emit(lane)
        assert d.ctx.scheduler.pending == 1

    def test_kills_pay_out(self, make_director):
        d = make_director(_config(economy=EconomyTuning(starting_money=200, reward_per_kill=50)))
        money = _record(d.money_changed)
        d.begin_game()
        play_out_round(d)
        assert d.current_money == 350
        assert money[-1] == (350,)

    def test_zero_enemy_round_still_advances(self, make_director):
        d = make_director(_config(rounds=RoundTuning(base_enemies_per_round=0, enemies_per_round_increment=0)))
        d.begin_game()
        assert not d.round_in_progress
        assert d.round_queued
        d.tick(d.ctx.config.rounds.round_start_delay)
        assert d.current_round == 2

    def test_new_paths_get_lanes_next_round(self, make_director):
        d = make_director(lanes=1)
        d.begin_game()
        play_out_round(d)
        d.paths.set_paths([[(0, 0), (10, 0)], [(0, 20), (10, 20)]])
        d.tick(d.ctx.config.rounds.round_start_delay)
        assert len(d.active_lanes) == 2
        assert sum(lane.quota for lane in d.active_lanes) == d.params.total_enemies

    def test_manual_start_replaces_queued_start(self, make_director):
        cfg = _config(rounds=RoundTuning(base_enemies_per_round=0, enemies_per_round_increment=0,
                                         round_start_delay=2.0))
        d = make_director(cfg)
        d.begin_game()
        assert d.round_queued

        d.tick(0.5)
        d.begin_next_round()
        assert d.current_round == 2
        assert d.ctx.scheduler.pending == 1

        d.tick(1.5)
        assert d.current_round == 2
        d.tick(0.5)
        assert d.current_round == 3

    def test_late_path_data_picked_up_at_round_start(self, make_ctx):
        provider = LatePathProvider(LANE_PATHS[:1])
        d = RoundDirector(make_ctx(), provider)
        d.begin_game()
        assert d.state is RoundState.PREP
        assert d.current_round == 0

        provider.ready = True
        d.begin_next_round()
        assert d.current_round == 1
        assert d.round_in_progress
        assert d.lanes[0].path is not None


class TestGameOver:
    """Tests for the terminal state."""

    def test_game_over_is_terminal(self, make_director):
        d = make_director()
        over = _record(d.game_over_triggered)
        rounds = _record(d.round_changed)
        d.begin_game()

        d.game_over()
        d.game_over()

        assert d.is_game_over
        assert d.state is RoundState.GAME_OVER
        assert over == [()]
        assert rounds[-1] == (1, False)
        assert all(not lane.enabled for lane in d.lanes)

        d.begin_next_round()
        d.begin_game()
        assert d.current_round == 1
        assert d.state is RoundState.GAME_OVER

    def test_no_spawns_after_game_over(self, make_director):
        d = make_director()
        d.begin_game()
        d.game_over()
        d.tick(10.0)
        assert sum(lane.spawned for lane in d.lanes) == 0

    def test_cancels_queued_round(self, make_director):
        d = make_director()
        d.begin_game()
        play_out_round(d)
        assert d.round_queued

        d.game_over()
        assert not d.round_queued
        d.tick(10.0)
        assert d.current_round == 1

    def test_game_over_before_start(self, make_director):
        d = make_director()
        d.game_over()
        d.begin_game()
        assert not d.has_started
        assert d.is_game_over

    def test_tower_destroyed_ends_game(self, make_ctx):
        tower = Tower(100, 0, TowerTuning(max_health=3.0))
        d = RoundDirector(make_ctx(tower=tower), PathProvider(LANE_PATHS[:1]))
        d.begin_game()
        tower.take_damage(5.0)
        assert d.is_game_over
        assert not tower.enabled

    def test_rewards_stop_after_game_over(self, make_director):
        d = make_director()
        d.begin_game()
        d.tick(0.0)
        money = d.current_money
        d.game_over()
        kill_all(d)
        assert d.current_money == money


class TestPurchases:
    """Tests for purchase gating."""

    def test_try_purchase(self, make_director):
        d = make_director(_config(economy=EconomyTuning(starting_money=100)))
        money = _record(d.money_changed)

        assert d.try_purchase(150) is False
        assert d.current_money == 100
        assert money == []

        assert d.try_purchase(40) is True
        assert d.current_money == 60
        assert money == [(60,)]


class TestContinuousMode:
    """Tests for the round-less round-robin mode."""

    def test_spawns_round_robin_without_rounds(self, make_director):
        d = make_director(_config(spawn=SpawnTuning(continuous=True, spawn_interval=1.0)), lanes=2)
        d.begin_game()
        assert d.state is RoundState.ACTIVE
        assert d.continuous is not None

        for _ in range(5):
            d.tick(1.0)
        assert [lane.alive for lane in d.lanes] == [3, 2]

        kill_all(d)
        assert d.round_in_progress
        assert d.ctx.scheduler.pending == 0


class TestShutdown:
    """Tests for teardown."""

    def test_shutdown_releases_actors_without_reward(self, make_director):
        d = make_director()
        d.begin_game()
        d.tick(0.0)
        money = d.current_money
        d.shutdown()
        assert d.actors == []
        assert d.current_money == money
        assert len(d.round_changed) == 0
