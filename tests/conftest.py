"""Shared fixtures for the round engine tests."""
import pytest

from core.config import GameConfig, PoolTuning
from core.context import build_context
from core.events import Signal
from world.paths import PathProvider
from world.waves import RoundDirector

LANE_PATHS = [
    [(0, 0), (100, 0)],
    [(0, 50), (100, 50)],
    [(0, 100), (100, 100)],
]


class FakeActor:
    """Minimal actor: a died signal plus reset/destroy counters."""

    def __init__(self, type_id):
        self.type_id = type_id
        self.died = Signal("fake.died")
        self.resets = 0
        self.destroyed = 0

    def reset(self):
        self.resets += 1

    def destroy(self):
        self.destroyed += 1


class CountingFactory:
    def __init__(self):
        self.calls = []

    def __call__(self, type_id):
        self.calls.append(type_id)
        return FakeActor(type_id)


@pytest.fixture
def factory():
    return CountingFactory()


@pytest.fixture
def config():
    return GameConfig(pool=PoolTuning(enabled=True, warm_up=0))


@pytest.fixture
def make_ctx(config):
    def _make(cfg=None, seed=7, **kwargs):
        kwargs.setdefault("warm", False)
        return build_context(cfg or config, seed=seed, **kwargs)
    return _make


@pytest.fixture
def make_director(make_ctx):
    def _make(cfg=None, lanes=2, paths=None, **kwargs):
        ctx = make_ctx(cfg, **kwargs)
        provider = PathProvider(paths if paths is not None else LANE_PATHS[:lanes])
        return RoundDirector(ctx, provider)
    return _make


def kill_all(director):
    for actor in director.actors:
        actor.take_damage(1e9)


def play_out_round(director, dt=10.0, max_ticks=100):
    """Tick and kill everything until the current round reports complete."""
    for _ in range(max_ticks):
        director.tick(dt)
        kill_all(director)
        if not director.round_in_progress:
            return
    raise AssertionError("round never completed")
