"""Tests for build_context and GameContext."""
from core.config import GameConfig, PoolTuning, SpawnTuning
from core.context import build_context
from world.pool import UNTYPED, DirectAllocator


class TestBuildContext:
    """Tests for build_context."""

    def test_warm_up_fills_every_type_pool(self):
        ctx = build_context(GameConfig(pool=PoolTuning(warm_up=8)), seed=1)
        for d in ctx.catalog:
            assert ctx.allocator.available(d.type_id) == 8
        assert ctx.allocator.constructed == 8 * len(ctx.catalog)

    def test_untyped_mode_only_spawns_default(self):
        ctx = build_context(GameConfig(spawn=SpawnTuning(type_based=False), pool=PoolTuning(warm_up=3)), seed=1)
        assert ctx.selector.select() is None
        assert ctx.allocator.available(UNTYPED) == 3
        assert ctx.allocator.acquire(2).type_id == UNTYPED

    def test_pooling_disabled_uses_direct_allocation(self):
        ctx = build_context(GameConfig(pool=PoolTuning(enabled=False)), seed=1)
        assert isinstance(ctx.allocator, DirectAllocator)
        assert ctx.allocator.constructed == 0

    def test_shutdown_cancels_pending_calls(self):
        ctx = build_context(GameConfig(pool=PoolTuning(warm_up=2)), seed=1)
        call = ctx.scheduler.call_later(1.0, lambda: None)
        ctx.shutdown()
        assert call.cancelled
        assert ctx.scheduler.pending == 0
        assert all(ctx.allocator.available(d.type_id) == 0 for d in ctx.catalog)

    def test_same_seed_same_type_sequence(self):
        a = build_context(seed=42, warm=False)
        b = build_context(seed=42, warm=False)
        assert [a.selector.select().type_id for _ in range(20)] == [b.selector.select().type_id for _ in range(20)]
