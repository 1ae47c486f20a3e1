"""Tests for the enemy runtime and the tower."""
import pytest

from core.config import TowerTuning
from entities.enemy import Enemy, EnemyConfig
from entities.registry import ActorRegistry, build_enemy_registry
from entities.tower import Tower, UpgradeStep
from world.enemy_types import EnrageParams, load_catalog
from world.pool import UNTYPED

PATH = [(0, 0), (100, 0)]


def _config(**overrides):
    base = dict(max_health=10.0, speed=50.0, tower_damage=2.0, defender_damage=1.0,
                attack_range=30.0, attack_interval=1.0)
    base.update(overrides)
    return EnemyConfig(**base)


@pytest.fixture
def tower():
    return Tower(100, 0, TowerTuning(max_health=10.0, attack_range=40.0, attack_interval=0.5, damage=3.0))


class TestEnemyMovement:
    """Tests for path following and tower attacks."""

    def test_initialize_places_on_first_waypoint(self):
        e = Enemy(0)
        e.initialize(PATH, _config())
        assert (e.pos.x, e.pos.y) == (0, 0)
        assert e.active and not e.dead
        assert e.health == 10.0

    def test_walks_path(self):
        e = Enemy(0)
        e.initialize([(0, 0), (50, 0), (50, 50)], _config())
        e.update(1.0)
        assert e.pos.x == pytest.approx(50)
        assert not e.reached_end
        e.update(0.5)
        assert e.pos.y == pytest.approx(25)
        e.update(5.0)
        assert e.reached_end
        assert (e.pos.x, e.pos.y) == (50, 50)

    def test_attacks_tower_at_interval(self, tower):
        e = Enemy(0)
        e.initialize(PATH, _config(), tower)
        e.update(2.0)
        assert e.reached_end

        e.update(0.0)
        assert tower.health == 8.0
        e.update(0.5)
        assert tower.health == 8.0
        e.update(0.5)
        assert tower.health == 6.0

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            Enemy(0).initialize([], _config())


class TestEnemyDamage:
    """Tests for damage, death and enrage."""

    def test_damage_taken_multiplier(self):
        e = Enemy(0)
        e.initialize(PATH, _config(damage_taken_multiplier=0.5))
        assert e.take_damage(4.0) == 2.0
        assert e.health == 8.0

    def test_died_fires_once_as_kill(self):
        e = Enemy(0)
        e.initialize(PATH, _config())
        deaths = []
        e.died.connect(lambda actor, killed: deaths.append((actor, killed)))
        e.take_damage(100)
        e.take_damage(100)
        assert deaths == [(e, True)]
        assert e.dead

    def test_despawn_is_not_a_kill(self):
        e = Enemy(0)
        e.initialize(PATH, _config())
        deaths = []
        e.died.connect(lambda actor, killed: deaths.append(killed))
        e.despawn()
        e.despawn()
        assert deaths == [False]

    def test_enrage(self):
        enrage = EnrageParams(trigger_fraction=0.5, speed_bonus=1.0, damage_bonus=0.5, interval_multiplier=0.5)
        e = Enemy(2)
        e.initialize(PATH, _config(enrage=enrage))
        e.take_damage(4)
        assert not e.enraged
        e.take_damage(2)
        assert e.enraged
        assert e.speed == pytest.approx(100.0)
        assert e.tower_damage == pytest.approx(3.0)
        assert e.attack_interval == pytest.approx(0.5)

    def test_no_enrage_when_disabled(self):
        e = Enemy(0)
        e.initialize(PATH, _config())
        e.take_damage(9.5)
        assert not e.enraged

    def test_reinitialize_after_reset(self):
        enrage = EnrageParams(trigger_fraction=0.9, speed_bonus=1.0)
        e = Enemy(0)
        e.initialize(PATH, _config(enrage=enrage))
        e.take_damage(5)
        assert e.enraged
        e.take_damage(100)
        e.reset()

        e.initialize(PATH, _config())
        assert e.lives == 2
        assert not e.dead and not e.enraged
        assert e.health == 10.0


class TestTower:
    """Tests for Tower."""

    def test_destroyed_fires_once(self, tower):
        fired = []
        tower.destroyed.connect(lambda: fired.append(1))
        tower.take_damage(6)
        assert tower.alive
        tower.take_damage(6)
        tower.take_damage(6)
        assert not tower.alive
        assert tower.health == 0.0
        assert fired == [1]

    def test_hits_closest_enemy_in_range(self, tower):
        near, far, out = Enemy(0), Enemy(0), Enemy(0)
        near.initialize([(90, 0)], _config())
        far.initialize([(70, 0)], _config())
        out.initialize([(0, 0)], _config())

        assert tower.find_target([far, out, near]) is near
        tower.update(0.0, [far, out, near])
        assert near.health == 7.0
        assert far.health == 10.0

        tower.update(0.25, [near])
        assert near.health == 7.0
        tower.update(0.25, [near])
        assert near.health == 4.0

    def test_disabled_tower_does_not_attack(self, tower):
        e = Enemy(0)
        e.initialize([(95, 0)], _config())
        tower.enabled = False
        tower.update(1.0, [e])
        assert e.health == 10.0

    def test_upgrades(self, tower):
        step = tower.next_upgrade()
        assert step is not None
        tower.take_damage(5)
        tower.apply_upgrade(UpgradeStep("x", 10, health_multiplier=2.0, damage_multiplier=1.5))
        assert tower.max_health == 20.0
        assert tower.health == 10.0
        assert tower.damage == pytest.approx(4.5)
        assert tower.upgrade_level == 1

    def test_upgrade_ladder_runs_out(self):
        t = Tower(0, 0, TowerTuning(upgrades=[("a", 1, 1.0, 1.0)]))
        t.apply_upgrade(t.next_upgrade())
        assert t.next_upgrade() is None


class TestActorRegistry:
    """Tests for the type id -> factory registry."""

    def test_catalog_types_registered(self):
        catalog = load_catalog()
        registry = build_enemy_registry(catalog)
        assert registry.type_ids == sorted(d.type_id for d in catalog)
        actor = registry.create(catalog[0].type_id)
        assert isinstance(actor, Enemy)
        assert actor.type_id == catalog[0].type_id

    def test_unknown_type_uses_default(self):
        registry = build_enemy_registry([])
        assert not registry.has(5)
        assert registry.create(5).type_id == UNTYPED

    def test_no_default_raises(self):
        with pytest.raises(KeyError):
            ActorRegistry().create(3)

    def test_register_untyped_sets_default(self):
        registry = ActorRegistry()
        registry.register(UNTYPED, lambda t: "default")
        assert registry.create(UNTYPED) == "default"
        assert registry.type_ids == []
