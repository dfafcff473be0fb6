"""
Tests for the spawner: timer, difficulty ramp and randomized parameters.
"""

import random
from collections import Counter

import pytest

from asteroid_belt.belt_core.config_loader import load_config
from asteroid_belt.belt_core.entities import EntityKind
from asteroid_belt.belt_core.spawner import Spawner


@pytest.fixture
def config():
    return load_config()


class FixedRoll(random.Random):
    """Random source whose single-argument randrange() always returns roll."""

    def __init__(self, roll):
        super().__init__(0)
        self._roll = roll

    def randrange(self, start, stop=None, step=1):
        if stop is None:
            return self._roll
        return super().randrange(start, stop, step)


def _run(spawner, ticks, field_width=800):
    return [spawner.maybe_spawn(field_width) for _ in range(ticks)]


class TestSpawnTimer:
    """Test spawn cadence and interval ramp."""

    def test_first_spawn_at_initial_interval(self, config):
        """Nothing spawns until the counter reaches 40."""
        spawner = Spawner(config, seed=1)
        results = _run(spawner, 40)

        assert all(r is None for r in results[:39])
        assert results[39] is not None
        assert spawner.interval == 39
        assert spawner.counter == 0

    def test_interval_decreases_by_one_per_spawn(self, config):
        """Each spawn shortens the interval by one tick."""
        spawner = Spawner(config, seed=1)
        _run(spawner, 40)
        assert spawner.interval == 39
        results = _run(spawner, 39)
        assert results[-1] is not None
        assert spawner.interval == 38

    def test_interval_non_increasing_with_floor(self, config):
        """Interval never grows and never drops below 10."""
        spawner = Spawner(config, seed=7)
        previous = spawner.interval
        for _ in range(5000):
            spawner.maybe_spawn(800)
            assert spawner.interval <= previous
            assert spawner.interval >= config.spawn.min_interval
            previous = spawner.interval
        assert spawner.interval == config.spawn.min_interval

    def test_spawns_every_min_interval_at_floor(self, config):
        """Once saturated, spawns happen every 10 ticks."""
        spawner = Spawner(config, seed=7)
        _run(spawner, 5000)
        spawner_counter = spawner.counter
        results = _run(spawner, 10 - spawner_counter)
        assert results[-1] is not None
        assert sum(r is not None for r in _run(spawner, 100)) == 10

    def test_reset_restores_initial_interval(self, config):
        """Reset should restart the difficulty ramp."""
        spawner = Spawner(config, seed=3)
        _run(spawner, 500)
        spawner.reset()
        assert spawner.interval == config.spawn.initial_interval
        assert spawner.counter == 0
        assert spawner.spawned == 0


class TestSpawnParameters:
    """Test randomized obstacle/pickup creation."""

    def test_deterministic_with_seed(self, config):
        """Same seed should produce the same entities."""
        s1 = Spawner(config, seed=42)
        s2 = Spawner(config, seed=42)

        seq1 = [repr(s1.spawn(800)) for _ in range(50)]
        seq2 = [repr(s2.spawn(800)) for _ in range(50)]

        assert seq1 == seq2

    def test_reset_with_seed_restores_sequence(self, config):
        """Reset with the same seed replays the same entities."""
        spawner = Spawner(config, seed=42)
        initial = [repr(spawner.spawn(800)) for _ in range(10)]
        spawner.reset(seed=42)
        after_reset = [repr(spawner.spawn(800)) for _ in range(10)]
        assert initial == after_reset

    def test_parameter_ranges(self, config):
        """Size, speed and position should stay within configured ranges."""
        spawner = Spawner(config, seed=5)
        for _ in range(2000):
            entity = spawner.spawn(800)
            falling = config.pickup if entity.kind is EntityKind.PICKUP else config.obstacle

            assert entity.width == entity.height
            assert falling.size_min <= entity.width <= falling.size_max
            assert falling.speed_min <= entity.vy <= falling.speed_max
            assert entity.vx == 0
            assert 0 <= entity.x <= 800 - entity.width
            assert entity.y == -entity.height
            assert entity.hitbox_scale == falling.hitbox_scale

    def test_pickup_rate_is_about_seven_percent(self, config):
        """Roughly 7% of spawns should be pickups."""
        spawner = Spawner(config, seed=11)
        counts = Counter(spawner.spawn(800).kind for _ in range(20000))

        rate = counts[EntityKind.PICKUP] / 20000
        assert 0.05 < rate < 0.09
        assert counts[EntityKind.PLAYER] == 0

    def test_pickup_decision_uses_roll_below_chance(self, config):
        """A roll below 7 produces a pickup, 7 and above an obstacle."""
        assert Spawner(config, rng=FixedRoll(6)).spawn(800).kind is EntityKind.PICKUP
        assert Spawner(config, rng=FixedRoll(7)).spawn(800).kind is EntityKind.OBSTACLE

    def test_injected_rng_is_used(self, config):
        """An injected random source replaces the seeded one."""
        rng = random.Random(42)
        spawner = Spawner(config, seed=999, rng=rng)

        assert spawner.rng is rng
        expected = Spawner(config, seed=42)
        assert [repr(spawner.spawn(800)) for _ in range(20)] == \
            [repr(expected.spawn(800)) for _ in range(20)]

    @pytest.mark.parametrize("field_width", [0, -50, 30, 60])
    def test_narrow_field_spawns_at_left_edge(self, config, field_width):
        """When the field is not wider than the object, x clamps to 0."""
        spawner = Spawner(config, seed=9)
        for _ in range(200):
            entity = spawner.spawn(field_width)
            if field_width <= entity.width:
                assert entity.x == 0
