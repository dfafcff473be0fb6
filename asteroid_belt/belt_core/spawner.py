"""
Spawner - Timed Obstacle/Pickup Creation
========================================

Creates falling objects on a shrinking interval (the difficulty ramp)
from a seeded, per-game random source.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Tuple

from asteroid_belt.belt_core.config_loader import GameConfig, FallingConfig, get_config
from asteroid_belt.belt_core.entities import Entity, make_obstacle, make_pickup

logger = logging.getLogger(__name__)


class Spawner:
    """
    Spawn timer with a saturating difficulty ramp.

    Every call to maybe_spawn() is one tick. When the counter reaches the
    current interval an entity is created, the counter resets and the
    interval shrinks by one step, never below the configured floor.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            rng: Random source to draw from. Takes precedence over seed.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else random.Random(seed)

        self._interval: int = config.spawn.initial_interval
        self._counter: int = 0
        self._spawned: int = 0

    @property
    def interval(self) -> int:
        """Ticks between spawns at the current difficulty."""
        return self._interval

    @property
    def counter(self) -> int:
        """Ticks since the last spawn."""
        return self._counter

    @property
    def spawned(self) -> int:
        """Number of entities created since the last reset."""
        return self._spawned

    @property
    def rng(self) -> random.Random:
        """The random source shared by every spawn decision."""
        return self._rng

    def maybe_spawn(self, field_width: int) -> Optional[Entity]:
        """
        Advance the spawn timer by one tick.

        Args:
            field_width: Current play-field width in pixels.

        Returns:
            A new entity when the timer fires, otherwise None.
        """
        self._counter += 1
        if self._counter < self._interval:
            return None

        self._counter = 0
        self._interval = max(
            self._config.spawn.min_interval,
            self._interval - self._config.spawn.interval_step
        )
        return self.spawn(field_width)

    def spawn(self, field_width: int) -> Entity:
        """
        Create one obstacle or pickup immediately.

        Args:
            field_width: Current play-field width in pixels.

        Returns:
            The new entity, positioned just above the field.
        """
        spawn = self._config.spawn
        roll = self._rng.randrange(spawn.roll_range)

        if roll < spawn.pickup_chance:
            x, size, speed = self._roll_params(self._config.pickup, field_width)
            entity = make_pickup(x, size, speed, self._config)
        else:
            x, size, speed = self._roll_params(self._config.obstacle, field_width)
            entity = make_obstacle(x, size, speed, self._config)

        self._spawned += 1
        logger.debug("Spawned %r (next interval %d)", entity, self._interval)
        return entity

    def _roll_params(self, falling: FallingConfig, field_width: int) -> Tuple[int, int, int]:
        """Draw (x, size, speed) for one falling object."""
        size = self._rng.randint(falling.size_min, falling.size_max)
        speed = self._rng.randint(falling.speed_min, falling.speed_max)
        # Narrow or degenerate fields pin the spawn to the left edge
        max_x = field_width - size
        x = self._rng.randint(0, max_x) if max_x > 0 else 0
        return x, size, speed

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset timer and difficulty with optional new seed.

        Args:
            seed: New random seed. Keeps current random state if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._interval = self._config.spawn.initial_interval
        self._counter = 0
        self._spawned = 0
