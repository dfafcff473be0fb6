"""
Scoring System
==============

Applies lifecycle events to the session's score and lives.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from asteroid_belt.belt_core.config_loader import GameConfig, get_config
from asteroid_belt.belt_core.collision import EventType, LifecycleEvent
from asteroid_belt.belt_core.entities import EntityKind


@dataclass
class ScoreEvent:
    """Record of the score/lives change caused by one lifecycle event."""
    points: int
    lives_delta: int
    source: EntityKind
    event_type: EventType

    def __repr__(self) -> str:
        if self.lives_delta:
            return f"ScoreEvent({self.source.value} {self.event_type.value}, lives{self.lives_delta:+d})"
        return f"ScoreEvent({self.source.value} {self.event_type.value}, +{self.points})"


class ScoreTracker:
    """
    Tracks score, lives and the in-memory high score for one session.

    - Collecting a pickup: +1 life
    - Hitting an obstacle: -1 life (lives never go below zero)
    - Obstacle leaving the field: +dodge_points
    - Pickup leaving the field: nothing
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._score: int = 0
        self._lives: int = config.session.starting_lives
        self._high_score: int = 0
        self._dodged: int = 0
        self._collected: int = 0

    @property
    def score(self) -> int:
        """Current session score."""
        return self._score

    @property
    def lives(self) -> int:
        """Remaining lives."""
        return self._lives

    @property
    def high_score(self) -> int:
        """Best score known this process (history max or a newer record)."""
        return self._high_score

    @high_score.setter
    def high_score(self, value: int) -> None:
        """Seed the high score from persisted history."""
        self._high_score = max(0, value)

    @property
    def dodged(self) -> int:
        """Obstacles that left the field without hitting the player."""
        return self._dodged

    @property
    def collected(self) -> int:
        """Pickups caught by the player."""
        return self._collected

    @property
    def out_of_lives(self) -> bool:
        return self._lives <= 0

    def life_indicators(self) -> Tuple[int, int]:
        """Split lives into (base, extra) indicator counts."""
        return split_life_indicators(self._lives, self._config.session.base_life_indicators)

    def apply(self, event: LifecycleEvent) -> ScoreEvent:
        """
        Apply one lifecycle event.

        Args:
            event: Collision or miss reported by the collision engine.

        Returns:
            ScoreEvent describing the change.
        """
        points = 0
        lives_delta = 0

        if event.event_type is EventType.COLLIDED:
            if event.kind is EntityKind.PICKUP:
                lives_delta = 1
                self._collected += 1
            elif event.kind is EntityKind.OBSTACLE:
                lives_delta = -1 if self._lives > 0 else 0
            else:
                raise ValueError(f"Unexpected collision with {event.kind}")
        elif event.event_type is EventType.MISSED:
            if event.kind is EntityKind.OBSTACLE:
                points = self._config.session.dodge_points
                self._dodged += 1
            elif event.kind is not EntityKind.PICKUP:
                raise ValueError(f"Unexpected miss of {event.kind}")
        else:
            raise ValueError(f"Unknown event type: {event.event_type}")

        self._score += points
        self._lives += lives_delta
        return ScoreEvent(
            points=points,
            lives_delta=lives_delta,
            source=event.kind,
            event_type=event.event_type
        )

    def record_final(self) -> bool:
        """
        Fold the session score into the in-memory high score.

        Returns:
            True if the session set a new record.
        """
        if self._score > self._high_score:
            self._high_score = self._score
            return True
        return False

    def reset(self) -> None:
        """Reset score and lives for a new session; the high score is kept."""
        self._score = 0
        self._lives = self._config.session.starting_lives
        self._dodged = 0
        self._collected = 0


def split_life_indicators(lives: int, base: int = 3) -> Tuple[int, int]:
    """
    Split a life count into (base, extra) indicator counts.

    The first `base` lives are drawn as regular hearts, anything above as
    extra hearts.
    """
    lives = max(0, lives)
    return (min(lives, base), max(0, lives - base))
