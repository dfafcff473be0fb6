"""
Core Game
=========

Main game orchestrator combining the spawner, collision pass, scoring,
termination rules and score persistence.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from asteroid_belt.belt_core.config_loader import GameConfig, get_config
from asteroid_belt.belt_core.entities import Entity, make_player, scale_to_sprite_width
from asteroid_belt.belt_core.spawner import Spawner
from asteroid_belt.belt_core.collision import CollisionEngine
from asteroid_belt.belt_core.scoring import ScoreTracker, ScoreEvent
from asteroid_belt.belt_core.rules import TerminationRules, TerminationResult, REASON_QUIT
from asteroid_belt.belt_core.score_store import ScoreHistory
from asteroid_belt.belt_core.state_snapshot import SnapshotBuilder, FrameSnapshot

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Session state machine."""
    IDLE = "idle"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class InputState:
    """Held-direction flags sampled once per tick."""
    move_left: bool = False
    move_right: bool = False

    def velocity(self, speed: int) -> int:
        """Horizontal velocity; opposing or absent input cancels out."""
        if self.move_left and not self.move_right:
            return -speed
        if self.move_right and not self.move_left:
            return speed
        return 0


@dataclass(frozen=True)
class SessionSummary:
    """Outcome of a finished session, passed to the session-end callback."""
    final_score: int
    high_score: int
    new_record: bool
    reason: str
    persisted: bool
    ticks: int


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    snapshot: FrameSnapshot
    score_events: List[ScoreEvent] = field(default_factory=list)
    spawned: Optional[Entity] = None
    delta_score: int = 0
    game_over: bool = False
    summary: Optional[SessionSummary] = None


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Player movement
    - Spawn timer and difficulty ramp
    - Collision pass over falling objects
    - Scoring and lives
    - Termination and score persistence
    - Frame snapshots

    One tick = one fixed simulation step. The caller owns the clock.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        score_history: Optional[ScoreHistory] = None,
        frame_callback: Optional[Callable[[FrameSnapshot], None]] = None,
        session_end_callback: Optional[Callable[[SessionSummary], None]] = None,
        sprite_sizes: Optional[Dict[str, Tuple[int, int]]] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducible spawns.
            score_history: Score store. Uses storage.scores_path if None.
            frame_callback: Called with a snapshot after every tick.
            session_end_callback: Called once when a session ends.
            sprite_sizes: Native (width, height) per sprite name. Entities
                with a known sprite keep their width and take the sprite's
                aspect ratio for their height.
            rng: Random source for spawns. Built from seed if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._frame_callback = frame_callback
        self._session_end_callback = session_end_callback
        self._sprite_sizes = dict(sprite_sizes or {})

        # Initialize subsystems
        self._history = score_history if score_history is not None else ScoreHistory(config=config)
        self._spawner = Spawner(config, seed, rng=rng)
        self._collision = CollisionEngine()
        self._scorer = ScoreTracker(config)
        self._rules = TerminationRules(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._state = GameState.IDLE
        self._player: Optional[Entity] = None
        self._objects: List[Entity] = []
        self._tick_count: int = 0
        self._last_summary: Optional[SessionSummary] = None

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is GameState.RUNNING

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def lives(self) -> int:
        return self._scorer.lives

    @property
    def high_score(self) -> int:
        return self._scorer.high_score

    @property
    def player(self) -> Optional[Entity]:
        """The player entity, or None before the first session."""
        return self._player

    @property
    def objects(self) -> Tuple[Entity, ...]:
        """Falling objects currently in play."""
        return tuple(self._objects)

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def spawn_interval(self) -> int:
        return self._spawner.interval

    @property
    def tick_count(self) -> int:
        """Ticks simulated in the current session."""
        return self._tick_count

    @property
    def score_history(self) -> ScoreHistory:
        return self._history

    @property
    def last_summary(self) -> Optional[SessionSummary]:
        """Summary of the most recently finished session."""
        return self._last_summary

    def add_object(self, entity: Entity) -> None:
        """Insert a falling object directly (scripted scenarios and tools)."""
        self._objects.append(entity)

    def start_session(self, seed: Optional[int] = None) -> FrameSnapshot:
        """
        Start a new session, restarting cleanly if one is already running.

        A session abandoned by restart is not persisted.

        Args:
            seed: New random seed. Continues the current random stream if None.

        Returns:
            Initial frame snapshot.
        """
        if self.is_running:
            logger.info("Restarting session at score %d", self._scorer.score)

        self._objects.clear()
        self._spawner.reset(seed)
        self._collision.reset()
        self._scorer.reset()
        # Keep an unsaved in-memory record if the history write failed
        self._scorer.high_score = max(self._scorer.high_score, self._history.load_high_score())

        self._player = make_player(self._config)
        self._fit_sprite(self._player)
        self._tick_count = 0
        self._state = GameState.RUNNING

        logger.info("Session started (high score %d)", self._scorer.high_score)
        return self.snapshot()

    def quit_session(self) -> Optional[SessionSummary]:
        """
        Quit to the menu. A no-op unless a session is running.

        Returns:
            Session summary, or None if nothing was running.
        """
        if not self.is_running:
            return None
        return self._end_session(self._rules.on_quit())

    def tick(self, controls: Optional[InputState] = None) -> TickResult:
        """
        Execute one simulation tick.

        Args:
            controls: Held-direction state. No movement if None.

        Returns:
            TickResult with the new snapshot and what changed.
        """
        if not self.is_running:
            # Nothing to simulate, return current state
            return TickResult(snapshot=self.snapshot())

        if controls is None:
            controls = InputState()

        score_before = self._scorer.score
        field_width = self._config.field.width

        # Move player
        self._player.vx = controls.velocity(self._config.player.speed)
        self._player.vy = 0
        self._player.update()
        self._player.clamp_to_field(field_width)

        # Spawn
        spawned = self._spawner.maybe_spawn(field_width)
        if spawned is not None:
            self._fit_sprite(spawned)
            self._objects.append(spawned)

        # Collision pass, stopping at the event that exhausts lives
        lifecycle_events = self._collision.run(
            self._objects, self._player, self._config.field.height
        )
        score_events: List[ScoreEvent] = []
        for event in lifecycle_events:
            score_events.append(self._scorer.apply(event))
            if self._scorer.out_of_lives:
                break

        self._tick_count += 1

        summary = None
        term_result = self._rules.check_termination(self._scorer.lives)
        if term_result.terminated:
            summary = self._end_session(term_result)

        snapshot = self.snapshot()
        if self._frame_callback is not None:
            self._frame_callback(snapshot)

        return TickResult(
            snapshot=snapshot,
            score_events=score_events,
            spawned=spawned,
            delta_score=self._scorer.score - score_before,
            game_over=summary is not None,
            summary=summary
        )

    def _fit_sprite(self, entity: Entity) -> None:
        size = self._sprite_sizes.get(entity.sprite)
        if size is not None:
            scale_to_sprite_width(entity, entity.width, size[0], size[1])

    def _end_session(self, result: TerminationResult) -> SessionSummary:
        """Stop the session, persist if required, and notify the caller."""
        self._state = GameState.IDLE if result.reason == REASON_QUIT else GameState.GAME_OVER

        final_score = self._scorer.score
        persisted = False
        if result.persist:
            persisted = self._history.append_score(final_score)
            if not persisted:
                logger.warning("Score %d was not saved; continuing without history", final_score)
        new_record = self._scorer.record_final()

        summary = SessionSummary(
            final_score=final_score,
            high_score=self._scorer.high_score,
            new_record=new_record,
            reason=result.reason,
            persisted=persisted,
            ticks=self._tick_count
        )
        self._last_summary = summary
        logger.info("Session ended (%s): score %d", result.reason, final_score)

        if self._session_end_callback is not None:
            self._session_end_callback(summary)
        return summary

    def snapshot(self) -> FrameSnapshot:
        """Build current frame snapshot."""
        return self._snapshot_builder.build(
            tick=self._tick_count,
            state=self._state.value,
            player=self._player,
            objects=self._objects,
            score=self._scorer.score,
            lives=self._scorer.lives,
            high_score=self._scorer.high_score,
            spawn_interval=self._spawner.interval
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "lives": self._scorer.lives,
            "high_score": self._scorer.high_score,
            "ticks": self._tick_count,
            "spawn_interval": self._spawner.interval,
            "objects_count": len(self._objects),
            "dodged": self._scorer.dodged,
            "collected": self._scorer.collected,
            "state": self._state.value,
        }
