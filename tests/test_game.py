"""
Tests for the session state machine and per-tick orchestration.
"""

import dataclasses
import random
from pathlib import Path

import pytest
import yaml

from asteroid_belt.belt_core import config_loader
from asteroid_belt.belt_core.config_loader import load_config
from asteroid_belt.belt_core.entities import make_obstacle, make_pickup
from asteroid_belt.belt_core.game import CoreGame, GameState, InputState
from asteroid_belt.belt_core.rules import REASON_OUT_OF_LIVES, REASON_QUIT
from asteroid_belt.belt_core.score_store import MemoryScoreHistory, ScoreHistory

DEFAULT_CONFIG = Path(config_loader.__file__).parent.parent / "game_config.yaml"


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def history():
    return MemoryScoreHistory()


@pytest.fixture
def game(config, history):
    return CoreGame(config=config, seed=42, score_history=history)


def write_config(tmp_path, section, **values):
    """Copy the default config with one section overridden."""
    with open(DEFAULT_CONFIG, "r") as f:
        raw = yaml.safe_load(f)
    raw[section].update(values)
    path = tmp_path / "game_config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(raw, f)
    return load_config(str(path))


def add_hit(game, pickup=False):
    """Queue an object that reaches the player on the next tick."""
    player = game.player
    if pickup:
        entity = make_pickup(player.x, 40, 2, game.config)
        entity.y = player.y - 10
    else:
        entity = make_obstacle(player.x, 64, 10, game.config)
        entity.y = player.y - 40
    game.add_object(entity)
    return entity


def add_dodge(game):
    """Queue an obstacle that falls off the field on the third tick."""
    entity = make_obstacle(0, 60, 5, game.config)
    entity.y = game.config.field.height - 10
    game.add_object(entity)
    return entity


class TestSessionLifecycle:
    """Test idle/running/game-over transitions."""

    def test_starts_idle(self, game):
        """A new game waits for start_session()."""
        assert game.state is GameState.IDLE
        assert game.player is None
        result = game.tick(InputState(move_left=True))
        assert result.snapshot.tick == 0
        assert game.tick_count == 0

    def test_start_session_initial_state(self, game, config):
        """Session starts with 0 points, 3 lives and the initial interval."""
        snapshot = game.start_session()

        assert game.is_running
        assert snapshot.state == "running"
        assert snapshot.score == 0
        assert snapshot.lives == 3
        assert snapshot.spawn_interval == config.spawn.initial_interval
        assert snapshot.objects == ()
        assert snapshot.player.x == config.field.width // 2 - config.player.width // 2

    def test_high_score_seeded_from_history(self, config):
        """Session start loads the best score from history."""
        game = CoreGame(config=config, score_history=MemoryScoreHistory([10, 25, 3]))
        game.start_session()
        assert game.high_score == 25

    def test_three_collisions_end_game(self, config, history):
        """Three obstacle hits end the session and persist the score once."""
        summaries = []
        game = CoreGame(
            config=config, seed=42, score_history=history,
            session_end_callback=summaries.append
        )
        game.start_session()

        for expected_lives in (2, 1):
            add_hit(game)
            result = game.tick()
            assert game.lives == expected_lives
            assert not result.game_over

        add_hit(game)
        result = game.tick()

        assert result.game_over
        assert game.state is GameState.GAME_OVER
        assert result.snapshot.state == "game_over"
        assert result.summary.reason == REASON_OUT_OF_LIVES
        assert result.summary.persisted
        assert history.load_scores() == [0]
        assert summaries == [result.summary]

        # No further simulation or persistence
        game.tick()
        game.tick()
        assert game.quit_session() is None
        assert history.load_scores() == [0]
        assert len(summaries) == 1
        assert game.tick_count == 3

    def test_events_after_last_life_are_ignored(self, game):
        """A pickup later in the same pass cannot revive the player."""
        game.start_session()
        add_hit(game)
        game.tick()
        add_hit(game)
        game.tick()

        add_hit(game)
        add_hit(game, pickup=True)
        result = game.tick()

        assert result.game_over
        assert game.lives == 0
        assert len(result.score_events) == 1
        assert result.score_events[0].lives_delta == -1

    def test_simultaneous_hits_clamp_lives(self, game):
        """Several hits in one tick cannot push lives below zero."""
        game.start_session()
        for _ in range(5):
            add_hit(game)
        result = game.tick()

        assert result.game_over
        assert game.lives == 0
        assert result.snapshot.lives == 0

    def test_restart_after_game_over(self, game, history):
        """A new session after game over starts clean and keeps the record."""
        game.start_session()
        add_dodge(game)
        for _ in range(3):
            game.tick()
        for _ in range(3):
            add_hit(game)
            game.tick()
        assert game.state is GameState.GAME_OVER
        assert history.load_scores() == [5]

        game.start_session()
        assert game.is_running
        assert (game.score, game.lives, game.tick_count) == (0, 3, 0)
        assert game.high_score == 5
        assert game.objects == ()

    def test_restart_while_running_discards_session(self, game, history, config):
        """Restarting mid-session resets everything without persisting."""
        game.start_session()
        add_dodge(game)
        for _ in range(45):
            game.tick()
        assert game.score == 5
        assert game.spawn_interval < config.spawn.initial_interval

        game.start_session()

        assert (game.score, game.lives) == (0, 3)
        assert game.objects == ()
        assert game.spawn_interval == config.spawn.initial_interval
        assert history.load_scores() == []


class TestQuit:
    """Test quitting to the menu."""

    def test_quit_does_not_persist_by_default(self, game, history):
        """ESC ends the session without writing the score."""
        game.start_session()
        add_dodge(game)
        for _ in range(3):
            game.tick()

        summary = game.quit_session()

        assert summary.reason == REASON_QUIT
        assert summary.final_score == 5
        assert not summary.persisted
        assert game.state is GameState.IDLE
        assert history.load_scores() == []

    def test_quit_is_idempotent(self, game):
        """Quitting when nothing runs is a no-op."""
        assert game.quit_session() is None
        game.start_session()
        assert game.quit_session() is not None
        assert game.quit_session() is None

    def test_quit_persists_when_configured(self, tmp_path):
        """persist_on_quit writes the partial score."""
        config = write_config(tmp_path, "session", persist_on_quit=True)
        history = MemoryScoreHistory()
        game = CoreGame(config=config, seed=1, score_history=history)
        game.start_session()
        add_dodge(game)
        for _ in range(3):
            game.tick()

        summary = game.quit_session()

        assert summary.persisted
        assert history.load_scores() == [5]


class TestTick:
    """Test movement, spawning and scoring inside a tick."""

    def test_movement(self, game, config):
        """Held direction moves by speed; both or neither stays put."""
        game.start_session()
        start_x = game.player.x

        game.tick(InputState(move_left=True))
        assert game.player.x == start_x - config.player.speed
        game.tick(InputState(move_right=True))
        game.tick(InputState(move_right=True))
        assert game.player.x == start_x + config.player.speed
        game.tick(InputState(move_left=True, move_right=True))
        game.tick()
        assert game.player.x == start_x + config.player.speed
        assert game.player.y == config.player_y

    def test_player_stays_in_field(self, game, config):
        """Player x stays within [0, width - player width] for any input."""
        rng = random.Random(3)
        game.start_session()
        max_x = config.field.width - game.player.width

        for _ in range(3000):
            if not game.is_running:
                game.start_session()
            controls = InputState(
                move_left=rng.random() < 0.5,
                move_right=rng.random() < 0.3
            )
            snapshot = game.tick(controls).snapshot
            assert 0 <= snapshot.player.x <= max_x

    def test_first_spawn_on_tick_forty(self, game):
        """The spawner fires after 40 ticks and shortens the interval."""
        game.start_session()
        results = [game.tick() for _ in range(40)]

        assert all(r.spawned is None for r in results[:39])
        assert results[39].spawned is not None
        assert game.spawn_interval == 39
        assert len(game.objects) == 1

    def test_dodge_scores_five(self, game):
        """An obstacle leaving the field adds 5 points."""
        game.start_session()
        add_dodge(game)
        deltas = [game.tick().delta_score for _ in range(3)]

        assert deltas == [0, 0, 5]
        assert game.score == 5
        assert game.objects == ()

    def test_pickup_gives_extra_life(self, game):
        """Collecting a heart gives a fourth, extra life."""
        game.start_session()
        add_hit(game, pickup=True)
        result = game.tick()

        assert game.lives == 4
        assert result.snapshot.life_indicators == (3, 1)
        assert game.score == 0

    def test_frame_callback_every_tick(self, config, history):
        """Every tick delivers one snapshot to the frame callback."""
        frames = []
        game = CoreGame(config=config, seed=1, score_history=history, frame_callback=frames.append)
        game.start_session()
        for _ in range(5):
            game.tick()

        assert [f.tick for f in frames] == [1, 2, 3, 4, 5]

    def test_injected_rng_drives_spawns(self, config, history):
        """A random source passed to CoreGame is the one the spawner draws from."""
        rng = random.Random(8)
        game = CoreGame(config=config, score_history=history, rng=rng)
        seeded = CoreGame(config=config, seed=8, score_history=MemoryScoreHistory())
        game.start_session()
        seeded.start_session()

        assert game.spawner.rng is rng
        spawned = [game.tick() for _ in range(40)][-1].spawned
        expected = [seeded.tick() for _ in range(40)][-1].spawned
        assert repr(spawned) == repr(expected)

    def test_snapshot_is_immutable(self, game):
        """Snapshots cannot be modified by consumers."""
        snapshot = game.start_session()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.score = 100

    def test_sprite_sizes_fit_entities(self, config, history):
        """Known sprite sizes give entities the sprite's aspect ratio."""
        sizes = {config.player.sprite: (128, 96), config.obstacle.sprite: (50, 50)}
        game = CoreGame(config=config, seed=2, score_history=history, sprite_sizes=sizes)
        game.start_session()

        assert (game.player.width, game.player.height) == (64, 48)
        spawned = [game.tick() for _ in range(40)][-1].spawned
        assert spawned.width == spawned.height


class TestSeededReplay:
    """Test determinism and score accounting over whole sessions."""

    def _play(self, config, seed, input_seed, max_ticks=20000):
        game = CoreGame(config=config, seed=seed, score_history=MemoryScoreHistory())
        rng = random.Random(input_seed)
        game.start_session()
        trace = []
        for _ in range(max_ticks):
            result = game.tick(InputState(
                move_left=rng.random() < 0.4,
                move_right=rng.random() < 0.4
            ))
            trace.append((result.snapshot.player.x, result.snapshot.score, result.snapshot.lives,
                          len(result.snapshot.objects)))
            if result.game_over:
                break
        return game, trace

    def test_same_seed_same_session(self, config):
        """Identical seeds and inputs replay identically."""
        _, trace_a = self._play(config, seed=7, input_seed=1)
        _, trace_b = self._play(config, seed=7, input_seed=1)
        assert trace_a == trace_b

    def test_score_is_five_per_dodge(self, config):
        """Score always equals 5 times the number of dodged obstacles."""
        game, _ = self._play(config, seed=123, input_seed=4)
        assert game.score == 5 * game.get_info()["dodged"]

    def test_idle_player_eventually_loses(self, config):
        """Standing still in the middle ends in game over with history written."""
        history = MemoryScoreHistory()
        game = CoreGame(config=config, seed=5, score_history=history)
        game.start_session()
        for _ in range(20000):
            if game.tick().game_over:
                break

        assert game.state is GameState.GAME_OVER
        assert history.load_scores() == [game.score]
        assert game.high_score == game.score


class TestPersistenceFailure:
    """Test that storage problems never stop the game."""

    def test_unwritable_history_is_not_fatal(self, config, tmp_path):
        """A failed write still ends the session and keeps the in-memory record."""
        game = CoreGame(config=config, seed=1, score_history=ScoreHistory(tmp_path))
        game.start_session()
        add_dodge(game)
        for _ in range(3):
            game.tick()
        for _ in range(3):
            add_hit(game)
            result = game.tick()

        assert result.game_over
        assert not result.summary.persisted
        assert result.summary.new_record
        assert game.high_score == 5

        game.start_session()
        assert game.high_score == 5

    def test_corrupt_history_starts_from_zero(self, config, tmp_path):
        """A malformed score file gives a high score of 0 at session start."""
        path = tmp_path / "scores.txt"
        path.write_text("10\nabc\n30\n")
        game = CoreGame(config=config, seed=1, score_history=ScoreHistory(path))

        game.start_session()

        assert game.high_score == 0

    def test_history_file_written(self, config, tmp_path):
        """Game over appends the final score to the history file."""
        path = tmp_path / "scores.txt"
        game = CoreGame(config=config, seed=1, score_history=ScoreHistory(path))
        game.start_session()
        for _ in range(3):
            add_hit(game)
            game.tick()

        assert path.read_text() == "0\n"
