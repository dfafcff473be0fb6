"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Asteroid Belt game.
Reward is always 0.0 - agents must compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from asteroid_belt.belt_core.config_loader import GameConfig, load_config
from asteroid_belt.belt_core.game import CoreGame, InputState
from asteroid_belt.belt_core.score_store import MemoryScoreHistory, ScoreHistory
from asteroid_belt.belt_core.state_snapshot import FrameSnapshot

# Discrete actions
ACTION_STAY = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2

_ACTION_INPUTS = {
    ACTION_STAY: InputState(),
    ACTION_LEFT: InputState(move_left=True),
    ACTION_RIGHT: InputState(move_right=True),
}


class AsteroidBeltEnv(gym.Env):
    """
    Asteroid Belt dodge game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = hold left, 2 = hold right.
        One step is one simulation tick.

    Observation Space:
        Dict of player position, score, lives and padded object arrays.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, lives, delta_score, dodged/collected counts, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        score_history: Optional[ScoreHistory] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            score_history: Where finished episodes are recorded. In-memory if None.
            debug: If True, prints a line per game-over.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self._debug = debug

        if score_history is None:
            score_history = MemoryScoreHistory()
        self._game = CoreGame(config=self._config, score_history=score_history)

        # Initialize renderer (lazy)
        self._renderer = None

        self.action_space = spaces.Discrete(len(_ACTION_INPUTS))
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._config.caps.max_objects
        field = self._config.field
        big = np.iinfo(np.int32).max

        return spaces.Dict({
            # Core state
            "player_x": spaces.Box(low=0, high=field.width, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=0, high=big, shape=(), dtype=np.int32),
            "spawn_interval": spaces.Box(
                low=self._config.spawn.min_interval,
                high=self._config.spawn.initial_interval,
                shape=(),
                dtype=np.int32
            ),
            "objects_count": spaces.Box(low=0, high=max_obj, shape=(), dtype=np.int32),

            # Object arrays
            "obj_kind": spaces.Box(low=-1, high=2, shape=(max_obj,), dtype=np.int8),
            "obj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_size": spaces.Box(low=0, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_mask": spaces.MultiBinary(max_obj),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.start_session(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: 0 stay, 1 left, 2 right.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        if action not in _ACTION_INPUTS:
            raise ValueError(f"Invalid action {action}, expected 0, 1 or 2")

        result = self._game.tick(_ACTION_INPUTS[action])

        obs = self._snapshot_to_obs(result.snapshot)
        reward = 0.0

        terminated = result.game_over
        truncated = (
            not terminated
            and self._game.tick_count >= self._config.caps.max_ticks
        )

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["lives_delta"] = sum(e.lives_delta for e in result.score_events)

        if self._debug and terminated:
            print(f"[DEBUG] GAME OVER at tick {self._game.tick_count}: score={self._game.score}")

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: FrameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict(self._config.caps.max_objects)

    def _init_renderer(self) -> None:
        from asteroid_belt.belt_core.render_pygame import PygameRenderer
        self._renderer = PygameRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode is None:
            return None

        if self._renderer is None:
            self._init_renderer()

        snapshot = self._game.snapshot()
        if self.render_mode == "rgb_array":
            return self._renderer.render(snapshot)

        self._renderer.render_to_screen(snapshot)
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
