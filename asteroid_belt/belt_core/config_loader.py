"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class FieldConfig:
    """Play-field geometry."""
    width: int                   # Field width in pixels
    height: int                  # Field height in pixels


@dataclass(frozen=True)
class PlayerConfig:
    """Player ship size and movement."""
    width: int
    height: int
    speed: int                   # Pixels per tick
    bottom_offset: int           # Distance from field bottom to player top
    sprite: str


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn timer and difficulty ramp."""
    initial_interval: int
    min_interval: int
    interval_step: int
    pickup_chance: int           # Roll below this produces a pickup
    roll_range: int


@dataclass(frozen=True)
class FallingConfig:
    """Randomization ranges for one kind of falling object."""
    size_min: int
    size_max: int
    speed_min: int
    speed_max: int
    hitbox_scale: float
    sprite: str

    @property
    def size_range(self) -> Tuple[int, int]:
        return (self.size_min, self.size_max)

    @property
    def speed_range(self) -> Tuple[int, int]:
        return (self.speed_min, self.speed_max)


@dataclass(frozen=True)
class SessionConfig:
    """Lives, scoring and end-of-session policy."""
    starting_lives: int
    dodge_points: int
    base_life_indicators: int
    persist_on_quit: bool


@dataclass(frozen=True)
class LoopConfig:
    """Driver cadence."""
    tick_ms: int

    @property
    def target_fps(self) -> float:
        return 1000.0 / self.tick_ms


@dataclass(frozen=True)
class StorageConfig:
    """Locations of the plaintext collaborator files."""
    scores_path: str
    credentials_path: str


@dataclass(frozen=True)
class CapsConfig:
    """Limits used by headless wrappers."""
    max_ticks: int
    max_objects: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    field: FieldConfig
    player: PlayerConfig
    spawn: SpawnConfig
    obstacle: FallingConfig
    pickup: FallingConfig
    session: SessionConfig
    loop: LoopConfig
    storage: StorageConfig
    caps: CapsConfig

    @property
    def player_y(self) -> int:
        """Fixed vertical position of the player."""
        return self.field.height - self.player.bottom_offset


def _parse_falling(data: dict, default_scale: float) -> FallingConfig:
    """Parse an obstacle or pickup section."""
    return FallingConfig(
        size_min=int(data["size_min"]),
        size_max=int(data["size_max"]),
        speed_min=int(data["speed_min"]),
        speed_max=int(data["speed_max"]),
        hitbox_scale=float(data.get("hitbox_scale", default_scale)),
        sprite=str(data.get("sprite", ""))
    )


def _validate_falling(name: str, falling: FallingConfig) -> None:
    if falling.size_min < 1 or falling.size_min > falling.size_max:
        raise ValueError(
            f"{name} size range invalid: [{falling.size_min}, {falling.size_max}]"
        )
    if falling.speed_min > falling.speed_max:
        raise ValueError(
            f"{name} speed range invalid: [{falling.speed_min}, {falling.speed_max}]"
        )
    if not 0.0 < falling.hitbox_scale <= 1.0:
        raise ValueError(f"{name} hitbox_scale must be in (0, 1], got {falling.hitbox_scale}")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.field.width < 1 or config.field.height < 1:
        raise ValueError(
            f"Field must be at least 1x1, got {config.field.width}x{config.field.height}"
        )

    if config.player.width < 1 or config.player.height < 1:
        raise ValueError("Player size must be at least 1x1")

    spawn = config.spawn
    if spawn.min_interval < 1:
        raise ValueError(f"spawn.min_interval must be >= 1, got {spawn.min_interval}")
    if spawn.initial_interval < spawn.min_interval:
        raise ValueError(
            f"spawn.initial_interval ({spawn.initial_interval}) is below "
            f"min_interval ({spawn.min_interval})"
        )
    if spawn.interval_step < 0:
        raise ValueError("spawn.interval_step cannot be negative")
    if not 0 <= spawn.pickup_chance <= spawn.roll_range:
        raise ValueError(
            f"spawn.pickup_chance ({spawn.pickup_chance}) must be within "
            f"[0, roll_range={spawn.roll_range}]"
        )

    _validate_falling("obstacle", config.obstacle)
    _validate_falling("pickup", config.pickup)

    if config.session.starting_lives < 1:
        raise ValueError("session.starting_lives must be at least 1")

    if config.loop.tick_ms < 1:
        raise ValueError(f"loop.tick_ms must be positive, got {config.loop.tick_ms}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    field_data = raw["field"]
    field = FieldConfig(
        width=int(field_data["width"]),
        height=int(field_data["height"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        width=int(player_data["width"]),
        height=int(player_data["height"]),
        speed=int(player_data.get("speed", 6)),
        bottom_offset=int(player_data.get("bottom_offset", 60)),
        sprite=str(player_data.get("sprite", ""))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        initial_interval=int(spawn_data["initial_interval"]),
        min_interval=int(spawn_data["min_interval"]),
        interval_step=int(spawn_data.get("interval_step", 1)),
        pickup_chance=int(spawn_data["pickup_chance"]),
        roll_range=int(spawn_data.get("roll_range", 100))
    )

    obstacle = _parse_falling(raw["obstacle"], default_scale=0.6)
    pickup = _parse_falling(raw["pickup"], default_scale=1.0)

    session_data = raw["session"]
    session = SessionConfig(
        starting_lives=int(session_data["starting_lives"]),
        dodge_points=int(session_data["dodge_points"]),
        base_life_indicators=int(session_data.get("base_life_indicators", 3)),
        persist_on_quit=bool(session_data.get("persist_on_quit", False))
    )

    # Remaining sections are optional
    loop_data = raw.get("loop", {})
    loop = LoopConfig(tick_ms=int(loop_data.get("tick_ms", 16)))

    storage_data = raw.get("storage", {})
    storage = StorageConfig(
        scores_path=str(storage_data.get("scores_path", "scores.txt")),
        credentials_path=str(storage_data.get("credentials_path", "pass.txt"))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 36000)),
        max_objects=int(caps_data.get("max_objects", 64))
    )

    config = GameConfig(
        field=field,
        player=player,
        spawn=spawn,
        obstacle=obstacle,
        pickup=pickup,
        session=session,
        loop=loop,
        storage=storage,
        caps=caps
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
