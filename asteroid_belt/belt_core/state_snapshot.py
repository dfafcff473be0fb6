"""
State Snapshot
==============

Immutable per-frame view of the game, handed to renderers and agents.
Packs entity state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import numpy as np

from asteroid_belt.belt_core.config_loader import GameConfig, get_config
from asteroid_belt.belt_core.entities import Entity, EntityKind, Rect
from asteroid_belt.belt_core.scoring import split_life_indicators

# Integer codes for obj_kind arrays (-1 marks an empty slot)
KIND_CODES = {
    EntityKind.PLAYER: 0,
    EntityKind.OBSTACLE: 1,
    EntityKind.PICKUP: 2,
}


@dataclass(frozen=True)
class EntityView:
    """Read-only copy of one entity at the end of a tick."""
    kind: EntityKind
    x: int
    y: int
    width: int
    height: int
    vx: int
    vy: int
    sprite: str
    bounds: Rect

    @staticmethod
    def of(entity: Entity) -> "EntityView":
        return EntityView(
            kind=entity.kind,
            x=entity.x,
            y=entity.y,
            width=entity.width,
            height=entity.height,
            vx=entity.vx,
            vy=entity.vy,
            sprite=entity.sprite,
            bounds=entity.bounds()
        )

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class FrameSnapshot:
    """
    Complete "frame ready" payload.

    Safe to hand to another thread: every field is immutable.
    """
    tick: int
    state: str
    player: Optional[EntityView]
    objects: Tuple[EntityView, ...]
    score: int
    lives: int
    high_score: int
    spawn_interval: int

    # Field info (for normalization)
    field_width: int
    field_height: int
    base_life_indicators: int = 3

    @property
    def life_indicators(self) -> Tuple[int, int]:
        """(regular, extra) heart counts for the HUD."""
        return split_life_indicators(self.lives, self.base_life_indicators)

    @property
    def objects_count(self) -> int:
        return len(self.objects)

    def to_obs_dict(self, max_objects: int) -> Dict[str, np.ndarray]:
        """
        Convert to Gymnasium observation dictionary.

        Args:
            max_objects: Size of the padded per-object arrays. Objects
                beyond this count are dropped (oldest first are kept).
        """
        obj_kind = np.full(max_objects, -1, dtype=np.int8)
        obj_x = np.zeros(max_objects, dtype=np.float32)
        obj_y = np.zeros(max_objects, dtype=np.float32)
        obj_size = np.zeros(max_objects, dtype=np.float32)
        obj_vy = np.zeros(max_objects, dtype=np.float32)
        obj_mask = np.zeros(max_objects, dtype=bool)

        for i, view in enumerate(self.objects[:max_objects]):
            obj_kind[i] = KIND_CODES[view.kind]
            obj_x[i] = view.x
            obj_y[i] = view.y
            obj_size[i] = view.width
            obj_vy[i] = view.vy
            obj_mask[i] = True

        player_x = self.player.x if self.player is not None else 0

        return {
            # Core state
            "player_x": np.array(player_x, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "spawn_interval": np.array(self.spawn_interval, dtype=np.int32),
            "objects_count": np.array(min(self.objects_count, max_objects), dtype=np.int32),

            # Object arrays
            "obj_kind": obj_kind,
            "obj_x": obj_x,
            "obj_y": obj_y,
            "obj_size": obj_size,
            "obj_vy": obj_vy,
            "obj_mask": obj_mask,
        }


class SnapshotBuilder:
    """Builds frame snapshots from live game state."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._field_width = config.field.width
        self._field_height = config.field.height
        self._base_lives = config.session.base_life_indicators

    def build(
        self,
        tick: int,
        state: str,
        player: Optional[Entity],
        objects: List[Entity],
        score: int,
        lives: int,
        high_score: int,
        spawn_interval: int
    ) -> FrameSnapshot:
        """Build a snapshot from current game state."""
        return FrameSnapshot(
            tick=tick,
            state=state,
            player=EntityView.of(player) if player is not None else None,
            objects=tuple(EntityView.of(e) for e in objects),
            score=score,
            lives=max(0, lives),
            high_score=high_score,
            spawn_interval=spawn_interval,
            field_width=self._field_width,
            field_height=self._field_height,
            base_life_indicators=self._base_lives
        )
