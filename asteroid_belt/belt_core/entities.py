"""
Entities
========

Shared shape of every simulated object (player ship, asteroids, hearts).

A single Entity dataclass carries position, size, velocity and a hitbox
scale; the EntityKind tag selects per-kind behavior instead of subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from asteroid_belt.belt_core.config_loader import GameConfig, FallingConfig, get_config


class EntityKind(Enum):
    """Tag distinguishing the three kinds of entities."""
    PLAYER = "player"
    OBSTACLE = "obstacle"
    PICKUP = "pickup"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in field pixels (y grows downward)."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def intersects(self, other: "Rect") -> bool:
        """
        True if the rectangles overlap on both axes.

        Touching edges count as overlap (non-strict comparison).
        """
        return (
            self.x <= other.right
            and other.x <= self.right
            and self.y <= other.bottom
            and other.y <= self.bottom
        )

    def contains(self, other: "Rect") -> bool:
        """True if other lies fully inside this rectangle."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )


@dataclass
class Entity:
    """
    Runtime representation of one simulated object.

    The collision rectangle returned by bounds() is shrunk by hitbox_scale
    and stays centered inside the visual rectangle.
    """
    kind: EntityKind
    x: int
    y: int
    width: int
    height: int
    vx: int = 0
    vy: int = 0
    hitbox_scale: float = 1.0
    sprite: str = ""

    @property
    def rect(self) -> Rect:
        """Visual rectangle."""
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def is_player(self) -> bool:
        return self.kind is EntityKind.PLAYER

    def update(self) -> None:
        """Advance position by one tick of velocity."""
        self.x += self.vx
        self.y += self.vy

    def bounds(self) -> Rect:
        """Collision rectangle, centered on the visual rectangle."""
        bw = max(1, int(round(self.width * self.hitbox_scale)))
        bh = max(1, int(round(self.height * self.hitbox_scale)))
        bx = self.x + (self.width - bw) // 2
        by = self.y + (self.height - bh) // 2
        return Rect(bx, by, bw, bh)

    def clamp_to_field(self, field_width: int) -> None:
        """Keep the visual rectangle within [0, field_width] horizontally."""
        if self.x + self.width > field_width:
            self.x = field_width - self.width
        if self.x < 0:
            self.x = 0

    def __repr__(self) -> str:
        return (
            f"Entity({self.kind.value} @ ({self.x}, {self.y}) "
            f"{self.width}x{self.height} v=({self.vx}, {self.vy}))"
        )


def scale_to_sprite_width(
    entity: Entity,
    desired_width: int,
    sprite_width: int,
    sprite_height: int
) -> None:
    """
    Resize an entity to desired_width, keeping the sprite's aspect ratio.

    Does nothing when the sprite has no usable dimensions.
    """
    if sprite_width <= 0 or sprite_height <= 0:
        return
    entity.width = desired_width
    entity.height = max(1, int(round(sprite_height / sprite_width * desired_width)))


def make_player(config: Optional[GameConfig] = None) -> Entity:
    """
    Create the player ship centered horizontally near the field bottom.

    Args:
        config: Game configuration. Uses default if None.
    """
    if config is None:
        config = get_config()

    width = config.player.width
    return Entity(
        kind=EntityKind.PLAYER,
        x=config.field.width // 2 - width // 2,
        y=config.player_y,
        width=width,
        height=config.player.height,
        sprite=config.player.sprite
    )


def _make_falling(kind: EntityKind, falling: FallingConfig, x: int, size: int, speed: int) -> Entity:
    # Spawned fully above the field so it enters from the top
    return Entity(
        kind=kind,
        x=x,
        y=-size,
        width=size,
        height=size,
        vx=0,
        vy=speed,
        hitbox_scale=falling.hitbox_scale,
        sprite=falling.sprite
    )


def make_obstacle(x: int, size: int, speed: int, config: Optional[GameConfig] = None) -> Entity:
    """Create an asteroid of the given size falling at speed px/tick."""
    if config is None:
        config = get_config()
    return _make_falling(EntityKind.OBSTACLE, config.obstacle, x, size, speed)


def make_pickup(x: int, size: int, speed: int, config: Optional[GameConfig] = None) -> Entity:
    """Create a heart pickup of the given size falling at speed px/tick."""
    if config is None:
        config = get_config()
    return _make_falling(EntityKind.PICKUP, config.pickup, x, size, speed)
