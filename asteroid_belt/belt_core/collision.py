"""
Collision System
================

Per-tick update of falling objects, bounding-box tests against the player,
and removal of collided or off-field objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from asteroid_belt.belt_core.entities import Entity, EntityKind


class EventType(Enum):
    """What happened to a falling object this tick."""
    COLLIDED = "collided"
    MISSED = "missed"


@dataclass(frozen=True)
class LifecycleEvent:
    """A falling object leaving play, either by hitting the player or the floor."""
    event_type: EventType
    entity: Entity

    @property
    def kind(self) -> EntityKind:
        return self.entity.kind

    def __repr__(self) -> str:
        return f"LifecycleEvent({self.event_type.value} {self.entity.kind.value})"


class CollisionEngine:
    """
    Runs the update/test/remove pass over the active-object list.

    The pass is two-phase: every object is advanced and classified first,
    then all classified objects are removed together. Each object yields at
    most one event per tick; a collision takes precedence over a miss.
    """

    def __init__(self) -> None:
        self._collisions: int = 0
        self._misses: int = 0

    @property
    def collisions(self) -> int:
        """Total collision events since the last reset."""
        return self._collisions

    @property
    def misses(self) -> int:
        """Total miss events since the last reset."""
        return self._misses

    def run(
        self,
        objects: List[Entity],
        player: Entity,
        field_height: int
    ) -> List[LifecycleEvent]:
        """
        Advance and test every active object, then drop finished ones.

        Args:
            objects: Active-object list, mutated in place.
            player: The player entity.
            field_height: Bottom edge of the field in pixels.

        Returns:
            Events in list order.
        """
        player_bounds = player.bounds()
        events: List[LifecycleEvent] = []
        finished: List[int] = []

        for index, entity in enumerate(objects):
            entity.update()

            if entity.bounds().intersects(player_bounds):
                events.append(LifecycleEvent(EventType.COLLIDED, entity))
                finished.append(index)
            elif entity.y > field_height:
                events.append(LifecycleEvent(EventType.MISSED, entity))
                finished.append(index)

        if finished:
            done = set(finished)
            objects[:] = [e for i, e in enumerate(objects) if i not in done]

        for event in events:
            if event.event_type is EventType.COLLIDED:
                self._collisions += 1
            else:
                self._misses += 1

        return events

    def reset(self) -> None:
        """Reset event counters."""
        self._collisions = 0
        self._misses = 0
