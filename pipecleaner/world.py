"""The pipe world: scrolling rings, entities and their per-frame update."""

from __future__ import annotations

import dataclasses
import itertools
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from pipecleaner.entity import Entity, EntityManager, PipePosition
from pipecleaner.geo import Point, circle_pts, loop_indices
from pipecleaner.visual import (
    BaseMesh,
    Color,
    Instance,
    ManagerBuilder,
    TransformMatrix,
)

FRAME_DURATION = 1.0 / 120.0
RING_RADIUS = 1.07
RING_SEGMENTS = 20
ZOOM_SPEED = 6.0
RING_COLOR: Color = (0.55, 0.55, 0.55)


@dataclass
class RingInstance(Instance):
    """One ring of the pipe, drifting towards the viewer as time passes.

    ``clock`` returns the world's elapsed time in seconds.
    """

    position: Point
    model_index: int
    clock: Callable[[], float] = field(repr=False, compare=False)

    def transform(self) -> TransformMatrix:
        """Translate the ring to its place, shifted by the zoom offset."""
        x, y, z = self.position
        offset = (self.clock() * ZOOM_SPEED) % 1.0
        return (
            1.0, 0.0, 0.0, x,
            0.0, 1.0, 0.0, y,
            0.0, 0.0, 1.0, z - offset,
        )

    def color(self) -> Color:
        """Rings are always mid grey."""
        return RING_COLOR

    def model(self) -> int:
        """Index of the ring model."""
        return self.model_index


class World:
    """Everything in the pipe, advanced one fixed frame at a time."""

    def __init__(self, builder: ManagerBuilder, ring_ct: int) -> None:
        if ring_ct < 0:
            raise ValueError("ring count must not be negative")
        ring_mesh = BaseMesh(
            circle_pts(RING_SEGMENTS, RING_RADIUS), loop_indices(RING_SEGMENTS)
        ).thicken()
        self.ring_model = builder.register_model(ring_mesh)
        self._progress = 0.0
        self.rings = [
            RingInstance((0.0, 0.0, float(i)), self.ring_model, self._clock)
            for i in range(ring_ct)
        ]
        self.entities = EntityManager()

    def _clock(self) -> float:
        return self._progress

    @property
    def progress(self) -> float:
        """Seconds of world time elapsed so far."""
        return self._progress

    def geometry(self) -> Iterator[Instance]:
        """Every drawable thing: the rings first, then the entities."""
        return itertools.chain(self.rings, self.entities.iter_visual())

    def place_entity(self, position: PipePosition) -> Entity:
        """Create an entity at a copy of ``position``."""
        entity = self.entities.create()
        entity.position = dataclasses.replace(position)
        return entity

    def remove_entity(self, entity: Entity) -> None:
        """Take an entity out of the world."""
        self.entities.remove(entity)

    def update(self) -> None:
        """Run every entity's behaviour, then move everything one frame."""
        self._update_logic()
        self._update_physics()
        self._progress += FRAME_DURATION

    def _update_logic(self) -> None:
        # The manager hands out a snapshot: entities spawned here think next frame.
        for entity in self.entities:
            entity.think(self, entity)

    def _update_physics(self) -> None:
        dt = FRAME_DURATION
        for entity in self.entities:
            vel_angular, vel_depth = entity.velocity
            target = entity.target_velocity[0]

            if target > vel_angular:
                accel = entity.max_acceleration
            elif target < vel_angular:
                accel = -entity.max_acceleration
            else:
                accel = 0.0

            entity.position.angle += 0.5 * dt * dt * accel + dt * vel_angular
            entity.position.depth += dt * vel_depth

            if target > vel_angular:
                vel_angular = min(vel_angular + dt * entity.max_acceleration, target)
            elif target < vel_angular:
                vel_angular = max(vel_angular - dt * entity.max_acceleration, target)

            entity.velocity = [vel_angular, vel_depth]