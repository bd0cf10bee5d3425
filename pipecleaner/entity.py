"""Entities that live on the inside wall of the pipe."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from pipecleaner.visual import Color, Instance, TransformMatrix

PIPE_RADIUS = 1.0

Think = Callable[[Any, "Entity"], None]


@dataclass
class PipePosition:
    """A place on the pipe: angle around it and depth along it."""

    angle: float = 0.0
    depth: float = 0.0


def default_think(world: Any, entity: Entity) -> None:
    """Behaviour of an entity that does nothing."""
    return None


@dataclass(eq=False)
class Entity(Instance):
    """A moving, thinking object drawn with one of the registered models.

    Entities compare and hash by their ``id``.
    """

    id: int
    position: PipePosition = field(default_factory=PipePosition)
    rgb: list[float] = field(default_factory=lambda: [1.0, 1.0, 1.0])
    model_index: int = 0
    velocity: list[float] = field(default_factory=lambda: [0.0, 0.0])
    target_velocity: list[float] = field(default_factory=lambda: [0.0, 0.0])
    max_acceleration: float = 0.05
    max_speed: float = 1.0
    countdown: float = 0.0
    think: Think = default_think
    fire: bool = False
    firing_state: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def transform(self) -> TransformMatrix:
        """Place the model on the pipe wall, facing the pipe's axis."""
        sin = math.sin(self.position.angle)
        cos = math.cos(self.position.angle)
        return (
            cos, sin, 0.0, PIPE_RADIUS * cos,
            sin, -cos, 0.0, PIPE_RADIUS * sin,
            0.0, 0.0, 1.0, self.position.depth,
        )

    def color(self) -> Color:
        """The entity's RGB colour."""
        r, g, b = self.rgb
        return (r, g, b)

    def model(self) -> int:
        """Index of the model the entity is drawn with."""
        return self.model_index


class EntityManager:
    """Creates entities with unique ids and keeps the live ones."""

    def __init__(self) -> None:
        self._next_id = 0
        self._entities: dict[int, Entity] = {}

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity: object) -> bool:
        return isinstance(entity, Entity) and entity.id in self._entities

    def __iter__(self) -> Iterator[Entity]:
        # A snapshot, so entities may be added or removed while iterating.
        return iter(list(self._entities.values()))

    def iter_visual(self) -> Iterator[Instance]:
        """Iterate over the live entities as drawable instances."""
        return iter(self)

    def create(self) -> Entity:
        """Create a new entity with default values and a fresh id."""
        entity = Entity(self._next_id)
        self._next_id += 1
        self._entities[entity.id] = entity
        return entity

    def remove(self, entity: Entity) -> None:
        """Drop an entity; removing one that is not live does nothing."""
        self._entities.pop(entity.id, None)