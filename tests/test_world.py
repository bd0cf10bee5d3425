import math

import pytest

from pipecleaner.entity import PipePosition
from pipecleaner.geo import circle_pts, loop_indices
from pipecleaner.visual import BaseMesh, ManagerBuilder
from pipecleaner.world import (
    FRAME_DURATION,
    RING_COLOR,
    RING_RADIUS,
    RING_SEGMENTS,
    RingInstance,
    World,
)


def make_world(ring_ct=20):
    builder = ManagerBuilder()
    return builder, World(builder, ring_ct)


def test_ring_model_is_registered_first():
    builder, world = make_world()
    assert world.ring_model == 0
    expected = BaseMesh(
        circle_pts(RING_SEGMENTS, RING_RADIUS), loop_indices(RING_SEGMENTS)
    ).thicken()
    assert builder.meshes == [expected]


def test_ring_count_and_initial_positions():
    _, world = make_world(5)
    assert len(world.rings) == 5
    depths = [ring.transform()[11] for ring in world.rings]
    assert depths == [0.0, 1.0, 2.0, 3.0, 4.0]


def test_negative_ring_count_rejected():
    with pytest.raises(ValueError):
        World(ManagerBuilder(), -1)


def test_ring_color_and_model():
    _, world = make_world(3)
    for ring in world.rings:
        assert ring.color() == (0.55, 0.55, 0.55)
        assert ring.model() == world.ring_model


def test_ring_transform_uses_clock():
    ring = RingInstance((0.5, -0.5, 3.0), 7, lambda: 0.0)
    assert ring.transform() == (
        1.0, 0.0, 0.0, 0.5,
        0.0, 1.0, 0.0, -0.5,
        0.0, 0.0, 1.0, 3.0,
    )


def test_ring_offset_stays_within_one_unit():
    _, world = make_world(4)
    for _ in range(100):
        world.update()
        for i, ring in enumerate(world.rings):
            z = ring.transform()[11]
            assert i - 1 < z <= i


def test_progress_advances_per_update():
    _, world = make_world(1)
    assert world.progress == 0.0
    for _ in range(120):
        world.update()
    assert world.progress == pytest.approx(1.0)


def test_geometry_lists_rings_then_entities():
    _, world = make_world(3)
    a = world.place_entity(PipePosition(0.0, 1.0))
    b = world.place_entity(PipePosition(1.0, 2.0))
    items = list(world.geometry())
    assert items[:3] == world.rings
    assert set(items[3:]) == {a, b}
    assert len(items) == 5


def test_place_entity_copies_position():
    _, world = make_world(0)
    position = PipePosition(angle=0.25, depth=2.0)
    entity = world.place_entity(position)
    position.depth = 9.0
    assert entity.position == PipePosition(angle=0.25, depth=2.0)


def test_remove_entity():
    _, world = make_world(2)
    entity = world.place_entity(PipePosition())
    world.remove_entity(entity)
    assert entity not in world.entities
    assert list(world.geometry()) == world.rings


def test_depth_velocity_moves_entity():
    _, world = make_world(0)
    entity = world.place_entity(PipePosition(0.0, 1.0))
    entity.velocity = [0.0, 10.0]
    for _ in range(120):
        world.update()
    assert entity.position.depth == pytest.approx(11.0)
    assert entity.velocity == [0.0, 10.0]


def test_angular_velocity_reaches_target_without_overshoot():
    _, world = make_world(0)
    entity = world.place_entity(PipePosition())
    entity.max_acceleration = 80.0
    entity.target_velocity = [8.0, 0.0]
    previous = 0.0
    for _ in range(30):
        world.update()
        assert previous <= entity.velocity[0] <= 8.0
        previous = entity.velocity[0]
    assert entity.velocity[0] == 8.0
    assert entity.position.angle > 0.0


def test_angular_velocity_slows_down_to_target():
    _, world = make_world(0)
    entity = world.place_entity(PipePosition())
    entity.max_acceleration = 80.0
    entity.velocity = [0.0, 0.0]
    entity.target_velocity = [-8.0, 0.0]
    for _ in range(30):
        world.update()
        assert entity.velocity[0] >= -8.0
    assert entity.velocity[0] == -8.0
    assert entity.position.angle < 0.0


def test_still_entity_does_not_move():
    _, world = make_world(0)
    entity = world.place_entity(PipePosition(1.5, 2.5))
    for _ in range(10):
        world.update()
    assert entity.position == PipePosition(1.5, 2.5)


def test_think_called_once_per_update():
    _, world = make_world(0)
    calls = []
    entity = world.place_entity(PipePosition())
    entity.think = lambda w, e: calls.append((w, e))
    world.update()
    world.update()
    assert calls == [(world, entity), (world, entity)]


def test_spawned_entity_thinks_from_next_frame():
    _, world = make_world(0)
    thought = []
    children = []

    def child_think(w, e):
        thought.append(e.id)

    def parent_think(w, e):
        if len(w.entities) == 1:
            child = w.place_entity(PipePosition())
            child.think = child_think
            children.append(child)

    parent = world.place_entity(PipePosition())
    parent.think = parent_think
    world.update()
    assert len(world.entities) == 2
    assert len(children) == 1
    assert children[0] in world.entities
    assert thought == []
    world.update()
    assert len(world.entities) == 2
    assert thought == [children[0].id]


def test_think_can_remove_itself():
    _, world = make_world(1)
    entity = world.place_entity(PipePosition())
    entity.think = lambda w, e: w.remove_entity(e)
    world.update()
    assert len(world.entities) == 0
    assert list(world.geometry()) == world.rings


def test_single_update_advances_by_frame_duration():
    _, world = make_world(1)
    world.update()
    assert world.progress == pytest.approx(FRAME_DURATION)
    assert FRAME_DURATION * 120 == pytest.approx(1.0)
    color = world.rings[0].color()
    assert all(math.isclose(c, r) for c, r in zip(color, RING_COLOR))
    assert math.isclose(color[0], 0.55)