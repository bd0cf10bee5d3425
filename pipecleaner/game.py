"""The playable game: a player ship circling the pipe and shooting."""

from __future__ import annotations

import argparse
import dataclasses
import math
import sys
import time
from collections.abc import Iterable, Sequence

import pygame

from pipecleaner.camera import Camera
from pipecleaner.entity import Entity, PipePosition
from pipecleaner.geo import (
    Point,
    bullet_indices,
    bullet_pts,
    cube_indices,
    cube_pts,
)
from pipecleaner.visual import (
    BaseMesh,
    Instance,
    ManagerBuilder,
    ThickMesh,
    TransformMatrix,
)
from pipecleaner.world import FRAME_DURATION, World

RING_COUNT = 20
BULLET_LENGTH = 0.2
BULLET_SPEED = 10.0
BULLET_LIFETIME = 3.0
BULLET_COLOR = [1.0, 1.0, 0.0]
MUZZLE_DEPTH = 0.05
MUZZLE_SPREAD = 0.02
FIRE_INTERVAL = 0.03

PLAYER_START = PipePosition(angle=3.0 * math.tau / 4.0, depth=1.15)
PLAYER_COLOR = [0.0, 1.0, 1.0]
PLAYER_MAX_ACCELERATION = 80.0
PLAYER_MAX_SPEED = 8.0

WINDOW_TITLE = "Pipecleaner"
WINDOW_SIZE = (800, 600)
VFOV_DEGREES = 90.0
_NEAR_Z = 1e-3
_LINE_WIDTH = 2


def _bullet_think(world: World, bullet: Entity) -> None:
    if bullet.countdown > 0.0:
        bullet.countdown -= FRAME_DURATION
    else:
        world.remove_entity(bullet)


class Game:
    """The world with its player, driven by left, right and fire inputs."""

    def __init__(self, ring_count: int = RING_COUNT) -> None:
        self.builder = ManagerBuilder()
        self.world = World(self.builder, ring_count)
        self.cube_model = self.builder.register_model(
            BaseMesh(cube_pts(), cube_indices()).thicken()
        )
        self.bullet_model = self.builder.register_model(
            BaseMesh(bullet_pts(BULLET_LENGTH), bullet_indices()).thicken()
        )

        self.left = 0.0
        self.right = 0.0
        self.fire = False

        self.player = self.world.place_entity(PLAYER_START)
        self.player.rgb = list(PLAYER_COLOR)
        self.player.model_index = self.cube_model
        self.player.max_acceleration = PLAYER_MAX_ACCELERATION
        self.player.max_speed = PLAYER_MAX_SPEED
        self.player.think = self._player_think

    def _player_think(self, world: World, player: Entity) -> None:
        if player.countdown > 0.0:
            player.countdown -= FRAME_DURATION
            return
        if not player.fire:
            return

        spread = MUZZLE_SPREAD if player.firing_state == 0 else -MUZZLE_SPREAD
        muzzle = dataclasses.replace(
            player.position,
            angle=player.position.angle + spread,
            depth=player.position.depth + MUZZLE_DEPTH,
        )
        bullet = world.place_entity(muzzle)
        bullet.rgb = list(BULLET_COLOR)
        bullet.model_index = self.bullet_model
        bullet.countdown = BULLET_LIFETIME
        bullet.max_speed = BULLET_SPEED
        bullet.velocity = [0.0, BULLET_SPEED]
        bullet.think = _bullet_think

        player.firing_state = 1 - player.firing_state
        player.countdown = FIRE_INTERVAL

    def set_input(self, left: float, right: float, fire: bool) -> None:
        """Record how hard left and right are held (0 to 1) and whether to fire."""
        self.left = float(left)
        self.right = float(right)
        self.fire = bool(fire)

    def step(self) -> None:
        """Apply the current input to the player and advance one frame."""
        self.player.target_velocity[0] = (self.right - self.left) * self.player.max_speed
        self.player.fire = self.fire
        self.world.update()


def _apply(matrix: TransformMatrix, point: Point) -> Point:
    x, y, z = point
    rows = (matrix[0:4], matrix[4:8], matrix[8:12])
    px, py, pz = (a * x + b * y + c * z + d for a, b, c, d in rows)
    return (px, py, pz)


class _LineRenderer:
    """Draws each model's segments as perspective-projected lines."""

    def __init__(self, size: tuple[int, int], vfov_degrees: float,
                 meshes: Sequence[ThickMesh]) -> None:
        width, height = size
        self.camera = Camera.for_window(width, height, vfov_degrees)
        # Each segment was expanded into four identical vertices.
        self._segments = [
            [(v.this_position, v.other_position) for v in mesh.vertices[::4]]
            for mesh in meshes
        ]

    def _project(self, point: Point, width: int, height: int
                 ) -> tuple[float, float] | None:
        x, y, z = _apply(self.camera.world_to_screen(), point)
        if z <= _NEAR_Z:
            return None
        sx, sy, _ = self.camera.scale()
        ndc_x = x * sx / z
        ndc_y = y * sy / z
        return ((ndc_x + 1.0) / 2.0 * width, (1.0 - ndc_y) / 2.0 * height)

    def render(self, screen: pygame.Surface, instances: Iterable[Instance]) -> None:
        width, height = screen.get_size()
        if height > 0:
            self.camera.update_width_height(width, height)
        screen.fill((0, 0, 0))
        for instance in instances:
            matrix = instance.transform()
            color = tuple(round(255 * c) for c in instance.color())
            for start, end in self._segments[instance.model()]:
                a = self._project(_apply(matrix, start), width, height)
                b = self._project(_apply(matrix, end), width, height)
                if a is not None and b is not None:
                    pygame.draw.line(screen, color, a, b, _LINE_WIDTH)
        pygame.display.flip()


def main(argv: Sequence[str] | None = None) -> int:
    """Open the game window and play until it is closed."""
    parser = argparse.ArgumentParser(
        prog="pipe-cleaner",
        description="Fly around the inside of a pipe: A and D move, Space fires.",
    )
    parser.parse_args(argv)

    game = Game()
    try:
        pygame.init()
        pygame.display.set_caption(WINDOW_TITLE)
        screen = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
    except pygame.error as exc:
        print(exc, file=sys.stderr)
        pygame.quit()
        return 1

    renderer = _LineRenderer(screen.get_size(), VFOV_DEGREES, game.builder.meshes)
    left = right = 0.0
    fire = False
    try:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    pressed = event.type == pygame.KEYDOWN
                    if event.key == pygame.K_a:
                        left = 1.0 if pressed else 0.0
                    elif event.key == pygame.K_d:
                        right = 1.0 if pressed else 0.0
                    elif event.key == pygame.K_SPACE:
                        fire = pressed
            if not running:
                break
            game.set_input(left, right, fire)
            game.step()
            renderer.render(pygame.display.get_surface(), game.world.geometry())
            time.sleep(FRAME_DURATION)
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())