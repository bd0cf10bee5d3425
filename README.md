# pipecleaner

A small arcade game played on the inside of a pipe. Your ship rides the
pipe wall, grey rings drift towards you to give a sense of speed, and you
fire alternating shots down the tube. Everything is drawn as wireframe
lines in a pygame window.

## Installing

```
pip install .
```

## Playing

```
pipecleaner
```

Controls:

- `A` / `D` — move around the pipe in one direction or the other
- `Space` — hold to fire
- close the window to quit

The game advances in fixed steps of 1/120 of a second. The ship speeds up
and slows down at a limited rate rather than changing speed at once.
While fire is held, a bullet leaves every 0.03 seconds, alternating
between the two sides of the ship; bullets fly down the pipe and
disappear after three seconds.

There are no enemies, scoring or levels yet: the game is the ship, its
shots and the scrolling pipe.

## Using the engine from code

The game logic can be driven without opening a window:

```python
from pipecleaner.game import Game

game = Game()
game.set_input(left=0.0, right=1.0, fire=True)
for _ in range(120):
    game.step()

print(game.player.position, len(game.world.entities))
```

The building blocks are available on their own:

- `pipecleaner.geo` — wireframe point and segment-index lists
  (`circle_pts`, `loop_indices`, `path_indices`, `cube_pts`,
  `cube_indices`, `bullet_pts`, `bullet_indices`)
- `pipecleaner.visual` — `BaseMesh.thicken()` turns line segments into
  quads (`ThickMesh`); `Instance` is the interface for anything drawable,
  and its `attributes()` packs transform and colour into a 64-byte record;
  `ManagerBuilder` registers meshes and builds a `Manager`, which lays
  them out in byte buffers and returns per-model draw ranges from
  `update()`
- `pipecleaner.entity` — `PipePosition`, `Entity` (a drawable object with
  velocity, a countdown and a `think` callback) and `EntityManager`
- `pipecleaner.world` — `World`, which runs every entity's `think`, then
  its physics, each step, and yields the rings and entities to draw from
  `geometry()`; `RingInstance` is one ring of the pipe
- `pipecleaner.camera` — `Camera`, holding the field of view and aspect
  ratio used for projection, packable with `to_bytes()`
- `pipecleaner.arith` — `add()`, addition of unsigned 64-bit integers that
  raises `OverflowError` instead of wrapping

## Running the tests

```
pip install ".[test]"
pytest
```