# coventina

The game logic behind a small first-person arcade game set in a block
world. By default the player has ninety seconds to pick up coins and rings
scattered around a maze and bring them to the well. Stepping onto a water
block while holding at least two coins and one ring scores a point and
empties the player's hands; six points win.

The package holds the state and the rules of the game:

- `coventina.matrix`: `Matrices`, the projection, view and model matrices,
  with `translate`, `rotate`, `scale`, `ortho`, `perspective`, `clear` and
  the combined `mvp()`.
- `coventina.shapes`: the `Shape`, `TexturedShape` and
  `LightenTexturedShape` dataclasses, and the `circle` and `outline_circle`
  builders.
- `coventina.holden`: `parse_holden` and `read_holden` for the binary
  `.holden` model format; malformed input raises `HoldenError`.
- `coventina.geometry`: `Mesh` data for the coin, the cube and the floor
  (`coin_mesh`, `cube_mesh`, `floor_mesh`) and the textured splash quad
  (`splash_shape`).
- `coventina.items`: `BlockType`, the placeable `MeshItem`, `Cube`, `Coin`
  and `Ring`, and `Bobber`, the spin-and-bob animation of collectibles.
- `coventina.cubemesh`: `CubeMesh`, the 64 × 8 × 64 grid of blocks and
  collectibles, filled from a text map (`read_map`) or a list of items
  (`read_cubes`), with `add_randoms` to scatter coins and rings.
- `coventina.player`: `Player`, with running, strafing, turning, looking,
  pointer mode, jumping, wall climbing, collision against the grid and
  picking up items.
- `coventina.game`: `GameSession`, which ties the grid, the player, the
  collectible animations, the cuttlefish and the countdown together and
  takes key presses as `Key` values; also `FrameClock`, `CuttleFish`,
  `Thumbstick` and `screen_to_world`.

## A short example

```python
from coventina.cubemesh import CubeMesh
from coventina.game import GameSession, Key

mesh = CubeMesh()
mesh.read_map("maze.grid")
mesh.add_randoms(6)

session = GameSession(mesh=mesh, sound_handler=print)
session.key_down(Key.FORWARD)
for _ in range(120):
    session.update(1 / 60)
session.key_up(Key.FORWARD)

player = session.player
print(player.pos, player.coin_count, player.ring_count, player.score)
```

The first sixty calls to `GameSession.update` are the splash frames: the
world moves, but the countdown starts only after them. When the time runs
out, `result` becomes `"Winner!"` or `"Loser!"` and the sound handler is
given a `Fanfare`. A `time_limit` of `None` plays forever.

## Sounds

Nothing is played by the package. `Player` and `GameSession` take a
`sound_handler` callable, which is given a `Sound` (`PICKUP`, `DROP`,
`JUMP`) or a `Fanfare` (`WINNER`, `LOSER`) whenever one should be heard.

## Map files

`CubeMesh.read_map` reads a text grid, one row of the maze per line. A
space is empty ground, `*` is where the player starts, `~` is water, `+` is
the water block at the centre of the well, `=` is a one-block wall, and any
other character is a two-block wall.

`CubeMesh.read_cubes` reads lines of four integers, `x y z type`; blank
lines and lines starting with `#` are skipped, and lines that do not parse
are logged and skipped.

## What the package does not do

It draws nothing, opens no window, reads no keyboard, mouse or touch
device, and plays no audio: the caller turns input into `Key` values and
`Thumbstick` calls, calls `update` each frame, and renders the state itself
from `Matrices`, the shapes and the meshes. Texture images are named, not
loaded. There is no command to run.

## Requirements

Python 3.10 or later and numpy.