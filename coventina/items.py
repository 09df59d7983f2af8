"""Things that occupy cells of the world grid: blocks, coins and rings."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

COIN_SPIN_SPEED = 2.0
RING_SPIN_SPEED = 3.0
BOB_HEIGHT = 0.5


class BlockType(IntEnum):
    """What a grid cell holds.

    Values from ``COLLECTIBLE`` upwards are picked up rather than collided with.
    """

    EMPTY = 0
    WALL = 1
    WATER = 2
    COIN = 3
    RING = 4

    COLLECTIBLE = 3


def _origin() -> list:
    return [0, 0, 0]


@dataclass
class MeshItem:
    """An item placed in the world grid.

    ``idx`` is the item's position in its own list in the mesh and ``midx``
    its cell in the grid; both are -1 until the item is placed.
    """

    pos: list = field(default_factory=_origin)
    type: int = BlockType.EMPTY
    idx: int = -1
    midx: int = -1
    valid: bool = True

    @property
    def center(self) -> tuple:
        """The centre of the item's cell."""
        x, y, z = self.pos
        return (x + 0.5, y + 0.5, z + 0.5)


@dataclass
class Cube(MeshItem):
    """A solid block: a wall or water."""

    type: int = BlockType.WALL


@dataclass
class Coin(MeshItem):
    """A coin to be collected."""

    type: int = BlockType.COIN


@dataclass
class Ring(MeshItem):
    """A ring to be collected."""

    type: int = BlockType.RING


@dataclass
class Bobber:
    """The spin and bob shared by every collectible of one kind.

    The angle grows at ``spin_speed`` radians per second and wraps to zero
    past a full turn; the height moves between zero and ``BOB_HEIGHT`` at one
    unit per second, turning at each end.
    """

    spin_speed: float = COIN_SPIN_SPEED
    y_angle: float = 0.0
    y_trans: float = 0.0
    y_dir: float = 0.0

    def update(self, dt) -> None:
        """Advance the animation by ``dt`` seconds."""
        self.y_angle += dt * self.spin_speed
        if self.y_angle > 2.0 * math.pi:
            self.y_angle = 0.0
        self.y_trans += dt * self.y_dir
        if self.y_trans <= 0.0:
            self.y_trans = 0.0
            self.y_dir = 1.0
        elif self.y_trans > BOB_HEIGHT:
            self.y_trans = BOB_HEIGHT
            self.y_dir = -1.0