"""The world grid that holds blocks, coins and rings."""

from __future__ import annotations

import logging
import os
import random
import re
from typing import Optional, Union

from coventina.items import BlockType, Coin, Cube, MeshItem, Ring

logger = logging.getLogger(__name__)

GRID_X = 64
GRID_Z = 64
GRID_Y = 8

X_OFFSET = GRID_X // 2
Z_OFFSET = GRID_Z // 2
Y_OFFSET = 1

DEFAULT_WELL_CENTER = (0, -5)
DEFAULT_PLAYER_START = (0, 3)

SAFE_RADIUS = 7

_INT = re.compile(r"\s*([+-]?\d+)")


def _cell_index(x: int, y: int, z: int) -> Optional[int]:
    gx, gy, gz = x + X_OFFSET, y + Y_OFFSET, z + Z_OFFSET
    if not (0 <= gx < GRID_X and 0 <= gy < GRID_Y and 0 <= gz < GRID_Z):
        return None
    return gy * GRID_X * GRID_Z + gz * GRID_X + gx


def _read_lines(path: Union[str, os.PathLike]) -> list:
    """Return the newline-terminated lines of a file; a final unterminated one is dropped."""
    with open(path, "rb") as handle:
        data = handle.read()
    return data.decode("latin-1").split("\n")[:-1]


def _scan_ints(line: str, count: int) -> Optional[list]:
    values = []
    offset = 0
    for _ in range(count):
        match = _INT.match(line, offset)
        if match is None:
            return None
        values.append(int(match.group(1)))
        offset = match.end()
    return values


def _block_type(value: int) -> int:
    try:
        return BlockType(value)
    except ValueError:
        return value


class CubeMesh:
    """A fixed grid of cells, each empty or holding one item."""

    def __init__(self) -> None:
        self._grid: list = [None] * (GRID_X * GRID_Y * GRID_Z)
        self.cubes: list = []
        self.coins: list = []
        self.rings: list = []
        self.well_center = DEFAULT_WELL_CENTER
        self.player_start = DEFAULT_PLAYER_START

    def get_node(self, x, y, z) -> MeshItem:
        """Return the item at a cell, or an empty item if there is none."""
        index = _cell_index(x, y, z)
        if index is None or self._grid[index] is None:
            return MeshItem()
        return self._grid[index]

    def clear_node(self, node: MeshItem) -> None:
        """Mark an item as taken and its cell as empty."""
        if node.midx < 0:
            return
        item = self._grid[node.midx]
        if item is None or item.type == BlockType.EMPTY:
            return
        item.valid = False
        item.type = BlockType.EMPTY

    def _place(self, item: MeshItem, items: list, stacks_on) -> bool:
        index = _cell_index(*item.pos)
        if index is None:
            raise ValueError(f"position {item.pos} is outside the grid")
        while self._grid[index] is not None and stacks_on(self._grid[index]):
            above = _cell_index(item.pos[0], item.pos[1] + 1, item.pos[2])
            if above is None:
                logger.warning("overlap at %s", item.pos)
                return False
            item.pos[1] += 1
            index = above
        if self._grid[index] is not None:
            logger.warning("overlap at %s", item.pos)
            return False
        items.append(item)
        item.idx = len(items) - 1
        item.midx = index
        self._grid[index] = item
        return True

    def add_cube(self, cube: Cube) -> bool:
        """Place a block, stacking it on any blocks already in its column.

        Returns False if it lands on something else or the column is full.
        """
        return self._place(
            cube,
            self.cubes,
            lambda cell: BlockType.EMPTY < cell.type <= BlockType.WATER,
        )

    def add_coin(self, coin: Coin) -> bool:
        """Place a coin above whatever already fills its column."""
        coin.type = BlockType.COIN
        return self._place(coin, self.coins, lambda cell: True)

    def add_ring(self, ring: Ring) -> bool:
        """Place a ring above whatever already fills its column."""
        ring.type = BlockType.RING
        return self._place(ring, self.rings, lambda cell: True)

    def read_map(self, path) -> None:
        """Load a character map of the ground level.

        Each line is a row of increasing z starting at the far edge of the
        grid, each character a column of increasing x.  ``*`` marks the
        player's start, ``~`` water, ``+`` water at the well's centre, ``=`` a
        wall one block high; any other character but space is a wall two
        blocks high.
        """
        self.well_center = DEFAULT_WELL_CENTER
        self.player_start = DEFAULT_PLAYER_START
        for z, line in enumerate(_read_lines(path), start=-Z_OFFSET):
            for column, char in enumerate(line):
                x = column - X_OFFSET
                if char == "*":
                    self.player_start = (x, z)
                elif char == " ":
                    continue
                elif char == "~":
                    self.add_cube(Cube(pos=[x, 0, z], type=BlockType.WATER))
                elif char == "+":
                    self.well_center = (x, z)
                    self.add_cube(Cube(pos=[x, 0, z], type=BlockType.WATER))
                elif char == "=":
                    self.add_cube(Cube(pos=[x, 0, z], type=BlockType.WALL))
                else:
                    self.add_cube(Cube(pos=[x, 0, z], type=BlockType.WALL))
                    self.add_cube(Cube(pos=[x, 1, z], type=BlockType.WALL))

    def read_cubes(self, path) -> None:
        """Load items from lines of ``x y z type``.

        Blank lines and lines starting with ``#`` are skipped; lines that do
        not start with four integers are reported and skipped.
        """
        for number, line in enumerate(_read_lines(path), start=1):
            stripped = line.lstrip(" \t")
            if not stripped or stripped.startswith("#"):
                continue
            values = _scan_ints(line, 4)
            if values is None:
                logger.error("%s: parse error on line %d: %s", path, number, line)
                continue
            x, y, z, kind = values
            if kind == BlockType.COIN:
                self.add_coin(Coin(pos=[x, y, z]))
            elif kind == BlockType.RING:
                self.add_ring(Ring(pos=[x, y, z]))
            else:
                self.add_cube(Cube(pos=[x, y, z], type=_block_type(kind)))

    def add_randoms(self, win_score, rng: Optional[random.Random] = None) -> None:
        """Scatter coins and rings at random, away from the start area.

        Places ``2 * win_score + 5`` coins and ``win_score + 3`` rings.
        """
        rng = rng or random.Random()

        def spot() -> list:
            while True:
                x = int(rng.random() * GRID_X - X_OFFSET)
                z = int(rng.random() * GRID_Z - Z_OFFSET)
                if not (abs(x) <= SAFE_RADIUS and abs(z - 1) <= SAFE_RADIUS):
                    return [x, 0, z]

        for _ in range(win_score * 2 + 5):
            self.add_coin(Coin(pos=spot()))
        for _ in range(win_score + 3):
            self.add_ring(Ring(pos=spot()))