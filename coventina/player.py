"""The player: movement, looking around, jumping and collisions with the grid."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Callable, Optional

import numpy as np

from coventina.items import BlockType, MeshItem
from coventina.matrix import Matrices

logger = logging.getLogger(__name__)

FULL_TURN = 2.0 * math.pi
HALF_PI = math.pi / 2.0

PLAYER_SPEED = 6.0
JUMP_SPEED = 5.0
HOP_SPEED = 1.0
ROTATION_SPEED = math.radians(120.0)
GRAVITY_ACCEL = -9.0
PLAYER_HALF_WIDTH = 0.4
PLAYER_HALF_DEPTH = 0.3
PLAYER_HEIGHT = 2.0
PLAYER_EYE_LEVEL = 1.5

BOUNDS_MIN = (-PLAYER_HALF_WIDTH, 0.0, -PLAYER_HALF_DEPTH)
BOUNDS_MAX = (PLAYER_HALF_WIDTH, PLAYER_HEIGHT, PLAYER_HALF_DEPTH)

# Keeps the player just inside the cell below a blocking face.
_FACE_GAP = 0.99999
# True would allow unlimited climbing up walls.
_LADDER_EFFECT = False
_TURN_THRESHOLD = 0.01


class Sound(Enum):
    """Sounds the player asks to be played."""

    PICKUP = "pickup"
    DROP = "drop"
    JUMP = "jump"


class _Key(IntFlag):
    NONE = 0
    LEFT = 0x1
    RIGHT = 0x2
    FORWARD = 0x4
    BACKWARD = 0x8


def _initial_view() -> np.ndarray:
    view = np.identity(4, dtype=np.float64)
    view[1, 3] = -PLAYER_EYE_LEVEL
    return view


def _floor_cell(position, offsets) -> list:
    return [math.floor(p + o) for p, o in zip(position, offsets)]


@dataclass
class Player:
    """The player's state, updated once per frame.

    ``sound_handler`` is called with a :class:`Sound` whenever the player
    jumps, picks something up or scores.
    """

    pos: list = field(default_factory=lambda: [0.0, 0.0, 3.0])
    yangle: float = 0.0
    xangle: float = 0.0
    zspeed: float = 0.0
    xspeed: float = 0.0
    yspeed: float = 0.0
    yaccel: float = 0.0
    in_air: bool = False
    wall_climbing: bool = False
    eye_vector: tuple = (0.0, 0.0, -1.0)
    x_vector: tuple = (1.0, 0.0, 0.0)
    z_vector: tuple = (0.0, 0.0, -1.0)
    velocity: list = field(default_factory=lambda: [0.0, 0.0, 0.0])
    view_mat: np.ndarray = field(default_factory=_initial_view)
    y_angular_velocity: float = 0.0
    x_angular_velocity: float = 0.0
    pointer_mode: bool = False
    is_rotating: bool = False
    z_running: bool = False
    x_running: bool = False
    ring_count: int = 0
    coin_count: int = 0
    score: int = 0
    sound_handler: Optional[Callable[[Sound], None]] = field(default=None, repr=False)
    _keys: _Key = field(default=_Key.NONE, init=False, repr=False)
    _last_pos: list = field(default_factory=lambda: [0.0, 0.0, 0.0], init=False, repr=False)

    def _play(self, sound: Sound) -> None:
        if self.sound_handler is not None:
            self.sound_handler(sound)

    def _rebuild_view(self) -> None:
        yaw = Matrices()
        yaw.rotate(self.yangle, 0, 1, 0)
        turn = yaw.model
        self.z_vector = (turn[0, 2], 0.0, -turn[2, 2])
        self.x_vector = (turn[0, 0], 0.0, -turn[2, 0])

        view = Matrices()
        view.rotate(self.xangle, 1, 0, 0)
        view.rotate(self.yangle, 0, 1, 0)
        look = view.model
        self.eye_vector = (look[0, 2], look[1, 2], -look[2, 2])

        view.translate(-self.pos[0], -self.pos[1] - PLAYER_EYE_LEVEL, -self.pos[2])
        self.view_mat = view.model

    def update(self, dt) -> None:
        """Move, turn and rebuild the view for a frame of ``dt`` seconds."""
        self.pos = [p + v * dt for p, v in zip(self.pos, self.velocity)]

        if abs(self.y_angular_velocity) > _TURN_THRESHOLD:
            self.is_rotating = True
            self.yangle += self.y_angular_velocity * dt
            if self.yangle >= FULL_TURN:
                self.yangle -= FULL_TURN
            elif self.yangle < 0.0:
                self.yangle += FULL_TURN
        if abs(self.x_angular_velocity) > _TURN_THRESHOLD:
            self.is_rotating = True
            self.xangle += self.x_angular_velocity * dt
            self.xangle = max(-HALF_PI, min(HALF_PI, self.xangle))

        if self.is_rotating or self.pos != self._last_pos:
            self.is_rotating = False
            self._rebuild_view()

        self._last_pos = list(self.pos)

        velocity = [0.0, self.yspeed, 0.0]
        if not self.in_air or self.z_running:
            velocity = [v + self.zspeed * d for v, d in zip(velocity, self.z_vector)]
        if not self.in_air or self.x_running:
            velocity = [v + self.xspeed * d for v, d in zip(velocity, self.x_vector)]
        self.velocity = velocity

        self.yspeed += self.yaccel * dt
        self.yspeed = max(-JUMP_SPEED, min(JUMP_SPEED, self.yspeed))

    def run_forward(self) -> None:
        self._keys |= _Key.FORWARD
        self.zspeed = PLAYER_SPEED
        if not self.in_air:
            self.z_running = True

    def run_backward(self) -> None:
        self._keys |= _Key.BACKWARD
        self.zspeed = -PLAYER_SPEED
        if not self.in_air:
            self.z_running = True

    def stop_forward(self) -> None:
        """Release forward; resume backward if that key is still held."""
        self._keys &= ~_Key.FORWARD
        if self.zspeed > 0:
            self.zspeed = 0.0
            self.z_running = False
            if self._keys & _Key.BACKWARD:
                self.run_backward()

    def stop_backward(self) -> None:
        """Release backward; resume forward if that key is still held."""
        self._keys &= ~_Key.BACKWARD
        if self.zspeed < 0:
            self.zspeed = 0.0
            self.z_running = False
            if self._keys & _Key.FORWARD:
                self.run_forward()

    def run_left(self) -> None:
        self._keys |= _Key.LEFT
        self.xspeed = PLAYER_SPEED
        if not self.in_air:
            self.x_running = True

    def run_right(self) -> None:
        self._keys |= _Key.RIGHT
        self.xspeed = -PLAYER_SPEED
        if not self.in_air:
            self.x_running = True

    def stop_left(self) -> None:
        """Release left; resume right if that key is still held."""
        self._keys &= ~_Key.LEFT
        if self.xspeed > 0:
            self.xspeed = 0.0
            self.x_running = False
            if self._keys & _Key.RIGHT:
                self.run_right()

    def stop_right(self) -> None:
        """Release right; resume left if that key is still held."""
        self._keys &= ~_Key.RIGHT
        if self.xspeed < 0:
            self.xspeed = 0.0
            self.x_running = False
            if self._keys & _Key.LEFT:
                self.run_left()

    def run_direction(self, x, y) -> None:
        """Run with a sideways share ``x`` and a forward share ``y`` of full speed."""
        self.xspeed = x * PLAYER_SPEED
        self.zspeed = y * PLAYER_SPEED
        if not self.in_air:
            self.x_running = True
            self.z_running = True

    def stop_running(self) -> None:
        self.xspeed = 0.0
        self.zspeed = 0.0
        self.x_running = False
        self.z_running = False

    def set_rotation(self, direction) -> None:
        """Turn left (-1), right (1) or stop turning (0)."""
        self.y_angular_velocity = ROTATION_SPEED * direction

    def set_x_rotation(self, direction) -> None:
        """Look up (-1), down (1) or stop (0)."""
        self.x_angular_velocity = ROTATION_SPEED * direction

    def set_pointer_delta(self, x, y) -> None:
        """Turn by a pointer movement, in pointer mode while no key turns the view.

        Each component is taken as the sine of twice the turn; values beyond
        one count as one.
        """
        if not self.pointer_mode:
            return
        if self.y_angular_velocity != 0.0 or self.x_angular_velocity != 0.0:
            return
        if x != 0.0:
            qangle = math.asin(min(abs(x), 1.0)) * 0.5
            if x < 0.0:
                self.yangle -= qangle
                if self.yangle < 0.0:
                    self.yangle += FULL_TURN
            else:
                self.yangle += qangle
                if self.yangle >= FULL_TURN:
                    self.yangle -= FULL_TURN
            self.is_rotating = True
        if y != 0.0:
            qangle = math.asin(min(abs(y), 1.0)) * 0.5
            if y < 0.0:
                self.xangle = max(-HALF_PI, self.xangle - qangle)
            else:
                self.xangle = min(HALF_PI, self.xangle + qangle)
            self.is_rotating = True

    def toggle_pointer_mode(self) -> None:
        self.pointer_mode = not self.pointer_mode
        if self.pointer_mode:
            self.y_angular_velocity = 0.0
            self.x_angular_velocity = 0.0

    def jump(self) -> None:
        """Jump, unless already moving vertically."""
        if self.yspeed != 0.0:
            return
        self.yspeed = JUMP_SPEED
        self.yaccel = GRAVITY_ACCEL
        self.in_air = True
        self._play(Sound.JUMP)

    def handle_blocks(self, mesh, dt) -> None:
        """Resolve collisions with the grid for the move about to happen."""
        nextpos = [p + v * dt for p, v in zip(self.pos, self.velocity)]

        curmins = _floor_cell(self.pos, BOUNDS_MIN)
        curmaxs = _floor_cell(self.pos, BOUNDS_MAX)
        nextmins = _floor_cell(nextpos, BOUNDS_MIN)
        nextmaxs = _floor_cell(nextpos, BOUNDS_MAX)

        climbing = False

        def can_climb() -> bool:
            return self.z_running and self.in_air and self.yspeed > 0

        x_range = range(nextmins[0], nextmaxs[0] + 1)
        z_range = range(nextmins[2], nextmaxs[2] + 1)

        for y in range(nextmins[1], nextmaxs[1] + 1):
            for x in x_range:
                for z in z_range:
                    node = mesh.get_node(x, y, z)
                    if node.type >= BlockType.COLLECTIBLE:
                        self.got_collectible(mesh, node)
                        continue
                    if node.type == BlockType.EMPTY:
                        continue

                    if x < curmins[0]:
                        self.velocity[0] = 0.0
                        climbing = climbing or can_climb()
                        self.pos[0] = curmins[0] - BOUNDS_MIN[0]
                    elif x > curmaxs[0]:
                        self.velocity[0] = 0.0
                        climbing = climbing or can_climb()
                        self.pos[0] = curmaxs[0] + _FACE_GAP - BOUNDS_MAX[0]
                    if z < curmins[2]:
                        self.velocity[2] = 0.0
                        climbing = climbing or can_climb()
                        self.pos[2] = curmins[2] - BOUNDS_MIN[2]
                    elif z > curmaxs[2]:
                        self.velocity[2] = 0.0
                        climbing = climbing or can_climb()
                        self.pos[2] = curmaxs[2] + _FACE_GAP - BOUNDS_MAX[2]
                    if y < curmins[1]:
                        self.velocity[1] = 0.0
                        self.in_air = False
                        self.yspeed = 0.0
                        self.yaccel = 0.0
                        self.pos[1] = curmins[1] - BOUNDS_MIN[1]
                        nextpos[1] = self.pos[1]
                        nextmins[1] = curmins[1]
                    elif y > curmaxs[1]:
                        self.velocity[1] = 0.0
                        self.yspeed = 0.0
                        self.pos[1] = curmaxs[1] + _FACE_GAP - BOUNDS_MAX[1]
                        nextpos[1] = self.pos[1]
                        break

        if climbing:
            self.wall_climbing = True
            if _LADDER_EFFECT:
                self.yaccel = 0.0
        elif self.wall_climbing:
            self.wall_climbing = False
            if self.yspeed > 0:
                self.yaccel = GRAVITY_ACCEL
                self.yspeed = HOP_SPEED

        if self.yspeed < 0.0 and nextpos[1] <= 0.0:
            self.in_air = False
            self.velocity[0] = 0.0
            self.yspeed = 0.0
            self.yaccel = 0.0
            self.pos[1] = 0.0 - BOUNDS_MIN[1]
        elif self.yaccel > GRAVITY_ACCEL and nextmins[1] > 0:
            self._check_footing(mesh, nextmins, nextmaxs)

    def _check_footing(self, mesh, nextmins, nextmaxs) -> None:
        on_block = False
        y = nextmins[1] - 1
        for x in range(nextmins[0], nextmaxs[0] + 1):
            for z in range(nextmins[2], nextmaxs[2] + 1):
                node = mesh.get_node(x, y, z)
                if node.type >= BlockType.COLLECTIBLE:
                    self.got_collectible(mesh, node)
                    continue
                if node.type != BlockType.EMPTY:
                    on_block = True
                    if (
                        node.type == BlockType.WATER
                        and self.coin_count > 1
                        and self.ring_count > 0
                    ):
                        self._play(Sound.DROP)
                        self.score += 1
                        self.coin_count = 0
                        self.ring_count = 0
                    break
        if not on_block:
            self.yaccel = GRAVITY_ACCEL
            self.in_air = True

    def got_collectible(self, mesh, node: MeshItem) -> None:
        """Pick up a coin or ring and remove it from the mesh."""
        if node.type == BlockType.COIN:
            logger.info("got coin!")
            self._play(Sound.PICKUP)
            mesh.clear_node(node)
            self.coin_count += 1
        elif node.type == BlockType.RING:
            logger.info("got ring!")
            self._play(Sound.PICKUP)
            mesh.clear_node(node)
            self.ring_count += 1
        else:
            logger.warning("whats this #%d?!", int(node.type))