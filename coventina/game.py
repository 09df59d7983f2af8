"""The running game: frame timing, the cuttlefish, the thumbstick and the session."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from coventina.cubemesh import CubeMesh
from coventina.items import Bobber, COIN_SPIN_SPEED, RING_SPIN_SPEED
from coventina.player import Player

logger = logging.getLogger(__name__)

FPS_WINDOW = 120
CUTTLEFISH_RANGE = 1.6
CUTTLEFISH_HEIGHT = 4.0
THUMBSTICK_RADIUS = 0.2
DEFAULT_WIN_SCORE = 6
DEFAULT_TIME_LIMIT = 90.0
SPLASH_FRAMES = 60
TEXTURE_SCROLL_STEP = 0.005
THING_SPIN_STEP = 0.005
WINNER = "Winner!"
LOSER = "Loser!"


class Fanfare(Enum):
    """Sounds played when the time runs out."""

    WINNER = "winner"
    LOSER = "loser"


class Key(Enum):
    """Keys the session responds to."""

    FORWARD = "e"
    BACKWARD = "d"
    LEFT = "f"
    RIGHT = "s"
    TURN_LEFT = "left"
    TURN_RIGHT = "right"
    LOOK_UP = "up"
    LOOK_DOWN = "down"
    JUMP = "space"
    POINTER = "escape"
    PAUSE = "p"
    QUIT = "q"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"


class FrameClock:
    """Turns millisecond tick counts into frame times and tracks the frame rate.

    ``avg_fps`` is refreshed every ``FPS_WINDOW`` frames.
    """

    def __init__(self, start_ms=0) -> None:
        self.ticks = start_ms
        self.fps = 0.0
        self.avg_fps = 0.0
        self._fps_sum = 0.0
        self._frames = 0

    def tick(self, ticks_ms) -> Optional[float]:
        """Record a new tick count; return the frame time in seconds.

        Returns None when no time has passed since the last tick.
        """
        previous = self.ticks
        self.ticks = ticks_ms
        elapsed = ticks_ms - previous
        if elapsed == 0:
            return None
        dt = elapsed * 0.001
        self.fps = 1.0 / dt
        self._fps_sum += self.fps
        self._frames += 1
        if self._frames == FPS_WINDOW:
            self.avg_fps = self._fps_sum / FPS_WINDOW
            self._fps_sum = 0.0
            self._frames = 0
        return dt


class CuttleFish:
    """A creature that swims back and forth above the well.

    It moves along its heading and, on reaching ``CUTTLEFISH_RANGE`` from its
    centre, stops at the edge and turns round by half a turn plus up to one
    more radian at random.
    """

    def __init__(self, center, rng: Optional[random.Random] = None) -> None:
        self.center = tuple(float(c) for c in center)
        self.pos = list(self.center)
        self.dir = (0.0, 0.0, 1.0)
        self.speed = 1.0
        self.angle = 0.0
        self._rng = rng or random.Random()

    def update(self, dt) -> None:
        """Swim for ``dt`` seconds."""
        self.pos = [p + self.speed * d * dt for p, d in zip(self.pos, self.dir)]
        if math.dist(self.pos, self.center) > CUTTLEFISH_RANGE:
            self.pos = [c + d * CUTTLEFISH_RANGE for c, d in zip(self.center, self.dir)]
            self.angle += math.pi + self._rng.random()
            if self.angle > 2.0 * math.pi:
                self.angle -= 2.0 * math.pi
            self.dir = (math.sin(self.angle), 0.0, math.cos(self.angle))


def screen_to_world(px, py, pixel_bounds, bounds) -> tuple:
    """Map a pixel position to screen space: x in [-1, 1], y in [-h, h]."""
    width, height = pixel_bounds
    half_height = bounds[1]
    x = (px / float(width)) * 2.0 - 1.0
    y = (py / float(height)) * (half_height * 2.0) - half_height
    return (x, y)


@dataclass
class Thumbstick:
    """An on-screen stick that drives the player while held.

    The inner knob follows the pointer but stays within ``radius`` of the
    centre. The direction's y is flipped so that up on screen runs forward.
    """

    center: tuple = (0.0, 0.0)
    radius: float = THUMBSTICK_RADIUS
    inner_pos: tuple = (0.0, 0.0)
    direction: tuple = (0.0, 0.0)
    inner_length: float = 0.0
    active: bool = False
    pressed: bool = False

    def press(self, x, y, player: Player) -> None:
        """Press at a point; pressing inside the stick starts the player running."""
        self.pressed = True
        if math.hypot(x - self.center[0], y - self.center[1]) <= self.radius:
            player.z_running = True
            player.x_running = True
            self.active = True
        self.move(x, y)

    def release(self, player: Player) -> None:
        """Let go of the stick and stop the player."""
        self.pressed = False
        self.active = False
        player.stop_running()

    def move(self, x, y) -> None:
        """Follow the pointer to a point."""
        dif_x = x - self.center[0]
        dif_y = y - self.center[1]
        length = math.hypot(dif_x, dif_y)
        self.inner_length = length
        if length == 0.0:
            self.direction = (0.0, 0.0)
            self.inner_pos = tuple(self.center)
            return
        unit_x = dif_x / length
        unit_y = dif_y / length
        self.direction = (unit_x, -unit_y)
        if length <= self.radius:
            self.inner_pos = (x, y)
        else:
            self.inner_pos = (
                unit_x * self.radius + self.center[0],
                unit_y * self.radius + self.center[1],
            )

    def update(self, player: Player) -> None:
        """Run the player in the stick's direction while it is held."""
        if self.pressed and self.active:
            share = self.inner_length / self.radius
            player.run_direction(self.direction[0] * share, self.direction[1] * share)


class GameSession:
    """A round of the game: the world, the player and the countdown.

    ``sound_handler`` receives the player's sounds and the :class:`Fanfare`
    played when time runs out. A ``time_limit`` of None plays forever.
    """

    def __init__(
        self,
        mesh: Optional[CubeMesh] = None,
        player: Optional[Player] = None,
        time_limit: Optional[float] = DEFAULT_TIME_LIMIT,
        win_score: int = DEFAULT_WIN_SCORE,
        rng: Optional[random.Random] = None,
        sound_handler: Optional[Callable[[object], None]] = None,
        freeze_player_when_times_up: bool = False,
    ) -> None:
        self.mesh = mesh if mesh is not None else CubeMesh()
        self.player = player if player is not None else Player()
        self.sound_handler = sound_handler
        if self.player.sound_handler is None:
            self.player.sound_handler = sound_handler
        self.win_score = win_score
        self.infinite_play = time_limit is None
        self.time_left = 0.0 if time_limit is None else float(time_limit)
        self.time_left_seconds = int(self.time_left)
        self.freeze_player_when_times_up = freeze_player_when_times_up
        self.finished = False
        self.result = ""
        self.frozen = False
        self.running = True
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.thing_angle = 0.0
        self.frame = 0
        self.coin_bob = Bobber(spin_speed=COIN_SPIN_SPEED)
        self.ring_bob = Bobber(spin_speed=RING_SPIN_SPEED)

        self.well_center = self.mesh.well_center
        self.player.pos[0] = self.mesh.player_start[0]
        self.player.pos[2] = self.mesh.player_start[1]
        well_x, well_z = self.well_center
        self.cuttlefish = CuttleFish((well_x, CUTTLEFISH_HEIGHT, well_z - 1.0), rng=rng)

    def _play(self, sound) -> None:
        if self.sound_handler is not None:
            self.sound_handler(sound)

    def key_down(self, key: Key) -> None:
        """Handle a key being pressed."""
        player = self.player
        actions = {
            Key.FORWARD: player.run_forward,
            Key.BACKWARD: player.run_backward,
            Key.LEFT: player.run_left,
            Key.RIGHT: player.run_right,
            Key.TURN_LEFT: lambda: player.set_rotation(-1),
            Key.TURN_RIGHT: lambda: player.set_rotation(1),
            Key.LOOK_UP: lambda: player.set_x_rotation(-1),
            Key.LOOK_DOWN: lambda: player.set_x_rotation(1),
            Key.JUMP: player.jump,
            Key.POINTER: player.toggle_pointer_mode,
        }
        if key in actions:
            actions[key]()
        elif key is Key.PAUSE:
            self.frozen = not self.frozen
        elif key is Key.QUIT:
            self.running = False

    def key_up(self, key: Key) -> None:
        """Handle a key being released."""
        player = self.player
        if key is Key.FORWARD:
            player.stop_forward()
        elif key is Key.BACKWARD:
            player.stop_backward()
        elif key is Key.LEFT:
            player.stop_left()
        elif key is Key.RIGHT:
            player.stop_right()
        elif key in (Key.TURN_LEFT, Key.TURN_RIGHT):
            player.set_rotation(0)
        elif key in (Key.LOOK_UP, Key.LOOK_DOWN):
            player.set_x_rotation(0)

    def update(self, dt) -> None:
        """Advance the game by a frame of ``dt`` seconds."""
        if not self.frozen:
            if self.time_left_seconds > 0 or not self.freeze_player_when_times_up:
                self.player.handle_blocks(self.mesh, dt)
                self.player.update(dt)
            self.coin_bob.update(dt)
            self.ring_bob.update(dt)
            self.cuttlefish.update(dt)

        if self.frame < SPLASH_FRAMES:
            self.frame += 1
            return

        self._count_down(dt)

        if not self.frozen:
            self.thing_angle += THING_SPIN_STEP
            if self.thing_angle >= 2.0 * math.pi:
                self.thing_angle = 0.0
            self.offset_x += TEXTURE_SCROLL_STEP
            self.offset_y += TEXTURE_SCROLL_STEP
            if self.offset_x > 1:
                self.offset_x = 0.0
            if self.offset_y > 1:
                self.offset_y = 0.0

    def _count_down(self, dt) -> None:
        if self.time_left > 0:
            self.time_left_seconds = int(self.time_left)
            self.time_left -= dt
        elif not self.finished and not self.infinite_play:
            self.finished = True
            self.time_left_seconds = 0
            if self.player.score >= self.win_score:
                self.result = WINNER
                self._play(Fanfare.WINNER)
            else:
                self.result = LOSER
                self._play(Fanfare.LOSER)
            logger.info("%s", self.result)