import math

import numpy as np
import pytest

from coventina.cubemesh import CubeMesh
from coventina.items import BlockType, Coin, Cube, Ring
from coventina.player import (
    GRAVITY_ACCEL,
    HOP_SPEED,
    JUMP_SPEED,
    PLAYER_EYE_LEVEL,
    PLAYER_HALF_WIDTH,
    PLAYER_SPEED,
    ROTATION_SPEED,
    Player,
    Sound,
)


def make_player(**kwargs):
    sounds = []
    player = Player(sound_handler=sounds.append, **kwargs)
    return player, sounds


def test_run_forward_sets_speed_and_running():
    player, _ = make_player()
    player.run_forward()
    assert player.zspeed == PLAYER_SPEED
    assert player.z_running is True


def test_run_forward_in_air_does_not_start_running():
    player, _ = make_player(in_air=True)
    player.run_forward()
    assert player.zspeed == PLAYER_SPEED
    assert player.z_running is False


def test_releasing_backward_resumes_held_forward():
    player, _ = make_player()
    player.run_forward()
    player.run_backward()
    assert player.zspeed == -PLAYER_SPEED
    player.stop_backward()
    assert player.zspeed == PLAYER_SPEED
    assert player.z_running is True


def test_stop_forward_without_other_key_stops():
    player, _ = make_player()
    player.run_forward()
    player.stop_forward()
    assert player.zspeed == 0.0
    assert player.z_running is False


def test_releasing_left_resumes_held_right():
    player, _ = make_player()
    player.run_right()
    player.run_left()
    assert player.xspeed == PLAYER_SPEED
    player.stop_left()
    assert player.xspeed == -PLAYER_SPEED
    player.stop_right()
    assert player.xspeed == 0.0
    assert player.x_running is False


def test_run_direction_and_stop_running():
    player, _ = make_player()
    player.run_direction(0.5, -1.0)
    assert player.xspeed == pytest.approx(0.5 * PLAYER_SPEED)
    assert player.zspeed == pytest.approx(-PLAYER_SPEED)
    assert player.x_running and player.z_running
    player.stop_running()
    assert (player.xspeed, player.zspeed) == (0.0, 0.0)
    assert not player.x_running and not player.z_running


def test_jump_once_until_landed():
    player, sounds = make_player()
    player.jump()
    assert player.yspeed == JUMP_SPEED
    assert player.yaccel == GRAVITY_ACCEL
    assert player.in_air is True
    assert sounds == [Sound.JUMP]
    player.jump()
    assert sounds == [Sound.JUMP]


def test_update_moves_forward_along_view():
    player, _ = make_player()
    player.run_forward()
    player.update(0.5)
    assert player.velocity == pytest.approx([0.0, 0.0, -PLAYER_SPEED])
    player.update(0.5)
    assert player.pos == pytest.approx([0.0, 0.0, 3.0 - PLAYER_SPEED * 0.5])


def test_rotation_advances_yangle():
    player, _ = make_player()
    player.set_rotation(1)
    player.update(0.5)
    assert player.yangle == pytest.approx(ROTATION_SPEED * 0.5)


def test_yangle_wraps_into_full_turn():
    player, _ = make_player(yangle=2 * math.pi - 0.01)
    player.set_rotation(1)
    player.update(0.5)
    assert 0.0 <= player.yangle < 2 * math.pi
    player.set_rotation(-1)
    player.yangle = 0.01
    player.update(0.5)
    assert 0.0 <= player.yangle < 2 * math.pi


def test_xangle_is_clamped():
    player, _ = make_player()
    player.set_x_rotation(1)
    player.update(10.0)
    assert player.xangle == pytest.approx(math.pi / 2)
    player.set_x_rotation(-1)
    player.update(10.0)
    assert player.xangle == pytest.approx(-math.pi / 2)


def test_movement_vectors_are_orthonormal_and_level():
    player, _ = make_player()
    player.set_rotation(1)
    player.set_x_rotation(-1)
    player.update(0.3)
    x_vec = np.array(player.x_vector)
    z_vec = np.array(player.z_vector)
    assert np.linalg.norm(x_vec) == pytest.approx(1.0)
    assert np.linalg.norm(z_vec) == pytest.approx(1.0)
    assert float(x_vec @ z_vec) == pytest.approx(0.0, abs=1e-12)
    assert x_vec[1] == 0.0 and z_vec[1] == 0.0
    assert np.linalg.norm(player.eye_vector) == pytest.approx(1.0)


def test_view_maps_eye_to_origin():
    player, _ = make_player()
    player.set_rotation(1)
    player.run_forward()
    player.update(0.2)
    player.update(0.2)
    eye = np.array([player.pos[0], player.pos[1] + PLAYER_EYE_LEVEL, player.pos[2], 1.0])
    assert player.view_mat @ eye == pytest.approx([0.0, 0.0, 0.0, 1.0])


def test_vertical_speed_is_clamped():
    player, _ = make_player(yaccel=GRAVITY_ACCEL, in_air=True)
    for _ in range(20):
        player.update(0.5)
    assert player.yspeed == pytest.approx(-JUMP_SPEED)


def test_pointer_delta_needs_pointer_mode():
    player, _ = make_player()
    player.set_pointer_delta(0.5, 0.5)
    assert (player.yangle, player.xangle) == (0.0, 0.0)


def test_toggle_pointer_mode_stops_keyboard_turning():
    player, _ = make_player()
    player.set_rotation(1)
    player.set_x_rotation(1)
    player.toggle_pointer_mode()
    assert player.pointer_mode is True
    assert player.y_angular_velocity == 0.0
    assert player.x_angular_velocity == 0.0


def test_pointer_delta_turns_and_wraps():
    player, _ = make_player()
    player.toggle_pointer_mode()
    player.set_pointer_delta(1.0, 0.0)
    assert player.yangle == pytest.approx(math.pi / 4)
    assert player.is_rotating is True
    player.yangle = 0.0
    player.set_pointer_delta(-0.5, 0.0)
    assert math.pi < player.yangle < 2 * math.pi


def test_pointer_delta_clamps_pitch():
    player, _ = make_player(xangle=math.pi / 2 - 0.01)
    player.toggle_pointer_mode()
    player.set_pointer_delta(0.0, 1.0)
    assert player.xangle == pytest.approx(math.pi / 2)


def test_landing_on_ground():
    player, _ = make_player(
        pos=[0.0, 0.5, 3.0], velocity=[1.0, -2.0, 0.0],
        yspeed=-2.0, yaccel=GRAVITY_ACCEL, in_air=True,
    )
    player.handle_blocks(CubeMesh(), 0.5)
    assert player.in_air is False
    assert player.pos[1] == 0.0
    assert player.yspeed == 0.0 and player.yaccel == 0.0
    assert player.velocity[0] == 0.0


def test_collecting_a_coin():
    mesh = CubeMesh()
    coin = Coin(pos=[0, 0, 3])
    mesh.add_coin(coin)
    player, sounds = make_player(pos=[0.5, 0.0, 3.5])
    player.handle_blocks(mesh, 0.1)
    assert player.coin_count == 1
    assert coin.valid is False
    assert mesh.get_node(0, 0, 3).type == BlockType.EMPTY
    assert sounds == [Sound.PICKUP]


def test_got_collectible_ring():
    mesh = CubeMesh()
    ring = Ring(pos=[2, 0, 2])
    mesh.add_ring(ring)
    player, sounds = make_player()
    player.got_collectible(mesh, mesh.get_node(2, 0, 2))
    assert player.ring_count == 1
    assert ring.valid is False
    assert sounds == [Sound.PICKUP]


def test_wall_stops_sideways_motion():
    mesh = CubeMesh()
    mesh.add_cube(Cube(pos=[1, 0, 3], type=BlockType.WALL))
    player, _ = make_player(pos=[0.5, 0.0, 3.5], velocity=[2.0, 0.0, 0.0])
    player.handle_blocks(mesh, 0.5)
    assert player.velocity[0] == 0.0
    assert player.pos[0] + PLAYER_HALF_WIDTH < 1.0


def test_landing_on_block():
    mesh = CubeMesh()
    mesh.add_cube(Cube(pos=[0, 0, 3], type=BlockType.WALL))
    player, _ = make_player(
        pos=[0.5, 1.2, 3.5], velocity=[0.0, -1.0, 0.0],
        yspeed=-1.0, yaccel=GRAVITY_ACCEL, in_air=True,
    )
    player.handle_blocks(mesh, 0.5)
    assert player.pos[1] == 1.0
    assert player.in_air is False
    assert player.yaccel == 0.0


def test_walking_off_a_ledge_starts_falling():
    player, _ = make_player(pos=[0.5, 1.0, 3.5])
    player.handle_blocks(CubeMesh(), 0.1)
    assert player.in_air is True
    assert player.yaccel == GRAVITY_ACCEL


def test_scoring_at_the_well():
    mesh = CubeMesh()
    mesh.add_cube(Cube(pos=[0, 0, 3], type=BlockType.WATER))
    player, sounds = make_player(pos=[0.5, 1.0, 3.5], coin_count=2, ring_count=1)
    player.handle_blocks(mesh, 0.1)
    assert player.score == 1
    assert (player.coin_count, player.ring_count) == (0, 0)
    assert sounds == [Sound.DROP]
    assert player.in_air is False


def test_well_needs_enough_collectibles():
    mesh = CubeMesh()
    mesh.add_cube(Cube(pos=[0, 0, 3], type=BlockType.WATER))
    player, sounds = make_player(pos=[0.5, 1.0, 3.5], coin_count=1, ring_count=1)
    player.handle_blocks(mesh, 0.1)
    assert player.score == 0
    assert sounds == []


def test_end_of_wall_climb_gives_a_hop():
    player, _ = make_player(pos=[0.5, 3.0, 3.5], yspeed=2.0, wall_climbing=True, in_air=True)
    player.handle_blocks(CubeMesh(), 0.0)
    assert player.wall_climbing is False
    assert player.yspeed == HOP_SPEED
    assert player.yaccel == GRAVITY_ACCEL