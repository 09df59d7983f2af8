import math

import numpy as np
import pytest

from coventina.matrix import Matrices


def _apply(matrix, point):
    result = matrix @ np.array([*point, 1.0])
    return result[:3] / result[3]


def test_starts_as_identity():
    m = Matrices()
    assert np.allclose(m.mvp(), np.identity(4))


def test_clear_resets_everything():
    m = Matrices()
    m.translate(1, 2, 3)
    m.perspective(1.0, 1.5)
    m.view = m.model.copy()
    m.clear()
    for matrix in (m.projection, m.view, m.model):
        assert np.allclose(matrix, np.identity(4))


def test_translate_moves_origin():
    m = Matrices()
    m.translate(1.0, 2.0, 3.0)
    assert np.allclose(_apply(m.model, (0, 0, 0)), (1.0, 2.0, 3.0))


def test_translate_then_opposite_returns_identity():
    m = Matrices()
    m.translate(4.0, -2.0, 7.5)
    m.translate(-4.0, 2.0, -7.5)
    assert np.allclose(m.model, np.identity(4))


def test_rotate_about_y_quarter_turn():
    m = Matrices()
    m.rotate(math.pi / 2, 0, 1, 0)
    assert np.allclose(_apply(m.model, (1, 0, 0)), (0, 0, -1))


def test_rotation_preserves_length():
    m = Matrices()
    m.rotate(0.7, 1, 1, 0)
    point = (0.3, -1.2, 2.0)
    assert math.isclose(
        np.linalg.norm(_apply(m.model, point)), np.linalg.norm(point)
    )


def test_rotate_truncates_axis_components():
    a = Matrices()
    a.rotate(0.4, 0.9, 1.5, 0.2)
    b = Matrices()
    b.rotate(0.4, 0, 1, 0)
    assert np.allclose(a.model, b.model)


def test_rotate_zero_axis_raises():
    with pytest.raises(ValueError):
        Matrices().rotate(1.0, 0, 0, 0)


def test_scale_then_translate_order():
    m = Matrices()
    m.translate(1.0, 0.0, 0.0)
    m.scale(2.0, 3.0, 4.0)
    assert np.allclose(_apply(m.model, (1, 1, 1)), (3.0, 3.0, 4.0))


def test_ortho_maps_corners_to_unit_cube():
    m = Matrices()
    m.ortho(-2.0, 2.0, -1.0, 1.0, -1.0, 1.0)
    assert np.allclose(_apply(m.projection, (-2, -1, 1)), (-1, -1, -1))
    assert np.allclose(_apply(m.projection, (2, 1, -1)), (1, 1, 1))


def test_ortho_degenerate_raises():
    with pytest.raises(ValueError):
        Matrices().ortho(1.0, 1.0, -1.0, 1.0, -1.0, 1.0)


def test_perspective_near_and_far_planes():
    m = Matrices()
    m.perspective(1.0, 1.25, 0.5, 50.0)
    assert math.isclose(_apply(m.projection, (0, 0, -0.5))[2], -1.0)
    assert math.isclose(_apply(m.projection, (0, 0, -50.0))[2], 1.0)


def test_perspective_field_of_view_edge():
    m = Matrices()
    fov = 1.2
    m.perspective(fov, 1.0, 0.1, 100.0)
    depth = 10.0
    top = depth * math.tan(fov / 2)
    assert math.isclose(_apply(m.projection, (0, top, -depth))[1], 1.0)


def test_mvp_is_product():
    m = Matrices()
    m.perspective(1.0, 2.0)
    m.view = np.diag([1.0, 2.0, 3.0, 1.0])
    m.translate(1, 2, 3)
    assert np.allclose(m.mvp(), m.projection @ m.view @ m.model)