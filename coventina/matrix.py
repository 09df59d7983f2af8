"""Projection, view and model matrices for the renderer."""

from __future__ import annotations

import math

import numpy as np


def _identity() -> np.ndarray:
    return np.identity(4, dtype=np.float64)


class Matrices:
    """The projection, view and model matrices that make up the MVP transform.

    Matrices act on column vectors, so a point ``p`` is transformed as
    ``matrix @ p``.  Every model operation post-multiplies the current model
    matrix, so the most recent call is applied to a point first.
    """

    def __init__(self) -> None:
        self.projection = _identity()
        self.view = _identity()
        self.model = _identity()

    def clear(self) -> None:
        """Reset all three matrices to the identity."""
        self.projection = _identity()
        self.view = _identity()
        self.model = _identity()

    def ortho(self, left, right, bottom, top, near, far) -> None:
        """Set an orthographic projection."""
        if right == left or top == bottom or far == near:
            raise ValueError("orthographic volume has zero extent")
        result = _identity()
        result[0, 0] = 2.0 / (right - left)
        result[1, 1] = 2.0 / (top - bottom)
        result[2, 2] = -2.0 / (far - near)
        result[0, 3] = -(right + left) / (right - left)
        result[1, 3] = -(top + bottom) / (top - bottom)
        result[2, 3] = -(far + near) / (far - near)
        self.projection = result

    def perspective(self, fov, aspect_ratio, near_clip=0.1, far_clip=100.0) -> None:
        """Set a perspective projection with a vertical field of view in radians."""
        if aspect_ratio == 0 or far_clip == near_clip:
            raise ValueError("degenerate perspective projection")
        tan_half = math.tan(fov / 2.0)
        if tan_half == 0:
            raise ValueError("field of view must not be zero")
        result = np.zeros((4, 4), dtype=np.float64)
        result[0, 0] = 1.0 / (aspect_ratio * tan_half)
        result[1, 1] = 1.0 / tan_half
        result[2, 2] = -(far_clip + near_clip) / (far_clip - near_clip)
        result[3, 2] = -1.0
        result[2, 3] = -(2.0 * far_clip * near_clip) / (far_clip - near_clip)
        self.projection = result

    def translate(self, x, y, z) -> None:
        """Append a translation to the model matrix."""
        step = _identity()
        step[:3, 3] = (x, y, z)
        self.model = self.model @ step

    def rotate(self, radians, x, y, z) -> None:
        """Append a rotation about an axis to the model matrix.

        The axis components are taken as whole numbers.
        """
        axis = np.array([int(x), int(y), int(z)], dtype=np.float64)
        length = np.linalg.norm(axis)
        if length == 0:
            raise ValueError("rotation axis must not be zero")
        ax, ay, az = axis / length
        c = math.cos(radians)
        s = math.sin(radians)
        cross = np.array([[0.0, -az, ay], [az, 0.0, -ax], [-ay, ax, 0.0]])
        outer = np.outer((ax, ay, az), (ax, ay, az))
        step = _identity()
        step[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * outer
        self.model = self.model @ step

    def scale(self, x, y, z) -> None:
        """Append a scale to the model matrix."""
        step = np.diag([float(x), float(y), float(z), 1.0])
        self.model = self.model @ step

    def mvp(self) -> np.ndarray:
        """Return projection times view times model."""
        return self.projection @ self.view @ self.model