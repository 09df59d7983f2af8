"""Static geometry for the world: coins, cubes, the floor and the splash card."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from coventina.shapes import DrawMode, TexturedShape

FACE_VERT_COUNT = 22
HEAD_START_IDX = 0
TAIL_START_IDX = FACE_VERT_COUNT
EDGE_START_IDX = TAIL_START_IDX + FACE_VERT_COUNT
EDGE_VERT_COUNT = 42

COIN_HALF_THICKNESS = 0.05
COIN_RADIUS = 0.5

FLOOR_X_BASE = -40.0
FLOOR_Z_BASE = -20.0
FLOOR_CELL = 1.0

_MAX_INDEXED_VERTS = 1 << 16


@dataclass
class Mesh:
    """Vertex data ready for upload, with how its parts are drawn.

    ``face_normals`` holds one normal per face for meshes that light whole
    faces with a single normal; ``face_size`` is the number of indices that
    make up each such face.  ``edge_range`` names a run of vertices that is
    drawn directly, as ``(first, count)``.
    """

    vertices: list
    indices: list
    normals: list = field(default_factory=list)
    tex_coords: list = field(default_factory=list)
    face_normals: list = field(default_factory=list)
    face_size: int = 0
    face_mode: DrawMode = DrawMode.TRIANGLES
    edge_range: tuple = (0, 0)
    edge_mode: DrawMode = DrawMode.TRIANGLE_STRIP

    def faces(self) -> list:
        """Split the indices into faces of ``face_size`` indices each."""
        if self.face_size <= 0:
            return [list(self.indices)]
        return [
            list(self.indices[start:start + self.face_size])
            for start in range(0, len(self.indices), self.face_size)
        ]


def coin_mesh() -> Mesh:
    """Build the coin: two fan-drawn faces joined by a strip-drawn edge."""
    front_z = COIN_HALF_THICKNESS
    back_z = -COIN_HALF_THICKNESS
    vertices = [(0.0, 0.0, front_z), (0.0, 0.0, back_z)]
    normals = [(0.0, 0.0, 1.0), (0.0, 0.0, -1.0)]

    for step in range(FACE_VERT_COUNT - 1):
        angle = step * math.pi * 0.1
        x = math.sin(angle)
        y = math.cos(angle)
        rim = (x * COIN_RADIUS, y * COIN_RADIUS)
        vertices.append((*rim, front_z))
        vertices.append((*rim, back_z))
        normals.append((x, y, 0.0))
        normals.append((x, y, 0.0))

    indices = [0, *(2 + 2 * k for k in range(FACE_VERT_COUNT - 1))]
    indices += [1, *(3 + 2 * k for k in range(FACE_VERT_COUNT - 1))]

    return Mesh(
        vertices=vertices,
        indices=indices,
        normals=normals,
        face_normals=[(0.0, 0.0, 1.0), (0.0, 0.0, -1.0)],
        face_size=FACE_VERT_COUNT,
        face_mode=DrawMode.TRIANGLE_FAN,
        edge_range=(2, EDGE_VERT_COUNT),
        edge_mode=DrawMode.TRIANGLE_STRIP,
    )


_CUBE_VERTICES = [
    (0.0, 0.0, 0.0), (0.0, 1.0, 0.0),
    (1.0, 0.0, 0.0), (1.0, 1.0, 0.0),
    (1.0, 0.0, 1.0), (1.0, 1.0, 1.0),
    (0.0, 0.0, 1.0), (0.0, 1.0, 1.0),
]

_CUBE_FACE_NORMALS = [
    (-1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 0.0),
    (0.0, 0.0, -1.0),
    (0.0, 1.0, 0.0),
    (0.0, -1.0, 0.0),
]

LBB, LTB, RBB, RTB, RBF, RTF, LBF, LTF = range(8)

_CUBE_INDICES = [
    LTB, LBB, LTF, LBF,
    LTF, LBF, RTF, RBF,
    RTF, RBF, RTB, RBB,
    RTB, RBB, LTB, LBB,
    RTB, LTB, RTF, LTF,
    LBB, RBB, LBF, RBF,
]


def cube_mesh() -> Mesh:
    """Build the unit cube as six four-index strips, one normal per face."""
    return Mesh(
        vertices=list(_CUBE_VERTICES),
        indices=list(_CUBE_INDICES),
        face_normals=list(_CUBE_FACE_NORMALS),
        face_size=4,
        face_mode=DrawMode.TRIANGLE_STRIP,
    )


def floor_mesh(xdim=80, zdim=40) -> Mesh:
    """Build a flat grid of ``xdim`` by ``zdim`` points as indexed triangles."""
    if xdim < 1 or zdim < 1:
        raise ValueError(f"floor dimensions must be positive, got {xdim}x{zdim}")
    if xdim * zdim > _MAX_INDEXED_VERTS:
        raise ValueError(
            f"floor of {xdim}x{zdim} points exceeds {_MAX_INDEXED_VERTS} vertices"
        )

    vertices = []
    tex_coords = []
    for z in range(zdim):
        for x in range(xdim):
            tex_coords.append((x * FLOOR_CELL, z * FLOOR_CELL))
            vertices.append(
                (FLOOR_X_BASE + x * FLOOR_CELL, 0.0, FLOOR_Z_BASE + z * FLOOR_CELL)
            )

    indices = []
    for z in range(zdim - 1):
        for x in range(xdim - 1):
            here = z * xdim + x
            below = (z + 1) * xdim + x
            indices.extend((below, here + 1, here, below + 1, here + 1, below))

    return Mesh(vertices=vertices, indices=indices, tex_coords=tex_coords)


def splash_shape() -> TexturedShape:
    """Build the textured quad shown while the game starts."""
    return TexturedShape(
        verts=[(-8.0, -1.0, -1.0), (8.0, -1.0, -8.0), (8.0, 7.0, -8.0), (-8.0, 7.0, -1.0)],
        indices=[3, 0, 2, 1],
        tex_coords=[(0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0)],
        draw_mode=DrawMode.TRIANGLE_STRIP,
        surface="ggj-splash.png",
    )