"""Shape data: vertices, indices, colours and texture information."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

Vec = tuple
Color = tuple

WHITE: Color = (1.0, 1.0, 1.0)


class DrawMode(Enum):
    POINTS = "points"
    LINES = "lines"
    LINE_LOOP = "line_loop"
    LINE_STRIP = "line_strip"
    TRIANGLES = "triangles"
    TRIANGLE_STRIP = "triangle_strip"
    TRIANGLE_FAN = "triangle_fan"


class ShapeKind(Enum):
    PLAIN = "plain"
    CIRCLE = "circle"
    OUTLINE_CIRCLE = "outline_circle"


@dataclass
class Shape:
    """An indexed mesh with a position and a fixed colour."""

    verts: list = field(default_factory=list)
    indices: list = field(default_factory=list)
    colors: list = field(default_factory=lambda: [WHITE])
    pos: Vec = (0.0, 0.0, 0.0)
    draw_mode: DrawMode = DrawMode.TRIANGLES
    kind: ShapeKind = ShapeKind.PLAIN
    name: str = ""


@dataclass
class TexturedShape(Shape):
    """A shape with per-vertex texture coordinates and a texture image."""

    tex_coords: list = field(default_factory=list)
    surface: Optional[str] = None


@dataclass
class LightenTexturedShape(TexturedShape):
    """A textured shape that also carries per-vertex normals for lighting."""

    normals: list = field(default_factory=list)
    light_pos: Vec = (0.0, 0.0, 0.0)


def _default_vert_count(radius: float) -> int:
    return int((radius / 0.1) * 90)


def circle(radius, colors: Optional[Sequence[Color]] = None, outer_vert_num=0) -> Shape:
    """Build a filled circle as a triangle fan around the origin.

    With ``outer_vert_num`` of zero the count is derived from the radius.
    """
    count = outer_vert_num or _default_vert_count(radius)
    if count < 2:
        raise ValueError(f"a circle needs at least 2 outer vertices, got {count}")
    step = 2.0 * math.pi / count
    origin = (0.0, 0.0, 0.0)
    ring = [
        (math.cos(k * step) * radius, math.sin(k * step) * radius, 0.0)
        for k in range(count - 1)
    ]
    verts = [origin, *ring, origin, origin]

    indices = [index for k in range(1, count - 1) for index in (k, k + 1, 0)]
    indices.extend((1, len(verts) - 3, 0))

    shape = Shape(verts=verts, indices=indices, kind=ShapeKind.CIRCLE)
    if colors:
        shape.colors = list(colors)
    return shape


def outline_circle(radius, colors: Optional[Sequence[Color]] = None, vert_num=0) -> Shape:
    """Build the outline of a circle as a loop of vertices."""
    count = vert_num or _default_vert_count(radius)
    if count < 1:
        raise ValueError(f"an outline circle needs at least 1 vertex, got {count}")
    step = 2.0 * math.pi / count
    verts = [
        (math.cos(k * step) * radius, math.sin(k * step) * radius, 0.0)
        for k in range(count)
    ]
    shape = Shape(
        verts=verts, draw_mode=DrawMode.LINE_LOOP, kind=ShapeKind.OUTLINE_CIRCLE
    )
    if colors:
        shape.colors = list(colors)
    return shape