"""Reader for the binary ``.holden`` model format."""

from __future__ import annotations

import os
import struct
from typing import Union

from coventina.shapes import LightenTexturedShape, Shape, TexturedShape

MAGIC = b"holden"


class HoldenError(ValueError):
    """Raised when data is not a well-formed holden model."""


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    def unpack(self, fmt: str) -> tuple:
        size = struct.calcsize(fmt)
        if self._offset + size > len(self._data):
            raise HoldenError(f"unexpected end of data at offset {self._offset}")
        values = struct.unpack_from(fmt, self._data, self._offset)
        self._offset += size
        return values

    def skip(self, count: int) -> None:
        self.unpack(f"{count}x")

    def u8(self) -> int:
        return self.unpack("<B")[0]

    def u16(self) -> int:
        return self.unpack("<H")[0]

    def vectors(self, count: int, width: int) -> list:
        flat = self.unpack(f"<{count * width}f")
        return [tuple(flat[i:i + width]) for i in range(0, len(flat), width)]

    def cstring(self) -> str:
        end = self._data.find(b"\0", self._offset)
        if end < 0:
            raise HoldenError(f"unterminated name at offset {self._offset}")
        raw = self._data[self._offset:end]
        self._offset = end + 1
        return raw.decode("utf-8", errors="replace")


def _read_faces(reader: _Reader, face_count: int, use_tris: bool) -> list:
    indices = []
    for _ in range(face_count):
        if use_tris:
            indices.extend(reader.unpack("<3H"))
        else:
            v0, v1, v2, v3 = reader.unpack("<4H")
            indices.extend((v0, v1, v2, v2, v0, v3))
    return indices


def _read_object(reader: _Reader) -> Shape:
    kind = reader.u8()
    name = reader.cstring()

    if kind >= 6:
        shape: Shape = LightenTexturedShape()
    elif kind >= 4:
        shape = TexturedShape()
    else:
        shape = Shape()
    shape.name = name

    vert_count = reader.u16()
    shape.verts = reader.vectors(vert_count, 3)

    face_count = reader.u16()
    shape.indices = _read_faces(reader, face_count, use_tris=bool(kind % 2))

    if isinstance(shape, TexturedShape):
        uv_count = reader.u16()
        shape.tex_coords = reader.vectors(uv_count, 2)

    if isinstance(shape, LightenTexturedShape):
        shape.normals = reader.vectors(vert_count, 3)

    return shape


def parse_holden(data: bytes) -> list:
    """Parse holden model bytes into a list of shapes."""
    reader = _Reader(data)
    header = bytes(data[:len(MAGIC)])
    if header != MAGIC:
        raise HoldenError(f"not a holden file: header {header!r}")
    reader.skip(len(MAGIC) + 1)
    object_count = reader.u16()
    return [_read_object(reader) for _ in range(object_count)]


def read_holden(path: Union[str, os.PathLike]) -> list:
    """Read a holden model file into a list of shapes."""
    with open(path, "rb") as handle:
        return parse_holden(handle.read())