# discrete rotations about the vertical axis
# src/construction/geometry.py
"""
Rotation helpers for multi-block structures.

Structures are stored as grids indexed [y][z][x] with the origin at the
grid's (0, 0) corner. When a structure is placed it may be rotated by a
multiple of 90 degrees about the vertical axis; `rotate_xz` is the single
transform used for that, both for placing blocks and for finding features
(doors) inside a placed structure.

Rotations reflect within the footprint, so a rotated cell stays inside
[0, size) on both axes:

    0: (x, z)                          identity
    1: (z, size_x - 1 - x)             swap, mirror the new z axis
    2: (size_x - 1 - x, size_z - 1 - z) mirror both axes
    3: (size_z - 1 - z, x)             swap, mirror the new x axis
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Tuple


class Orientation(IntEnum):
    """Placement rotation in 90-degree steps about the vertical axis."""

    DEG_0 = 0
    DEG_90 = 1
    DEG_180 = 2
    DEG_270 = 3

    @property
    def degrees(self) -> int:
        return int(self) * 90

    def inverse(self) -> "Orientation":
        """
        Orientation that undoes this one: (4 - o) mod 4.

        4 - 0 would be 4, which folds back to DEG_0.
        """
        value = 4 - int(self)
        if value == 4:
            value = 0
        return Orientation(value)

    @classmethod
    def coerce(cls, value: Any) -> "Orientation":
        """Accept an Orientation or a plain int in 0..3; bools and fractions are rejected."""
        if isinstance(value, Orientation):
            return value
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError(f"Invalid orientation: {value!r} (expected 0..3)")
        try:
            return cls(int(value))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid orientation: {value!r} (expected 0..3)") from exc


def rotate_xz(
    x: int,
    z: int,
    orientation: Orientation | int,
    size_x: int,
    size_z: int,
) -> Tuple[int, int]:
    """
    Rotate local grid coordinates (x, z) by `orientation`.

    size_x / size_z are the footprint *before* rotation.
    """
    o = Orientation.coerce(orientation)
    if o == Orientation.DEG_0:
        return x, z
    if o == Orientation.DEG_90:
        return z, size_x - 1 - x
    if o == Orientation.DEG_180:
        return size_x - 1 - x, size_z - 1 - z
    return size_z - 1 - z, x


def rotated_footprint(size_x: int, size_z: int, orientation: Orientation | int) -> Tuple[int, int]:
    """Footprint (size_x, size_z) after rotation; odd orientations swap axes."""
    o = Orientation.coerce(orientation)
    if o in (Orientation.DEG_90, Orientation.DEG_270):
        return size_z, size_x
    return size_x, size_z
