# which placed structure contains a position, and where its door is
# src/construction/locator.py
"""
Building locator.

Answers orientation-aware questions about structures that have already
been placed in the world:

- occupied_positions: every block position covered by placed structures
- building_bounds / current_building: containment of a world position
- door_position: world coordinate of a structure's door

This module does NOT:
- decide where to build (the build executor does that)
- interpret block types beyond the door marker
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from spec.types import Position

from .geometry import rotate_xz
from .schema import Bounds, BuiltInstance, StructureDefinition

logger = logging.getLogger(__name__)

DOOR_MARKER = "door"

BuiltMap = Mapping[str, BuiltInstance]
StructureMap = Mapping[str, StructureDefinition]


def occupied_positions(built: BuiltMap, constructions: StructureMap) -> List[Position]:
    """
    Every block position covered by a placed structure.

    Local (x, z) cells go through the same rotation as building_bounds,
    so every position lies inside its instance's bounds.
    """
    positions: List[Position] = []
    for name, instance in built.items():
        structure = constructions.get(name)
        if structure is None:
            logger.debug("Skipping built instance '%s': structure not loaded", name)
            continue
        base = instance.position
        size_x, size_z = structure.size_x, structure.size_z
        for y in range(structure.offset, structure.size_y + structure.offset):
            for z in range(size_z):
                for x in range(size_x):
                    rx, rz = rotate_xz(x, z, instance.orientation, size_x, size_z)
                    positions.append(base.offset(rx, y, rz))
    return positions


def building_bounds(instance: BuiltInstance, structure: StructureDefinition) -> Bounds:
    """
    World-space box covered by `instance`.

    The horizontal extent comes from rotating the two opposite footprint
    corners with the same transform used for placement, so the box follows
    the instance's orientation even for non-square footprints.
    """
    size_x, size_z = structure.size_x, structure.size_z
    x0, z0 = rotate_xz(0, 0, instance.orientation, size_x, size_z)
    x1, z1 = rotate_xz(size_x - 1, size_z - 1, instance.orientation, size_x, size_z)

    base = instance.position
    bottom = base.y + structure.offset
    top = bottom + structure.size_y - 1
    return Bounds.from_cells(
        (base.x + x0, bottom, base.z + z0),
        (base.x + x1, top, base.z + z1),
    )


def current_building(
    position: Position,
    built: BuiltMap,
    constructions: StructureMap,
) -> Optional[str]:
    """Name of the first placed structure whose bounds contain `position`."""
    for name, instance in built.items():
        structure = constructions.get(name)
        if structure is None:
            continue
        if building_bounds(instance, structure).contains(position):
            return name
    return None


def door_position(
    name: Optional[str],
    built: BuiltMap,
    constructions: StructureMap,
    marker: str = DOOR_MARKER,
) -> Optional[Position]:
    """
    World coordinate of the door of placed structure `name`.

    The door is the first cell (height, depth, width order) whose label
    contains `marker`. Its local (x, z) is rotated by the inverse of the
    instance's orientation, then offset and placement position are added.

    Returns None if the structure is unknown, not placed, or has no door.
    """
    if name is None or name not in built:
        return None
    structure = constructions.get(name)
    if structure is None:
        return None

    local = structure.find_label(marker)
    if local is None:
        return None
    door_x, door_y, door_z = local

    instance = built[name]
    door_x, door_z = rotate_xz(
        door_x,
        door_z,
        instance.orientation.inverse(),
        structure.size_x,
        structure.size_z,
    )
    door_y += structure.offset

    return instance.position.offset(door_x, door_y, door_z)
