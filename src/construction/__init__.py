# src/construction/__init__.py

"""
Construction model: structure definitions, rotation, and the building
locator used by the NPC goal orchestrator and routine.
"""

from .geometry import Orientation, rotate_xz, rotated_footprint
from .schema import EMPTY_LABEL, Bounds, BuiltInstance, StructureDefinition
from .loader import CONSTRUCTION_DIR, load_structures, normalize
from .locator import (
    DOOR_MARKER,
    building_bounds,
    current_building,
    door_position,
    occupied_positions,
)

__all__ = [
    "Orientation",
    "rotate_xz",
    "rotated_footprint",
    "EMPTY_LABEL",
    "Bounds",
    "BuiltInstance",
    "StructureDefinition",
    "CONSTRUCTION_DIR",
    "load_structures",
    "normalize",
    "DOOR_MARKER",
    "building_bounds",
    "current_building",
    "door_position",
    "occupied_positions",
]
