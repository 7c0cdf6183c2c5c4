#tests/test_construction_locator.py
"""
Tests for construction.locator.

Covers:
- containment consistency: every occupied position is inside its building
- door lookup with the inverse orientation
- the 3x3 door scenario
- structures without a door, unknown and unplaced structures
"""

from __future__ import annotations

import pytest

from construction.geometry import Orientation, rotate_xz
from construction.locator import (
    building_bounds,
    current_building,
    door_position,
    occupied_positions,
)
from construction.schema import BuiltInstance, StructureDefinition
from spec.types import Position


def _grid(size: int, height: int = 1, door_at=None, fill: str = "oak_planks"):
    blocks = [[[fill for _ in range(size)] for _ in range(size)] for _ in range(height)]
    if door_at is not None:
        x, y, z = door_at
        blocks[y][z][x] = "oak_door"
    return blocks


def test_door_scenario_orientation_one():
    house = StructureDefinition("house", _grid(3, door_at=(1, 0, 0)), offset=0)
    built = {"house": BuiltInstance("house", Position(10, 64, 10), Orientation.DEG_90)}
    constructions = {"house": house}

    first = door_position("house", built, constructions)
    second = door_position("house", built, constructions)

    assert first == Position(12, 64, 11)
    assert first == second


@pytest.mark.parametrize("orientation", list(Orientation))
def test_door_round_trip(orientation):
    door_local = (0, 1, 2)
    house = StructureDefinition("house", _grid(4, height=3, door_at=door_local), offset=-1)
    origin = Position(-5, 70, 20)
    built = {"house": BuiltInstance("house", origin, orientation)}

    dx, dz = rotate_xz(door_local[0], door_local[2], orientation.inverse(), 4, 4)
    expected = origin.offset(dx, door_local[1] - 1, dz)

    assert door_position("house", built, {"house": house}) == expected


@pytest.mark.parametrize("orientation", list(Orientation))
def test_containment_consistency(orientation):
    house = StructureDefinition("house", _grid(3, height=2), offset=-1)
    shed = StructureDefinition("shed", _grid(2), offset=0)
    built = {
        "house": BuiltInstance("house", Position(10, 64, 10), orientation),
        "shed": BuiltInstance("shed", Position(40, 64, 40), orientation),
    }
    constructions = {"house": house, "shed": shed}

    house_only = {"house": built["house"]}
    for pos in occupied_positions(house_only, constructions):
        assert current_building(pos, built, constructions) == "house"

    shed_only = {"shed": built["shed"]}
    for pos in occupied_positions(shed_only, constructions):
        assert current_building(pos, built, constructions) == "shed"


@pytest.mark.parametrize("orientation", list(Orientation))
def test_containment_consistency_rectangular_footprint(orientation):
    # 2 wide x 3 deep, not normalized
    shed = StructureDefinition("shed", [[["spruce_planks"] * 2 for _ in range(3)]], offset=0)
    built = {"shed": BuiltInstance("shed", Position(0, 64, 0), orientation)}
    constructions = {"shed": shed}

    positions = occupied_positions(built, constructions)

    assert len(set(positions)) == 6
    for pos in positions:
        assert current_building(pos, built, constructions) == "shed"


def test_occupied_positions_counts_every_cell_with_offset():
    house = StructureDefinition("house", _grid(3, height=2), offset=-1)
    built = {"house": BuiltInstance("house", Position(0, 64, 0))}

    positions = occupied_positions(built, {"house": house})

    assert len(positions) == 3 * 3 * 2
    assert min(p.y for p in positions) == 63
    assert max(p.y for p in positions) == 64


def test_bounds_are_normalized_for_every_orientation():
    house = StructureDefinition("house", _grid(3), offset=0)
    for orientation in Orientation:
        bounds = building_bounds(BuiltInstance("house", Position(10, 64, 10), orientation), house)
        assert (bounds.min_x, bounds.max_x) == (10, 13)
        assert (bounds.min_z, bounds.max_z) == (10, 13)
        assert (bounds.min_y, bounds.max_y) == (64, 65)


def test_current_building_outside_and_fractional():
    house = StructureDefinition("house", _grid(3), offset=0)
    built = {"house": BuiltInstance("house", Position(10, 64, 10))}
    constructions = {"house": house}

    assert current_building(Position(11.5, 64.2, 12.9), built, constructions) == "house"
    assert current_building(Position(13, 64, 10), built, constructions) is None
    assert current_building(Position(11, 65, 11), built, constructions) is None


def test_door_position_missing_cases():
    house = StructureDefinition("house", _grid(3), offset=0)  # no door
    built = {"house": BuiltInstance("house", Position(0, 64, 0))}

    assert door_position("house", built, {"house": house}) is None
    assert door_position("mansion", built, {"house": house}) is None
    assert door_position(None, built, {"house": house}) is None
    assert door_position("house", built, {}) is None


def test_unknown_structures_are_ignored():
    built = {"ghost": BuiltInstance("ghost", Position(0, 64, 0))}

    assert occupied_positions(built, {}) == []
    assert current_building(Position(0, 64, 0), built, {}) is None
