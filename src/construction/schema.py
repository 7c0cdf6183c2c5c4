# StructureDefinition and BuiltInstance dataclasses
# src/construction/schema.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from spec.types import Position

from .geometry import Orientation

# Label used for padding cells and for "no block here".
EMPTY_LABEL = ""

# blocks[y][z][x]
BlockGrid = List[List[List[Optional[str]]]]


@dataclass(frozen=True)
class StructureDefinition:
    """
    One building type: a 3D grid of block labels plus a vertical offset.

    The grid is indexed [height][depth][width] (y, z, x). `offset` is the
    elevation of layer 0 relative to the placement position, so a
    structure with a one-block foundation below ground has offset -1.

    Loaded once at startup and shared read-only afterwards.
    """
    name: str
    blocks: BlockGrid
    offset: int = 0

    @property
    def size_y(self) -> int:
        return len(self.blocks)

    @property
    def size_z(self) -> int:
        return len(self.blocks[0]) if self.blocks else 0

    @property
    def size_x(self) -> int:
        if not self.blocks or not self.blocks[0]:
            return 0
        return len(self.blocks[0][0])

    def iter_cells(self) -> Iterator[Tuple[int, int, int, Optional[str]]]:
        """Yield (x, y, z, label) in height, then depth, then width order."""
        for y, layer in enumerate(self.blocks):
            for z, row in enumerate(layer):
                for x, label in enumerate(row):
                    yield x, y, z, label

    def find_label(self, fragment: str) -> Optional[Tuple[int, int, int]]:
        """Local (x, y, z) of the first cell whose label contains `fragment`."""
        for x, y, z, label in self.iter_cells():
            if label is not None and fragment in label:
                return x, y, z
        return None

    def block_counts(self) -> Dict[str, int]:
        """Number of cells per non-empty label."""
        counts: Dict[str, int] = {}
        for _, _, _, label in self.iter_cells():
            if label:
                counts[label] = counts.get(label, 0) + 1
        return counts


@dataclass
class BuiltInstance:
    """
    A placed (possibly unfinished) occurrence of a structure.

    Persisted in the agent profile so construction can resume across
    sessions.
    """
    name: str
    position: Position
    orientation: Orientation = Orientation.DEG_0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position.to_dict(),
            "orientation": int(self.orientation),
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "BuiltInstance":
        return cls(
            name=str(data.get("name", name)),
            position=Position.from_any(data["position"]),
            orientation=Orientation.coerce(data.get("orientation", 0)),
        )


@dataclass
class Bounds:
    """Axis-aligned box, min inclusive, max exclusive."""
    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    @classmethod
    def from_cells(
        cls,
        first: Tuple[float, float, float],
        last: Tuple[float, float, float],
    ) -> "Bounds":
        """
        Box covering every block between two corner cells, in any order.

        Corners are sorted per axis, so callers may pass cells produced by a
        mirrored rotation without caring which one is the minimum.
        """
        (x0, x1), (y0, y1), (z0, z1) = (sorted(pair) for pair in zip(first, last))
        return cls(x0, y0, z0, x1 + 1, y1 + 1, z1 + 1)

    def contains(self, pos: Position) -> bool:
        return (
            self.min_x <= pos.x < self.max_x
            and self.min_y <= pos.y < self.max_y
            and self.min_z <= pos.z < self.max_z
        )

