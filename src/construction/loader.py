# path: src/construction/loader.py
# load structure documents from config/construction

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .schema import EMPTY_LABEL, BlockGrid, StructureDefinition

logger = logging.getLogger(__name__)

# Default construction directory:
# repo_root / config / construction
CONSTRUCTION_DIR = Path(__file__).resolve().parents[2] / "config" / "construction"

STRUCTURE_SUFFIXES = (".json", ".yaml", ".yml")

__all__ = [
    "CONSTRUCTION_DIR",
    "load_structures",
    "load_structure_from_file",
    "normalize",
]


def _load_document(path: Path) -> Dict[str, Any]:
    """
    Load one structure document (JSON or YAML) into a raw dict.

    Raises:
        ValueError: if the root node is not a mapping or the file does not parse.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Could not parse {path.name}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"Structure document must be a mapping at root: {path}")
    return raw


def _parse_blocks(raw_blocks: Any, name: str) -> BlockGrid:
    """
    Validate the [height][depth][width] label grid.

    Expected shape:

        blocks:
          - - ["oak_planks", "oak_door", "oak_planks"]   # y=0, z=0
            - ["oak_planks", "",         "oak_planks"]   # y=0, z=1
          - - ...                                        # y=1
    """
    if not isinstance(raw_blocks, list) or not raw_blocks:
        raise ValueError(f"Structure '{name}' has no 'blocks' layers")

    grid: BlockGrid = []
    for y, layer in enumerate(raw_blocks):
        if not isinstance(layer, list):
            raise ValueError(f"Structure '{name}' layer {y} is not a list")
        rows: List[List[Optional[str]]] = []
        for z, row in enumerate(layer):
            if not isinstance(row, list):
                raise ValueError(f"Structure '{name}' row y={y} z={z} is not a list")
            cells: List[Optional[str]] = []
            for label in row:
                if label is not None and not isinstance(label, str):
                    raise ValueError(
                        f"Structure '{name}' has non-string label {label!r} at y={y} z={z}"
                    )
                cells.append(label)
            rows.append(cells)
        grid.append(rows)

    if not grid[0] or not grid[0][0]:
        raise ValueError(f"Structure '{name}' has an empty base layer")
    return grid


def load_structure_from_file(path: Path) -> StructureDefinition:
    """
    Parse a single structure document into a normalized StructureDefinition.

    The structure name is the file stem (small_house.json -> "small_house").
    """
    raw = _load_document(path)
    name = path.stem
    blocks = _parse_blocks(raw.get("blocks"), name)

    offset_raw = raw.get("offset", 0)
    if isinstance(offset_raw, bool) or not isinstance(offset_raw, int):
        raise ValueError(f"Structure '{name}' offset must be an integer, got {offset_raw!r}")

    return normalize(StructureDefinition(name=name, blocks=blocks, offset=offset_raw))


def normalize(definition: StructureDefinition) -> StructureDefinition:
    """
    Pad every layer to a square of side max(width, depth).

    Width and depth are taken from layer 0 (its first row for the width);
    missing rows and cells are filled with EMPTY_LABEL. Rows longer than the
    square are kept as-is. The input definition is not modified, and
    normalizing an already-normalized definition returns an identical grid.
    """
    max_size = max(definition.size_x, definition.size_z)

    blocks: BlockGrid = []
    for layer in definition.blocks:
        rows = [list(row) for row in layer]
        while len(rows) < max_size:
            rows.append([])
        for row in rows:
            if len(row) < max_size:
                row.extend([EMPTY_LABEL] * (max_size - len(row)))
        blocks.append(rows)

    return StructureDefinition(name=definition.name, blocks=blocks, offset=definition.offset)


def load_structures(directory: Optional[Path] = None) -> Dict[str, StructureDefinition]:
    """
    Load all structure documents from a directory.

    Returns:
        Dict[str, StructureDefinition]: mapping from structure name -> definition

    A malformed document is logged and skipped; the remaining files still
    load. A missing directory is a configuration error and raises.

    Args:
        directory: override the construction directory (used mainly for tests).
                   Defaults to CONSTRUCTION_DIR.
    """
    base_dir = Path(directory) if directory is not None else CONSTRUCTION_DIR

    if not base_dir.exists():
        raise FileNotFoundError(f"Construction directory does not exist: {base_dir}")

    structures: Dict[str, StructureDefinition] = {}
    for path in sorted(base_dir.iterdir()):
        if path.suffix not in STRUCTURE_SUFFIXES or not path.is_file():
            continue
        try:
            definition = load_structure_from_file(path)
        except (OSError, ValueError, KeyError) as exc:
            logger.warning("Error reading construction file %s: %s", path.name, exc)
            continue
        if definition.name in structures:
            logger.warning(
                "Duplicate structure name '%s' in %s; keeping the first definition",
                definition.name,
                path.name,
            )
            continue
        structures[definition.name] = definition

    logger.info("Loaded %d structure(s) from %s", len(structures), base_dir)
    return structures
