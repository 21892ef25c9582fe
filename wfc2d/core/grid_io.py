"""
Save and load grid map files (JSON).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Union

from .wave import Wave

MAP_VERSION = "1.0"


@dataclass
class CellData:
    """Data for a single grid cell."""
    index: int
    tile_id: Optional[int] = None  # None if uncollapsed
    possibilities: FrozenSet[int] = field(default_factory=frozenset)  # If uncollapsed


@dataclass
class GridState:
    """Saved state of a WFC grid."""
    width: int
    height: int
    source_rules: str = ""  # Rule file the grid was solved from
    cells: Dict[int, CellData] = field(default_factory=dict)

    @classmethod
    def from_wave(cls, wave: Wave, source_rules: str = "") -> 'GridState':
        state = cls(width=wave.width, height=wave.height, source_rules=source_rules)
        for cell in wave.cells:
            if cell.collapsed:
                state.cells[cell.index] = CellData(index=cell.index, tile_id=cell.tile)
            else:
                state.cells[cell.index] = CellData(index=cell.index, possibilities=cell.possibilities)
        return state

    def get_cell(self, index: int) -> Optional[CellData]:
        """Get cell at index, or None if out of bounds or never stored."""
        if 0 <= index < self.width * self.height:
            return self.cells.get(index)
        return None

    def output_grid(self) -> List[Optional[int]]:
        """Tile id per cell, None for unresolved cells."""
        grid = []
        for index in range(self.width * self.height):
            cell = self.cells.get(index)
            grid.append(cell.tile_id if cell is not None else None)
        return grid

    def is_complete(self) -> bool:
        """Check if all cells are collapsed."""
        return all(tile_id is not None for tile_id in self.output_grid())


def save_grid(filepath: Union[str, Path], grid_state: GridState):
    """
    Save grid state to a JSON map file.

    Args:
        filepath: Output file path
        grid_state: Grid to save
    """
    cells_data = []
    uncollapsed_data = []

    for index in range(grid_state.width * grid_state.height):
        cell = grid_state.cells.get(index)
        if cell is None:
            continue
        if cell.tile_id is not None:
            cells_data.append({"index": index, "tile_id": cell.tile_id})
        elif cell.possibilities:
            uncollapsed_data.append({
                "index": index,
                "possibilities": sorted(cell.possibilities)
            })

    map_json = {
        "version": MAP_VERSION,
        "source_rules": grid_state.source_rules,
        "grid": {
            "width": grid_state.width,
            "height": grid_state.height
        },
        "cells": cells_data,
        "uncollapsed": uncollapsed_data
    }

    Path(filepath).write_text(json.dumps(map_json, indent=2), encoding='utf-8')


def load_grid(filepath: Union[str, Path]) -> GridState:
    """
    Load a JSON map file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file is not a valid map file
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    try:
        map_data = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid map file: {e}")

    try:
        grid_state = GridState(
            width=map_data['grid']['width'],
            height=map_data['grid']['height'],
            source_rules=map_data.get('source_rules', '')
        )
    except KeyError:
        raise ValueError("Invalid map file: missing grid dimensions")

    for cell_data in map_data.get('cells', []):
        index = cell_data['index']
        grid_state.cells[index] = CellData(index=index, tile_id=cell_data['tile_id'])

    for cell_data in map_data.get('uncollapsed', []):
        index = cell_data['index']
        grid_state.cells[index] = CellData(
            index=index,
            possibilities=frozenset(cell_data.get('possibilities', []))
        )

    return grid_state
