"""
Plain-text rendering of a tile grid.
"""

from typing import Dict, Optional, Sequence

SYMBOLS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def render_text(
    grid: Sequence[Optional[int]],
    width: int,
    symbols: Optional[Dict[int, str]] = None,
    unresolved: str = "?"
) -> str:
    """
    One line per row. Tiles are shown by `symbols` if given, else by a
    single character for ids below 62 and the number in brackets above.
    """
    if width <= 0:
        return ""

    lines = []
    for start in range(0, len(grid), width):
        row = []
        for tile_id in grid[start:start + width]:
            if tile_id is None:
                row.append(unresolved)
            elif symbols is not None and tile_id in symbols:
                row.append(symbols[tile_id])
            elif tile_id < len(SYMBOLS):
                row.append(SYMBOLS[tile_id])
            else:
                row.append(f"[{tile_id}]")
        lines.append(''.join(row))
    return '\n'.join(lines)
