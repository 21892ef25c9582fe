"""
Export grid to PNG image.
"""

import colorsys
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw

Color = Tuple[int, int, int]

BACKGROUND_COLOR: Color = (200, 200, 200)


def default_palette(tile_count: int) -> Dict[int, Color]:
    """Evenly spaced hues, one per tile id."""
    palette = {}
    for tile_id in range(tile_count):
        hue = tile_id / max(tile_count, 1)
        r, g, b = colorsys.hsv_to_rgb(hue, 0.55, 0.9)
        palette[tile_id] = (int(r * 255), int(g * 255), int(b * 255))
    return palette


def render_grid_image(
    grid: Sequence[Optional[int]],
    width: int,
    tile_size: int = 16,
    palette: Optional[Dict[int, Color]] = None,
    tile_images: Optional[Dict[int, Image.Image]] = None,
    background_color: Color = BACKGROUND_COLOR
) -> Image.Image:
    """
    Draw a grid of tile ids.

    Args:
        grid: Tile id per cell (None = unresolved), row-major
        width: Cells per row
        tile_size: Size of each tile in pixels
        palette: Colour per tile id (default: evenly spaced hues)
        tile_images: Image per tile id, drawn instead of the palette colour
        background_color: Colour for unresolved cells

    Returns:
        RGB image of width * tile_size by height * tile_size pixels
    """
    height = len(grid) // width
    if palette is None:
        known = [t for t in grid if t is not None]
        palette = default_palette(max(known) + 1 if known else 0)
    tile_images = tile_images or {}

    image = Image.new('RGB', (width * tile_size, height * tile_size), background_color)
    draw = ImageDraw.Draw(image)

    # Scale tile images once (nearest neighbour for pixel art)
    scaled = {
        tile_id: img.convert('RGBA').resize((tile_size, tile_size), Image.Resampling.NEAREST)
        for tile_id, img in tile_images.items()
    }

    for index, tile_id in enumerate(grid):
        if tile_id is None:
            continue
        row, col = divmod(index, width)
        x, y = col * tile_size, row * tile_size

        tile_image = scaled.get(tile_id)
        if tile_image is not None:
            image.paste(tile_image, (x, y), tile_image)
            continue

        color = palette.get(tile_id, background_color)
        draw.rectangle([x, y, x + tile_size - 1, y + tile_size - 1], fill=color)

    return image


def export_grid_to_png(
    filepath: Union[str, Path],
    grid: Sequence[Optional[int]],
    width: int,
    tile_size: int = 16,
    palette: Optional[Dict[int, Color]] = None,
    tile_images: Optional[Dict[int, Image.Image]] = None,
    background_color: Color = BACKGROUND_COLOR
) -> bool:
    """
    Export a grid to a PNG image.

    Returns:
        True if export successful, False for an empty grid
    """
    if width <= 0 or not grid:
        return False

    image = render_grid_image(grid, width, tile_size, palette, tile_images, background_color)
    image.save(str(Path(filepath)), "PNG")
    return True
