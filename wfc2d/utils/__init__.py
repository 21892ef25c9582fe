from .png_export import export_grid_to_png, render_grid_image, default_palette
from .text_render import render_text

__all__ = ['export_grid_to_png', 'render_grid_image', 'default_palette', 'render_text']
