"""Tests for wfc2d.utils modules."""

from PIL import Image

from wfc2d.utils import default_palette, export_grid_to_png, render_grid_image, render_text


class TestRenderText:
    """Tests for render_text."""

    def test_rows(self):
        assert render_text([0, 1, 2, 1, 0, None], 3) == "012\n10?"

    def test_symbols(self):
        assert render_text([0, 1, 1, 0], 2, symbols={0: '.', 1: '#'}) == ".#\n#."

    def test_large_ids(self):
        assert render_text([70, 1], 2) == "[70]1"

    def test_zero_width(self):
        assert render_text([0], 0) == ""


class TestPngExport:
    """Tests for PNG rendering and export."""

    def test_palette_is_distinct(self):
        palette = default_palette(5)
        assert len(set(palette.values())) == 5

    def test_image_size_and_colors(self):
        palette = {0: (255, 0, 0), 1: (0, 0, 255)}
        image = render_grid_image([0, 1, None, 0], 2, tile_size=4, palette=palette)

        assert image.size == (8, 8)
        assert image.getpixel((1, 1)) == (255, 0, 0)
        assert image.getpixel((5, 1)) == (0, 0, 255)
        assert image.getpixel((1, 5)) == (200, 200, 200)

    def test_tile_images(self):
        green = Image.new('RGB', (2, 2), (0, 255, 0))
        image = render_grid_image([0, 1], 2, tile_size=6, tile_images={1: green})
        assert image.getpixel((8, 3)) == (0, 255, 0)

    def test_export(self, tmp_path):
        path = tmp_path / "grid.png"
        assert export_grid_to_png(path, [0, 1, 1, 0], 2, tile_size=3) is True
        with Image.open(path) as image:
            assert image.size == (6, 6)

    def test_export_empty(self, tmp_path):
        assert export_grid_to_png(tmp_path / "grid.png", [], 2) is False
