import pytest
from PIL import Image

from termgreet.charsets import ASCII_RAMP, DEFAULT_RAMP
from termgreet.converter import (
    blank_lines,
    colorize,
    format_line,
    glyph_ramp,
    rasterize,
    render_blocks,
    select_glyph,
    select_glyph_index,
)
from termgreet.errors import ImageDecodeError
from termgreet.model import BlockStyle, ColorMode, GlyphCell, ImageSource, RenderConfig
from tests.conftest import checkerboard


def make_config(**kwargs):
    defaults = dict(
        target_cells=(3, 2),
        cell_pixel_size=(10, 20),
        block_style=BlockStyle.ASCII,
        color_mode=ColorMode.MONOCHROME,
    )
    defaults.update(kwargs)
    return RenderConfig(**defaults)


@pytest.mark.parametrize(
    "brightness,expected",
    [(0.9, 0), (0.8, 1), (0.5, 2), (0.2, 4), (0.0, 4)],
)
def test_threshold_walk_picks_first_exceeded(brightness, expected):
    assert select_glyph_index(brightness, [0.8, 0.6, 0.4, 0.2], 5) == expected


def test_more_thresholds_than_glyphs_gives_space():
    assert select_glyph(0.5, [0.9, 0.8, 0.7, 0.6, 0.4], ["#", "."]) == " "


def test_glyph_ramp_by_style():
    assert glyph_ramp(make_config(block_style=BlockStyle.ASCII)) == ASCII_RAMP
    assert glyph_ramp(make_config(block_style=BlockStyle.DEFAULT)) == DEFAULT_RAMP
    assert glyph_ramp(make_config(block_style=BlockStyle.CUSTOM, custom_glyphs=["@", "-"])) == ["@", "-"]


def test_empty_custom_ramp_falls_back_to_default():
    assert glyph_ramp(make_config(block_style=BlockStyle.CUSTOM, custom_glyphs=[])) == DEFAULT_RAMP


def test_solid_white_maps_to_densest():
    img = Image.new("RGB", (30, 40), (255, 255, 255))
    lines = render_blocks(ImageSource.from_image(img), make_config())
    assert lines == ["###", "###"]


def test_solid_black_maps_to_space():
    img = Image.new("RGB", (30, 40), (0, 0, 0))
    lines = render_blocks(ImageSource.from_image(img), make_config())
    assert lines == ["   ", "   "]


@pytest.mark.parametrize("size", [(1, 1), (3000, 2000), (5, 400)])
def test_output_height_independent_of_source(size):
    img = Image.new("RGB", size, (128, 64, 32))
    config = make_config(target_cells=(7, 5))
    lines = render_blocks(ImageSource.from_image(img), config)
    assert len(lines) == 5


def test_halved_grid_for_wide_cells():
    img = Image.new("RGB", (10, 10), (255, 255, 255))
    config = make_config(target_cells=(6, 4), cell_pixel_size=(24, 20))
    lines = render_blocks(ImageSource.from_image(img), config)
    assert lines == ["###"] * 4


def test_checkerboard_single_cell_monochrome():
    img = checkerboard(2)
    config = make_config(target_cells=(1, 1))
    lines = render_blocks(ImageSource.from_image(img), config)
    assert len(lines) == 1
    assert len(lines[0]) == 1
    assert lines[0] in ASCII_RAMP
    assert "\033" not in lines[0]


def test_accepts_file_path(image_file):
    path = image_file((255, 255, 255))
    lines = render_blocks(ImageSource.from_path(path), make_config())
    assert lines == ["###", "###"]


def test_accepts_rgba_buffer():
    pixels = bytes([255, 255, 255, 255] * 4)
    source = ImageSource.from_pixels(pixels, 2, 2)
    assert render_blocks(source, make_config(target_cells=(1, 1))) == ["#"]


def test_missing_file_raises_decode_error(tmp_path):
    with pytest.raises(ImageDecodeError):
        render_blocks(ImageSource.from_path(tmp_path / "missing.png"), make_config())


def test_not_an_image_raises_decode_error(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("not a png")
    with pytest.raises(ImageDecodeError):
        render_blocks(ImageSource.from_path(path), make_config())


def test_blank_lines_fill_effective_grid():
    assert blank_lines(make_config(target_cells=(3, 2))) == ["   ", "   "]


def test_truecolor_output_contains_escapes():
    img = Image.new("RGB", (20, 20), (255, 0, 0))
    config = make_config(target_cells=(2, 1), color_mode=ColorMode.TRUECOLOR)
    (line,) = render_blocks(ImageSource.from_image(img), config)
    assert "\033[38;2;255;0;0m" in line
    assert line.endswith("\033[0m")


def test_palette256_output():
    img = Image.new("RGB", (20, 20), (255, 0, 0))
    config = make_config(target_cells=(1, 1), color_mode=ColorMode.PALETTE256)
    assert render_blocks(ImageSource.from_image(img), config) == ["\033[38;5;196m.\033[0m"]


def test_spaces_are_never_coloured():
    img = Image.new("RGB", (20, 20), (0, 0, 0))
    config = make_config(target_cells=(3, 1), color_mode=ColorMode.TRUECOLOR)
    (line,) = render_blocks(ImageSource.from_image(img), config)
    assert "\033[38" not in line
    assert line == "   \033[0m"


def test_monochrome_has_no_escapes():
    img = Image.new("RGB", (20, 20), (255, 0, 0))
    lines = render_blocks(ImageSource.from_image(img), make_config())
    assert all("\033" not in line for line in lines)


def test_colorize_modes():
    assert colorize("#", (255, 0, 0), ColorMode.MONOCHROME) == "#"
    assert colorize("#", (255, 0, 0), ColorMode.TRUECOLOR) == "\033[38;2;255;0;0m#"
    assert colorize("#", (255, 0, 0), ColorMode.PALETTE16) == "\033[91m#"
    assert colorize(" ", (255, 0, 0), ColorMode.TRUECOLOR) == " "


def test_format_line_resets_colour():
    cells = [GlyphCell("#", (1, 2, 3)), GlyphCell(" ", (0, 0, 0))]
    assert format_line(cells, ColorMode.TRUECOLOR) == "\033[38;2;1;2;3m# \033[0m"
    assert format_line(cells, ColorMode.MONOCHROME) == "# "


def test_rasterize_keeps_sampled_colour():
    img = Image.new("RGB", (8, 8), (10, 200, 30))
    grid = rasterize(img, make_config(target_cells=(2, 2)))
    assert len(grid) == 2
    assert all(len(row) == 2 for row in grid)
    assert grid[0][0].foreground == (10, 200, 30)


def test_dithering_keeps_dimensions_and_ramp():
    img = Image.new("RGB", (40, 40), (120, 120, 120))
    config = make_config(target_cells=(8, 6), dithering=True)
    lines = render_blocks(ImageSource.from_image(img), config)
    assert len(lines) == 6
    assert all(len(line) == 8 for line in lines)
    assert set("".join(lines)) <= set(ASCII_RAMP)


def test_uniform_image_without_dithering_uses_one_glyph():
    img = Image.new("RGB", (40, 40), (120, 120, 120))
    lines = render_blocks(ImageSource.from_image(img), make_config(target_cells=(8, 6)))
    assert len(set("".join(lines))) == 1
