import numpy as np
from PIL import Image

from termgreet.charsets import ASCII_RAMP, BRAILLE_RAMP, DEFAULT_RAMP
from termgreet.colors import rgb_to_ansi16, rgb_to_ansi256
from termgreet.model import BlockStyle, ColorMode, GlyphCell, ImageSource, RenderConfig
from termgreet.sampling import adjust_brightness, dither_offsets, effective_size, sample_cells
from termgreet.terminal import ESC, RESET


def glyph_ramp(config: RenderConfig) -> list[str]:
    if config.block_style is BlockStyle.ASCII:
        return ASCII_RAMP
    if config.block_style is BlockStyle.BRAILLE:
        return BRAILLE_RAMP
    if config.block_style is BlockStyle.CUSTOM and config.custom_glyphs:
        return list(config.custom_glyphs)
    return DEFAULT_RAMP


def select_glyph_index(brightness: float, thresholds: list[float], count: int) -> int:
    """Index of the first threshold the brightness exceeds, else the last glyph."""
    for i, threshold in enumerate(thresholds):
        if brightness > threshold:
            return i
    return count - 1


def select_glyph(brightness: float, thresholds: list[float], ramp: list[str]) -> str:
    index = select_glyph_index(brightness, thresholds, len(ramp))
    # More thresholds than glyphs: indexes past the ramp render as blank
    return ramp[index] if 0 <= index < len(ramp) else " "


def colorize(glyph: str, rgb: tuple[int, int, int] | None, mode: ColorMode) -> str:
    """Prefix a glyph with a foreground escape for the colour mode. Spaces stay bare."""
    if glyph == " " or rgb is None or mode is ColorMode.MONOCHROME:
        return glyph
    r, g, b = rgb
    if mode is ColorMode.PALETTE16:
        return f"{ESC}[{rgb_to_ansi16(r, g, b)}m{glyph}"
    if mode is ColorMode.PALETTE256:
        return f"{ESC}[38;5;{rgb_to_ansi256(r, g, b)}m{glyph}"
    return f"{ESC}[38;2;{r};{g};{b}m{glyph}"


def format_line(cells: list[GlyphCell], mode: ColorMode) -> str:
    line = "".join(colorize(cell.character, cell.foreground, mode) for cell in cells)
    if mode is not ColorMode.MONOCHROME and line:
        line += RESET
    return line


def blank_lines(config: RenderConfig) -> list[str]:
    width, height = effective_size(config)
    return [" " * width] * height


def rasterize(image: Image.Image, config: RenderConfig) -> list[list[GlyphCell]]:
    """Convert an image to a grid of coloured glyphs, one cell per two source pixels."""
    cols, rows = effective_size(config)
    resized = image.convert("RGB").resize((cols * 2, rows), Image.LANCZOS)
    arr = np.asarray(resized, dtype=np.uint8)
    colours, brightness = sample_cells(arr, config.sampling_method)

    ramp = glyph_ramp(config)
    offsets = None
    if config.dithering:
        offsets = dither_offsets(rows, cols, 1.0 / len(ramp))

    grid = []
    for y in range(rows):
        row = []
        for x in range(cols):
            level = adjust_brightness(float(brightness[y, x]), config.brightness_boost, config.contrast)
            if offsets is not None:
                level = min(max(level + offsets[y, x], 0.0), 1.0)
            glyph = select_glyph(level, config.brightness_thresholds, ramp)
            r, g, b = (int(c) for c in colours[y, x])
            row.append(GlyphCell(glyph, (r, g, b)))
        grid.append(row)
    return grid


def render_blocks(source: ImageSource, config: RenderConfig) -> list[str]:
    """Render an image as text lines; always exactly the effective height.

    Raises ImageDecodeError if the source cannot be decoded.
    """
    image = source.open()
    width, height = effective_size(config)
    lines = [format_line(row, config.color_mode) for row in rasterize(image, config)]
    lines.extend([" " * width] * (height - len(lines)))
    return lines[:height]
