from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from PIL import Image

from termgreet.errors import ImageDecodeError


class BlockStyle(Enum):
    DEFAULT = "default"
    ASCII = "ascii"
    BRAILLE = "braille"
    CUSTOM = "custom"


class ColorMode(Enum):
    TRUECOLOR = "truecolor"
    PALETTE256 = "256color"
    PALETTE16 = "16color"
    MONOCHROME = "monochrome"


class SamplingMethod(Enum):
    AVERAGE = "average"
    DOMINANT = "dominant"
    WEIGHTED = "weighted"


@dataclass
class RenderConfig:
    target_cells: tuple[int, int] = (40, 20)  # (columns, rows)
    cell_pixel_size: tuple[int, int] = (10, 20)  # pixels per character cell
    block_style: BlockStyle = BlockStyle.DEFAULT
    custom_glyphs: list[str] = field(default_factory=list)
    brightness_thresholds: list[float] = field(default_factory=lambda: [0.8, 0.6, 0.3, 0.1])
    color_mode: ColorMode = ColorMode.TRUECOLOR
    contrast: float = 1.0
    brightness_boost: float = 0.0
    sampling_method: SamplingMethod = SamplingMethod.DOMINANT
    dithering: bool = False
    # Halve the cell grid when the font cell is unusually wide / short. None disables.
    wide_cell_px: int | None = 20
    short_cell_px: int | None = 15


@dataclass(frozen=True)
class GlyphCell:
    character: str
    foreground: tuple[int, int, int] | None = None


@dataclass(frozen=True)
class ImageSource:
    """An image to render: a file on disk or a decoded RGBA buffer."""

    path: Path | None = None
    pixels: bytes | None = None
    width: int = 0
    height: int = 0

    @classmethod
    def from_path(cls, path: str | Path) -> "ImageSource":
        return cls(path=Path(path))

    @classmethod
    def from_pixels(cls, pixels: bytes, width: int, height: int) -> "ImageSource":
        return cls(pixels=bytes(pixels), width=width, height=height)

    @classmethod
    def from_image(cls, image: Image.Image) -> "ImageSource":
        rgba = image.convert("RGBA")
        return cls(pixels=rgba.tobytes(), width=rgba.width, height=rgba.height)

    def open(self) -> Image.Image:
        """Decode the source into a Pillow image, raising ImageDecodeError on failure."""
        if self.path is not None:
            try:
                with Image.open(self.path) as img:
                    img.load()
                    return img.copy()
            except (OSError, ValueError, Image.DecompressionBombError) as e:
                raise ImageDecodeError(f"Failed to open image: {self.path}: {e}") from e
        if self.pixels is None:
            raise ImageDecodeError("Image source has neither a path nor pixel data")
        try:
            return Image.frombytes("RGBA", (self.width, self.height), self.pixels)
        except ValueError as e:
            raise ImageDecodeError(f"Bad RGBA buffer for {self.width}x{self.height}: {e}") from e
