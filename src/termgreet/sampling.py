import numpy as np

from termgreet.model import RenderConfig, SamplingMethod

# Rec. 601 luma weights for R, G, B
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

# Left pixel weight for SamplingMethod.WEIGHTED; the right pixel gets the rest
LEFT_WEIGHT = 0.6

BAYER_4X4 = (
    np.array(
        [
            [0, 8, 2, 10],
            [12, 4, 14, 6],
            [3, 11, 1, 9],
            [15, 7, 13, 5],
        ],
        dtype=np.float64,
    )
    / 16.0
    - 0.5
)


def luma(r: float, g: float, b: float) -> float:
    """Perceptual brightness of an 8-bit colour, in [0, 1]."""
    return (r * 0.299 + g * 0.587 + b * 0.114) / 255.0


def adjust_brightness(brightness: float, boost: float, contrast: float) -> float:
    """Apply brightness boost, then contrast around the midpoint. Result is clamped to [0, 1]."""
    boosted = min(max(brightness + boost, 0.0), 1.0)
    return min(max((boosted - 0.5) * contrast + 0.5, 0.0), 1.0)


def effective_size(config: RenderConfig) -> tuple[int, int]:
    """Cell grid actually rendered by the glyph path.

    The grid is halved horizontally for wide font cells and vertically for short
    ones; each threshold can be disabled with None.
    """
    width, height = config.target_cells
    cell_w, cell_h = config.cell_pixel_size
    if config.wide_cell_px is not None and cell_w > config.wide_cell_px:
        width //= 2
    if config.short_cell_px is not None and cell_h < config.short_cell_px:
        height //= 2
    return max(width, 1), max(height, 1)


def sample_cells(arr: np.ndarray, method: SamplingMethod) -> tuple[np.ndarray, np.ndarray]:
    """Reduce horizontal pixel pairs to one colour per cell.

    ``arr`` is an (rows, 2 * cols, 3) uint8 RGB array. Returns the per-cell colour as
    (rows, cols, 3) uint8 and its luma brightness as (rows, cols) float in [0, 1].
    """
    cols = arr.shape[1] // 2
    left = arr[:, 0 : 2 * cols : 2].astype(np.int32)
    right = arr[:, 1 : 2 * cols : 2].astype(np.int32)

    if method is SamplingMethod.DOMINANT:
        left_luma = left @ LUMA_WEIGHTS
        right_luma = right @ LUMA_WEIGHTS
        # Ties go to the right pixel
        colours = np.where((left_luma > right_luma)[..., np.newaxis], left, right)
    elif method is SamplingMethod.WEIGHTED:
        colours = np.floor(left * LEFT_WEIGHT + right * (1.0 - LEFT_WEIGHT)).astype(np.int32)
    else:
        colours = (left + right) // 2

    colours = np.clip(colours, 0, 255).astype(np.uint8)
    brightness = (colours.astype(np.float64) @ LUMA_WEIGHTS) / 255.0
    return colours, brightness


def dither_offsets(rows: int, cols: int, step: float) -> np.ndarray:
    """Ordered-dither brightness offsets for a grid, spanning one ramp step."""
    tiled = np.tile(BAYER_4X4, (rows // 4 + 1, cols // 4 + 1))
    return tiled[:rows, :cols] * step
