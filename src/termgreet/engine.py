from __future__ import annotations

import logging
from typing import Protocol

from termgreet.capability import TerminalCapability
from termgreet.converter import blank_lines, render_blocks
from termgreet.errors import ImageDecodeError, ProtocolError
from termgreet.model import ImageSource, RenderConfig

log = logging.getLogger(__name__)


class Encoder(Protocol):
    def render(self, source: ImageSource, cols: int, rows: int, cell_width: int, cell_height: int) -> None:
        """Write the image to the terminal, raising ProtocolError or ImageDecodeError on failure."""
        ...


class ImageRenderer:
    """Two-tier render policy: graphics protocol first when wanted, then glyph blocks.

    Each tier runs at most once per call.
    """

    def __init__(
        self,
        config: RenderConfig,
        capability: TerminalCapability,
        prefer_protocol: bool = True,
        encoder: Encoder | None = None,
    ):
        self.config = config
        self.capability = capability
        self.prefer_protocol = prefer_protocol
        self.encoder = encoder

    def wants_protocol(self) -> bool:
        return self.prefer_protocol and self.capability.supports_pixel_protocol and self.encoder is not None

    def render(self, source: ImageSource) -> list[str] | None:
        """Render the image.

        Returns None when the image was written through the graphics protocol,
        otherwise the glyph lines for the caller to place.
        """
        if self.wants_protocol():
            cols, rows = self.config.target_cells
            cell_w, cell_h = self.config.cell_pixel_size
            try:
                self.encoder.render(source, cols, rows, cell_w, cell_h)
                return None
            except (ProtocolError, ImageDecodeError) as e:
                log.warning("Kitty graphics failed: %s, falling back to block rendering", e)
        return self.render_blocks(source)

    def render_blocks(self, source: ImageSource) -> list[str]:
        try:
            return render_blocks(source, self.config)
        except ImageDecodeError as e:
            log.warning("Block rendering failed: %s", e)
            return blank_lines(self.config)
