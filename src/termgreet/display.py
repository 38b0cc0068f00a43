import logging
from pathlib import Path
from typing import TextIO

from termgreet.capability import TerminalCapability, detect
from termgreet.colors import apply_color
from termgreet.config import Config, default_image_path
from termgreet.engine import ImageRenderer
from termgreet.errors import MotdError
from termgreet.kitty import KittyEncoder
from termgreet.layout import Compositor, Layout, format_info_lines
from termgreet.model import ImageSource
from termgreet.motd import format_motd, load_motd
from termgreet.terminal import write

log = logging.getLogger(__name__)


class Display:
    """Prints the title, image, info lines and message of the day."""

    def __init__(
        self,
        config: Config,
        show_images: bool = True,
        capability: TerminalCapability | None = None,
        stream: TextIO | None = None,
        image_path: Path | None = None,
        layout: Layout | None = None,
    ):
        self.config = config
        self.show_images = show_images
        self.capability = capability if capability is not None else detect()
        self.stream = stream
        self.image_path = image_path
        self.layout = layout if layout is not None else config.layout

        render_config = config.render_config()
        display = config["display"]
        encoder = KittyEncoder(self.capability, stream, allow_direct=display["kitty_direct"])
        self.renderer = ImageRenderer(
            render_config,
            self.capability,
            prefer_protocol=display["prefer_kitty_graphics"],
            encoder=encoder,
        )
        self.compositor = Compositor(
            stream,
            padding=display["padding"],
            image_width=render_config.target_cells[0],
            image_height=render_config.target_cells[1],
        )

    def resolve_image(self) -> Path | None:
        """The explicit image if it exists, else the default logo if that exists."""
        if not (self.show_images and self.config["display"]["show_image"]):
            return None
        for candidate in (self.image_path, self.config.image_path, default_image_path()):
            if candidate is not None and candidate.is_file():
                return candidate
            if candidate is not None:
                log.debug("Image %s not found", candidate)
        return None

    def show(self, pairs: list[tuple[str, str]]) -> None:
        general = self.config["general"]
        if general["show_title"] and general.get("title"):
            write(apply_color(general["title"], general["colors"]["title"]) + "\n\n", self.stream)

        info_lines = format_info_lines(pairs, self.config.info_style())
        image = self.resolve_image()
        if image is None or self.layout is Layout.INFO_ONLY:
            self.compositor.info_only(info_lines)
        elif self.layout is Layout.HORIZONTAL:
            self.compositor.horizontal(self.renderer, ImageSource.from_path(image), info_lines)
        else:
            self.compositor.vertical(self.renderer, ImageSource.from_path(image), info_lines)

        if self.config["show_motd"]:
            try:
                self.show_motd()
            except MotdError as e:
                log.warning("%s", e)

    def show_motd(self) -> None:
        """Print the message of the day. Raises MotdError if its file is broken."""
        text = format_motd(load_motd(self.config.motd_path))
        if text is not None:
            write(text + "\n", self.stream, flush=True)
