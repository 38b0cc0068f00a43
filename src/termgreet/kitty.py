"""Kitty graphics protocol encoder."""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from PIL import Image

from termgreet.capability import TerminalCapability
from termgreet.errors import DirectModeUnavailable, ProtocolUnavailable
from termgreet.model import ImageSource
from termgreet.terminal import ESC, write

log = logging.getLogger(__name__)

CHUNK_SIZE = 4096
APC_START = f"{ESC}_G"
ST = f"{ESC}\\"


@dataclass(frozen=True)
class Chunk:
    payload: str
    more: bool


def split_chunks(payload: str, size: int = CHUNK_SIZE) -> list[Chunk]:
    """Split a base64 string into chunks; only the last one has ``more`` cleared."""
    pieces = [payload[i : i + size] for i in range(0, len(payload), size)] or [""]
    return [Chunk(piece, more=i < len(pieces) - 1) for i, piece in enumerate(pieces)]


def control(params: str, payload: str = "") -> str:
    return f"{APC_START}{params};{payload}{ST}"


def passthrough(sequence: str) -> str:
    """Wrap a sequence for tmux: escapes inside the envelope are doubled."""
    return f"{ESC}Ptmux;{sequence.replace(ESC, ESC + ESC)}{ST}"


def fit_pixel_size(
    source_size: tuple[int, int],
    cells: tuple[int, int],
    cell_pixel_size: tuple[int, int],
) -> tuple[int, int]:
    """Largest size inside ``cells * cell_pixel_size`` that keeps the source aspect ratio."""
    src_w, src_h = max(source_size[0], 1), max(source_size[1], 1)
    target_w = max(cells[0], 1) * max(cell_pixel_size[0], 1)
    target_h = max(cells[1], 1) * max(cell_pixel_size[1], 1)
    aspect = src_w / src_h
    if aspect > target_w / target_h:
        # Wider than the target box: width is the binding constraint
        width, height = target_w, int(target_w / aspect)
    else:
        width, height = int(target_h * aspect), target_h
    return max(width, 1), max(height, 1)


def direct_sequence(path: Path, cols: int, rows: int) -> str:
    encoded = base64.standard_b64encode(str(path).encode("utf-8")).decode("ascii")
    return control(f"a=T,f=100,t=f,c={cols},r={rows}", encoded)


def standard_sequences(
    image: Image.Image,
    cols: int,
    rows: int,
    cell_width: int,
    cell_height: int,
) -> list[str]:
    width, height = fit_pixel_size(image.size, (cols, rows), (cell_width, cell_height))
    resized = image.convert("RGBA").resize((width, height), Image.LANCZOS)
    payload = base64.standard_b64encode(resized.tobytes()).decode("ascii")
    chunks = split_chunks(payload)

    sequences = []
    for i, chunk in enumerate(chunks):
        if i == 0:
            params = f"a=T,f=32,s={width},v={height},c={cols},r={rows}"
            if chunk.more:
                params += ",m=1"
        else:
            params = f"m={int(chunk.more)}"
        sequences.append(control(params, chunk.payload))
    return sequences


class KittyEncoder:
    """Writes images to the terminal with the kitty graphics protocol."""

    def __init__(
        self,
        capability: TerminalCapability,
        stream: TextIO | None = None,
        allow_direct: bool = True,
    ):
        self.capability = capability
        self.stream = stream
        self.allow_direct = allow_direct

    def _require_support(self) -> None:
        if not self.capability.supports_pixel_protocol:
            raise ProtocolUnavailable("Terminal doesn't support the kitty graphics protocol")

    def _emit(self, sequences: list[str]) -> None:
        if self.capability.inside_multiplexer:
            sequences = [passthrough(seq) for seq in sequences]
        # Trailing newline leaves the cursor on the row below the image
        write("".join(sequences) + "\n", self.stream, flush=True)

    def render_direct(self, path: str | Path, cols: int, rows: int) -> None:
        self._require_support()
        path = Path(path)
        if not path.is_file():
            raise DirectModeUnavailable(f"Not a readable file: {path}")
        self._emit([direct_sequence(path.resolve(), cols, rows)])

    def render_standard(self, source: ImageSource, cols: int, rows: int, cell_width: int, cell_height: int) -> None:
        self._require_support()
        image = source.open()
        self._emit(standard_sequences(image, cols, rows, cell_width, cell_height))

    def render(self, source: ImageSource, cols: int, rows: int, cell_width: int, cell_height: int) -> None:
        """Send the image by reference if possible, otherwise by value."""
        self._require_support()
        if self.allow_direct and source.path is not None:
            try:
                self.render_direct(source.path, cols, rows)
                return
            except DirectModeUnavailable as e:
                log.debug("Direct transmission skipped: %s", e)
        self.render_standard(source, cols, rows, cell_width, cell_height)
