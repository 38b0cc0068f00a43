"""Arrange rendered images and info text in the terminal."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from wcwidth import wcswidth, wcwidth

from termgreet.colors import apply_color
from termgreet.engine import ImageRenderer
from termgreet.model import ImageSource
from termgreet.terminal import cursor_column, cursor_down, cursor_forward, cursor_up, write

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

HIDDEN_VALUES = ("", "Unknown")


class Layout(Enum):
    INFO_ONLY = "info"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    @classmethod
    def parse(cls, name: str) -> "Layout":
        """Unknown names fall back to vertical."""
        for layout in cls:
            if layout.value == name.lower():
                return layout
        return cls.VERTICAL


def visible_width(text: str) -> int:
    """Terminal columns taken by text, ignoring colour escapes and counting wide glyphs as two."""
    plain = ANSI_ESCAPE.sub("", text)
    width = wcswidth(plain)
    if width < 0:
        # Non-printable characters present; count the printable ones only
        width = sum(max(wcwidth(ch), 0) for ch in plain)
    return width


def pad_to_width(text: str, width: int) -> str:
    return text + " " * max(width - visible_width(text), 0)


@dataclass
class InfoStyle:
    separator: str = "->"
    space_before: int = 2
    space_after: int = 2
    align_separator: bool = True
    module_color: str = "bright_cyan"
    separator_color: str = "bright_blue"
    info_color: str = "bright_white"

    @property
    def full_separator(self) -> str:
        return " " * self.space_before + self.separator + " " * self.space_after


def format_info_lines(pairs: list[tuple[str, str]], style: InfoStyle) -> list[str]:
    """Turn (label, value) pairs into coloured lines.

    Empty and "Unknown" values are dropped. Continuation lines of a multi-line value
    are indented to the value column of the first line.
    """
    visible = [(label, value.strip()) for label, value in pairs if value.strip() not in HIDDEN_VALUES]
    separator = style.full_separator
    label_width = 0
    if style.align_separator and visible:
        label_width = max(visible_width(label) for label, _ in visible)

    lines = []
    for label, value in visible:
        name = pad_to_width(label, label_width) if style.align_separator else label
        first, *rest = value.splitlines()
        lines.append(
            apply_color(name, style.module_color)
            + apply_color(separator, style.separator_color)
            + apply_color(first, style.info_color)
        )
        indent = " " * (visible_width(name) + visible_width(separator))
        for continuation in rest:
            lines.append(indent + apply_color(continuation, style.info_color))
    return lines


def side_by_side(image_lines: list[str], info_lines: list[str], column_width: int, gap: int) -> list[str]:
    """Zip image and text lines; the image column is padded to a fixed width."""
    rows = max(len(image_lines), len(info_lines))
    out = []
    for i in range(rows):
        left = image_lines[i] if i < len(image_lines) else ""
        right = info_lines[i] if i < len(info_lines) else ""
        out.append(pad_to_width(left, column_width) + " " * gap + right)
    return out


class Compositor:
    def __init__(
        self,
        stream: TextIO | None = None,
        padding: int = 2,
        image_width: int = 40,
        image_height: int = 20,
    ):
        self.stream = stream
        self.padding = padding
        self.image_width = image_width
        self.image_height = image_height

    def _print_lines(self, lines: list[str]) -> None:
        if lines:
            write("\n".join(lines) + "\n", self.stream)

    def _pad(self) -> None:
        write("\n" * self.padding, self.stream, flush=True)

    def info_only(self, info_lines: list[str]) -> None:
        self._print_lines(info_lines)
        self._pad()

    def vertical(self, renderer: ImageRenderer, source: ImageSource, info_lines: list[str]) -> None:
        image_lines = renderer.render(source)
        if image_lines is not None:
            self._print_lines(image_lines)
        self._print_lines([""] + info_lines)
        self._pad()

    def horizontal(self, renderer: ImageRenderer, source: ImageSource, info_lines: list[str]) -> None:
        if not renderer.wants_protocol():
            image_lines = renderer.render_blocks(source)
            self._print_lines(side_by_side(image_lines, info_lines, self.image_width, self.padding))
            self._pad()
            return

        total = max(self.image_height, len(info_lines))
        # Reserve the region so the terminal does not scroll while we draw into it
        write("\n" * total + cursor_up(total), self.stream, flush=True)

        image_lines = renderer.render(source)
        if image_lines is None:
            self._place_text_beside_image(info_lines, total)
        else:
            # Protocol failed before writing anything; the cursor is still at the top
            self._print_lines(side_by_side(image_lines, info_lines, self.image_width, self.padding))
        self._pad()

    def _place_text_beside_image(self, info_lines: list[str], total: int) -> None:
        info_col = self.image_width + self.padding
        out = [cursor_up(self.image_height), cursor_forward(info_col)]
        for i, line in enumerate(info_lines):
            if i > 0:
                out.append(cursor_down(1) + cursor_column(info_col + 1))
            out.append(line)
        last_row = max(len(info_lines) - 1, 0)
        out.append(cursor_down(total - 1 - last_row))
        out.append(cursor_column(1) + "\n")
        write("".join(out), self.stream, flush=True)
