import sys
from typing import TextIO

ESC = "\x1b"
RESET = f"{ESC}[0m"


def cursor_up(n: int) -> str:
    return f"{ESC}[{n}A" if n > 0 else ""


def cursor_down(n: int) -> str:
    return f"{ESC}[{n}B" if n > 0 else ""


def cursor_forward(n: int) -> str:
    return f"{ESC}[{n}C" if n > 0 else ""


def cursor_column(col: int) -> str:
    """Move to an absolute column, 1-indexed."""
    return f"{ESC}[{max(col, 1)}G"


def write(text: str, stream: TextIO | None = None, flush: bool = False) -> None:
    """Write to the stream (stdout by default). Write errors propagate."""
    out = stream if stream is not None else sys.stdout
    out.write(text)
    if flush:
        out.flush()
