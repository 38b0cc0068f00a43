"""Terminal capability detection from environment variables."""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass

Environ = Mapping[str, str]

KITTY_TERM_PROGRAMS = ("iTerm.app", "WezTerm", "ghostty")

# Evaluated in order; the first matching rule wins.
PIXEL_PROTOCOL_RULES: list[tuple[str, Callable[[Environ], bool]]] = [
    ("TERM names kitty", lambda env: "kitty" in env.get("TERM", "")),
    ("Ghostty resources directory", lambda env: "GHOSTTY_RESOURCES_DIR" in env),
    ("TERM_PROGRAM allow-list", lambda env: env.get("TERM_PROGRAM", "") in KITTY_TERM_PROGRAMS),
]

MULTIPLEXER_VARIABLES = ("TMUX",)


@dataclass(frozen=True)
class TerminalCapability:
    supports_pixel_protocol: bool = False
    inside_multiplexer: bool = False


def matching_rule(environ: Environ) -> str | None:
    """Return the description of the first pixel-protocol rule that matches."""
    for description, check in PIXEL_PROTOCOL_RULES:
        if check(environ):
            return description
    return None


def detect(environ: Environ | None = None) -> TerminalCapability:
    if environ is None:
        environ = os.environ
    return TerminalCapability(
        supports_pixel_protocol=matching_rule(environ) is not None,
        inside_multiplexer=any(name in environ for name in MULTIPLEXER_VARIABLES),
    )
