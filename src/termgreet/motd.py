import random
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from termgreet.colors import apply_color
from termgreet.errors import MotdError

DEFAULT_MESSAGES = [
    "Welcome to your system!",
    "Have a great day!",
    "Ready to code!",
]


@dataclass
class MotdConfig:
    enabled: bool = True
    messages: list[str] = field(default_factory=lambda: list(DEFAULT_MESSAGES))
    random: bool = True
    color: str = "bright_green"


def load_motd(path: str | Path) -> MotdConfig:
    """Read a MOTD file. A missing file gives the defaults; a broken one raises MotdError."""
    path = Path(path)
    if not path.exists():
        return MotdConfig()
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except OSError as e:
        raise MotdError(f"Failed to read MOTD config file: {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise MotdError(f"Failed to parse MOTD config file: {path}: {e}") from e

    defaults = MotdConfig()
    messages = raw.get("messages", defaults.messages)
    if not isinstance(messages, list) or not all(isinstance(m, str) for m in messages):
        raise MotdError(f"'messages' must be a list of strings in {path}")
    return MotdConfig(
        enabled=bool(raw.get("enabled", defaults.enabled)),
        messages=messages,
        random=bool(raw.get("random", defaults.random)),
        color=str(raw.get("color", defaults.color)),
    )


def pick_message(cfg: MotdConfig, rng: random.Random | None = None) -> str | None:
    if not cfg.enabled or not cfg.messages:
        return None
    if cfg.random:
        return (rng or random).choice(cfg.messages)
    return cfg.messages[0]


def format_motd(cfg: MotdConfig, rng: random.Random | None = None) -> str | None:
    message = pick_message(cfg, rng)
    if message is None:
        return None
    return apply_color(message, cfg.color)
