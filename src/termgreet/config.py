"""
Config loader and defaults for termgreet.

- One TOML file per user, read with tomllib. Never written back.
- Deep-merge of the user file over DEFAULT_CONFIG.
- Out-of-range or mistyped values fall back to defaults or are clamped;
  only an unreadable or unparsable file is an error.

Usage:
    from termgreet.config import Config
    cfg = Config.load()                 # ~/.config/termgreet/config.toml
    cfg.render_config().target_cells
    cfg["display"]["layout"]
"""

import copy
import logging
import os
import platform
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from termgreet.errors import ConfigError
from termgreet.layout import InfoStyle, Layout
from termgreet.model import BlockStyle, ColorMode, RenderConfig, SamplingMethod

log = logging.getLogger(__name__)

APP_DIR = "termgreet"

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: dict[str, Any] = {
    "general": {
        "show_title": True,
        "title": "System Information",
        "separator": {
            "symbol": "->",
            "space_before": 2,
            "space_after": 2,
            "align_separator": True,
        },
        "colors": {
            "title": "bright_cyan",
            "module": "bright_cyan",
            "info": "bright_white",
            "separator": "bright_blue",
        },
    },
    "display": {
        "show_image": True,
        "image_path": None,               # falls back to <config dir>/pngs/termgreet_logo.png
        "layout": "vertical",             # vertical | horizontal
        "prefer_kitty_graphics": True,    # False forces block rendering
        "kitty_direct": True,             # send file paths instead of pixels when possible
        "padding": 2,
        "image_size": {
            "width": 40,                  # character cells
            "height": 20,
            "cell_width": 10,             # pixels per character cell
            "cell_height": 20,
            "halve_above_cell_width": 20,
            "halve_below_cell_height": 15,
        },
        "block_rendering": {
            "block_style": "default",     # default | ascii | braille | custom
            "custom_blocks": ["█", "▓", "▒", "░", " "],
            "brightness_thresholds": [0.8, 0.6, 0.3, 0.1],
            "color_mode": "truecolor",    # truecolor | 256color | 16color | monochrome
            "contrast": 1.0,
            "brightness_boost": 0.0,
            "sampling_method": "dominant",  # average | dominant | weighted
            "enable_dithering": False,
        },
    },
    "show_motd": True,
    "motd_file": None,                    # auto if None: <config dir>/motd.toml
    "logging": {
        "level": "WARNING",
        "file": None,
        "rotate_bytes": 1024 * 1024,
        "rotate_keep": 3,
    },
}

# ----------------------------
# Helpers
# ----------------------------

def config_home() -> Path:
    """Return the per-OS termgreet config directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return Path(base) / APP_DIR
    if platform.system() == "Darwin":
        return Path(os.path.expanduser("~/Library/Application Support")) / APP_DIR
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(base) / APP_DIR


def default_config_path() -> Path:
    """Resolve default config path, honoring TERMGREET_CONFIG env override."""
    env = os.environ.get("TERMGREET_CONFIG")
    if env:
        return Path(os.path.expanduser(env))
    return config_home() / "config.toml"


def default_image_path() -> Path:
    return config_home() / "pngs" / "termgreet_logo.png"


def _deep_merge(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a.

    A table in a is never replaced by a non-table value from b.
    """
    out = dict(a)
    for k, v in b.items():
        if isinstance(out.get(k), dict):
            if isinstance(v, dict):
                out[k] = _deep_merge(out[k], v)
            else:
                log.debug("Ignoring non-table value for [%s]", k)
        else:
            out[k] = v
    return out


def _coerce_num(v: Any, default: float, minmax: tuple[float, float] | None = None) -> float:
    if isinstance(v, bool):
        return float(default)
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if minmax:
        lo, hi = minmax
        x = min(max(x, lo), hi)
    return x


def _coerce_int(v: Any, default: int, minmax: tuple[int, int] | None = None) -> int:
    if isinstance(v, bool):
        return int(default)
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        x = min(max(x, lo), hi)
    return x


def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
    return default


def _coerce_enum(enum_cls, v: Any, default: str):
    try:
        return enum_cls(str(v).lower())
    except ValueError:
        log.debug("Unknown %s %r, using %r", enum_cls.__name__, v, default)
        return enum_cls(default)


def _coerce_path(v: Any) -> Path | None:
    if not v or not isinstance(v, str):
        return None
    return Path(os.path.expanduser(v))


def _coerce_thresholds(v: Any, default: list) -> list:
    if not isinstance(v, list):
        return list(default)
    out = []
    for item in v:
        if isinstance(item, (int, float)) and not isinstance(item, bool):
            out.append(min(max(float(item), 0.0), 1.0))
    return out if out else list(default)


def _coerce_optional_px(v: Any, default: int) -> int | None:
    # 0 or a negative number disables the heuristic
    x = _coerce_int(v, default)
    return x if x > 0 else None


def _sanitize(data: dict[str, Any]) -> dict[str, Any]:
    """Coerce every known key into range. Unknown keys are left alone."""
    d = DEFAULT_CONFIG
    g = data["general"]
    g["show_title"] = _coerce_bool(g.get("show_title"), d["general"]["show_title"])
    if g.get("title") is not None and not isinstance(g["title"], str):
        g["title"] = str(g["title"])
    sep = g["separator"]
    sep["symbol"] = str(sep.get("symbol", d["general"]["separator"]["symbol"]))
    sep["space_before"] = _coerce_int(sep.get("space_before"), d["general"]["separator"]["space_before"], (0, 40))
    sep["space_after"] = _coerce_int(sep.get("space_after"), d["general"]["separator"]["space_after"], (0, 40))
    sep["align_separator"] = _coerce_bool(sep.get("align_separator"), d["general"]["separator"]["align_separator"])
    for key, default in d["general"]["colors"].items():
        value = g["colors"].get(key)
        g["colors"][key] = value if isinstance(value, str) else default

    disp = data["display"]
    dd = d["display"]
    disp["show_image"] = _coerce_bool(disp.get("show_image"), dd["show_image"])
    disp["layout"] = Layout.parse(str(disp.get("layout", dd["layout"]))).value
    disp["prefer_kitty_graphics"] = _coerce_bool(disp.get("prefer_kitty_graphics"), dd["prefer_kitty_graphics"])
    disp["kitty_direct"] = _coerce_bool(disp.get("kitty_direct"), dd["kitty_direct"])
    disp["padding"] = _coerce_int(disp.get("padding"), dd["padding"], (0, 255))

    size = disp["image_size"]
    ds = dd["image_size"]
    for key in ("width", "height", "cell_width", "cell_height"):
        size[key] = _coerce_int(size.get(key), ds[key], (1, 10000))

    br = disp["block_rendering"]
    db = dd["block_rendering"]
    br["brightness_thresholds"] = _coerce_thresholds(br.get("brightness_thresholds"), db["brightness_thresholds"])
    blocks = br.get("custom_blocks")
    br["custom_blocks"] = [str(b) for b in blocks] if isinstance(blocks, list) else list(db["custom_blocks"])
    br["contrast"] = _coerce_num(br.get("contrast"), db["contrast"])
    br["brightness_boost"] = _coerce_num(br.get("brightness_boost"), db["brightness_boost"])
    br["enable_dithering"] = _coerce_bool(br.get("enable_dithering"), db["enable_dithering"])

    data["show_motd"] = _coerce_bool(data.get("show_motd"), d["show_motd"])
    lg = data["logging"]
    if not isinstance(lg.get("level"), str):
        lg["level"] = d["logging"]["level"]
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), d["logging"]["rotate_bytes"], (1024, 1 << 30))
    lg["rotate_keep"] = _coerce_int(lg.get("rotate_keep"), d["logging"]["rotate_keep"], (0, 100))
    return data

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    data: dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_CONFIG))
    path: Path | None = None

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    @classmethod
    def from_dict(cls, raw: dict[str, Any], path: Path | None = None) -> "Config":
        merged = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), raw)
        return cls(data=_sanitize(merged), path=path)

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Read the config file; a missing file gives the defaults."""
        path = Path(path) if path is not None else default_config_path()
        if not path.exists():
            log.debug("No config at %s, using defaults", path)
            return cls(path=path)
        try:
            with path.open("rb") as f:
                raw = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse config file: {path}: {e}") from e
        return cls.from_dict(raw, path=path)

    # Typed views -----------------------------------------------------

    @property
    def layout(self) -> Layout:
        return Layout(self.data["display"]["layout"])

    @property
    def image_path(self) -> Path | None:
        return _coerce_path(self.data["display"].get("image_path"))

    @property
    def motd_path(self) -> Path:
        return _coerce_path(self.data.get("motd_file")) or config_home() / "motd.toml"

    def render_config(self) -> RenderConfig:
        size = self.data["display"]["image_size"]
        br = self.data["display"]["block_rendering"]
        db = DEFAULT_CONFIG["display"]["block_rendering"]
        ds = DEFAULT_CONFIG["display"]["image_size"]
        return RenderConfig(
            target_cells=(size["width"], size["height"]),
            cell_pixel_size=(size["cell_width"], size["cell_height"]),
            block_style=_coerce_enum(BlockStyle, br.get("block_style"), db["block_style"]),
            custom_glyphs=list(br["custom_blocks"]),
            brightness_thresholds=list(br["brightness_thresholds"]),
            color_mode=_coerce_enum(ColorMode, br.get("color_mode"), db["color_mode"]),
            contrast=br["contrast"],
            brightness_boost=br["brightness_boost"],
            sampling_method=_coerce_enum(SamplingMethod, br.get("sampling_method"), db["sampling_method"]),
            dithering=br["enable_dithering"],
            wide_cell_px=_coerce_optional_px(size.get("halve_above_cell_width"), ds["halve_above_cell_width"]),
            short_cell_px=_coerce_optional_px(size.get("halve_below_cell_height"), ds["halve_below_cell_height"]),
        )

    def info_style(self) -> InfoStyle:
        sep = self.data["general"]["separator"]
        colors = self.data["general"]["colors"]
        return InfoStyle(
            separator=sep["symbol"],
            space_before=sep["space_before"],
            space_after=sep["space_after"],
            align_separator=sep["align_separator"],
            module_color=colors["module"],
            separator_color=colors["separator"],
            info_color=colors["info"],
        )
