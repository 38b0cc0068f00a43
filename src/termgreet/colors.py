from termgreet.terminal import ESC, RESET

NAMED_COLORS = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "bright_black": 90,
    "bright_red": 91,
    "bright_green": 92,
    "bright_yellow": 93,
    "bright_blue": 94,
    "bright_magenta": 95,
    "bright_cyan": 96,
    "bright_white": 97,
}


def apply_color(text: str, color_name: str) -> str:
    """Colour text with a named ANSI colour. Unknown names leave the text unchanged."""
    code = NAMED_COLORS.get(color_name.lower())
    if code is None or not text:
        return text
    return f"{ESC}[{code}m{text}{RESET}"


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    if r == g == b:
        # Grayscale ramp, with the cube corners for the extremes
        if r < 8:
            return 16
        if r > 248:
            return 231
        return min((r - 8) * 24 // 240, 23) + 232
    return 16 + 36 * (r * 5 // 255) + 6 * (g * 5 // 255) + (b * 5 // 255)


def rgb_to_ansi16(r: int, g: int, b: int) -> int:
    """Nearest SGR foreground code: 30-37, or 90-97 for bright colours."""
    code = 30
    if r > 127:
        code += 1
    if g > 127:
        code += 2
    if b > 127:
        code += 4
    if r > 191 or g > 191 or b > 191:
        code += 60
    return code
