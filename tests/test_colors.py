import pytest

from termgreet.colors import apply_color, rgb_to_ansi16, rgb_to_ansi256


def test_ansi256_grayscale_branch_extremes():
    assert rgb_to_ansi256(0, 0, 0) == 16
    assert rgb_to_ansi256(255, 255, 255) == 231


def test_ansi256_grayscale_ramp():
    assert rgb_to_ansi256(128, 128, 128) == 244
    assert rgb_to_ansi256(8, 8, 8) == 232


@pytest.mark.parametrize(
    "level,code",
    [(7, 16), (8, 232), (247, 255), (248, 255), (249, 231)],
)
def test_ansi256_grayscale_boundaries(level, code):
    assert rgb_to_ansi256(level, level, level) == code


def test_ansi256_cube_branch():
    assert rgb_to_ansi256(0, 0, 1) == 16
    assert rgb_to_ansi256(255, 255, 254) == 230
    assert rgb_to_ansi256(255, 0, 0) == 196
    assert rgb_to_ansi256(0, 255, 0) == 46


@pytest.mark.parametrize(
    "rgb,code",
    [
        ((0, 0, 0), 30),
        ((127, 0, 0), 30),
        ((128, 0, 0), 31),
        ((191, 0, 0), 31),
        ((192, 0, 0), 91),
        ((0, 127, 191), 30),
        ((0, 128, 192), 92),
        ((150, 0, 0), 31),
        ((255, 0, 0), 91),
        ((0, 0, 200), 94),
        ((130, 130, 130), 37),
        ((255, 255, 255), 97),
    ],
)
def test_ansi16(rgb, code):
    assert rgb_to_ansi16(*rgb) == code


def test_apply_color_named():
    assert apply_color("hi", "red") == "\033[31mhi\033[0m"
    assert apply_color("hi", "BRIGHT_BLUE") == "\033[94mhi\033[0m"


def test_apply_color_unknown_or_empty():
    assert apply_color("hi", "mauve") == "hi"
    assert apply_color("", "red") == ""
