import pytest

from termgreet.capability import TerminalCapability, detect, matching_rule


def test_empty_environment_has_no_capabilities():
    assert detect({}) == TerminalCapability(supports_pixel_protocol=False, inside_multiplexer=False)


@pytest.mark.parametrize(
    "environ",
    [
        {"TERM": "xterm-kitty"},
        {"GHOSTTY_RESOURCES_DIR": "/usr/share/ghostty"},
        {"TERM_PROGRAM": "WezTerm"},
        {"TERM_PROGRAM": "iTerm.app"},
    ],
)
def test_known_terminals_support_protocol(environ):
    assert detect(environ).supports_pixel_protocol


@pytest.mark.parametrize(
    "environ",
    [
        {"TERM": "xterm-256color"},
        {"TERM_PROGRAM": "Apple_Terminal"},
        {"TERM_PROGRAM": "wezterm"},
    ],
)
def test_other_terminals_do_not(environ):
    assert not detect(environ).supports_pixel_protocol


def test_tmux_is_detected():
    caps = detect({"TMUX": "/tmp/tmux-1000/default,1,0", "TERM": "screen-256color"})
    assert caps.inside_multiplexer
    assert not caps.supports_pixel_protocol


def test_first_matching_rule_wins():
    assert matching_rule({"TERM": "xterm-kitty", "TERM_PROGRAM": "WezTerm"}) == "TERM names kitty"
    assert matching_rule({}) is None


def test_defaults_to_process_environment(monkeypatch):
    for name in ("TERM", "TERM_PROGRAM", "GHOSTTY_RESOURCES_DIR", "TMUX"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TERM", "xterm-kitty")
    assert detect().supports_pixel_protocol
