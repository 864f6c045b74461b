"""Colour resolution: overrides, themes and gradients."""
from repocard.themes import THEMES, get_card_colors, is_valid_hex_color, parse_gradient


def test_default_theme():
    colors = get_card_colors()
    assert colors.title_color == "#2f80ed"
    assert colors.bg_color == "#fffefe"
    assert colors.border_color == "#e4e2e2"


def test_override_wins():
    colors = get_card_colors(title_color="ff0000", theme="dark")
    assert colors.title_color == "#ff0000"
    assert colors.icon_color == "#" + THEMES["dark"]["icon_color"]


def test_invalid_override_falls_back_to_theme():
    colors = get_card_colors(title_color="zzz", theme="dark")
    assert colors.title_color == "#fff"


def test_unknown_theme_is_default():
    assert get_card_colors(theme="no-such-theme") == get_card_colors(theme="default")


def test_theme_without_border_uses_default_border():
    assert get_card_colors(theme="dark").border_color == "#e4e2e2"


def test_gradient_background():
    colors = get_card_colors(bg_color="35,e96443,904e95")
    assert colors.is_gradient
    assert colors.bg_color == ("35", "e96443", "904e95")


def test_hex_and_gradient_validation():
    assert is_valid_hex_color("fff")
    assert is_valid_hex_color("ffffff00")
    assert not is_valid_hex_color("#fff")
    assert not is_valid_hex_color(None)
    assert parse_gradient("35,e96443") is None
    assert parse_gradient("35,e96443,nothex") is None
