from __future__ import annotations
import re
from typing import Dict, Optional

from repocard.models import Background, ThemeColors

HEX_COLOR_PATTERN = re.compile(r"^([A-Fa-f0-9]{8}|[A-Fa-f0-9]{6}|[A-Fa-f0-9]{3}|[A-Fa-f0-9]{4})$")

DEFAULT_THEME = "default"

THEMES: Dict[str, Dict[str, str]] = {
    "default": {
        "title_color": "2f80ed", "icon_color": "4c71f2", "text_color": "434d58",
        "bg_color": "fffefe", "border_color": "e4e2e2",
    },
    "default_repocard": {
        "title_color": "2f80ed", "icon_color": "586069", "text_color": "434d58", "bg_color": "fffefe",
    },
    "transparent": {
        "title_color": "006AFF", "icon_color": "0579C3", "text_color": "417E87", "bg_color": "ffffff00",
    },
    "dark": {"title_color": "fff", "icon_color": "79ff97", "text_color": "9f9f9f", "bg_color": "151515"},
    "radical": {"title_color": "fe428e", "icon_color": "f8d847", "text_color": "a9fef7", "bg_color": "141321"},
    "merko": {"title_color": "abd200", "icon_color": "b7d364", "text_color": "68b587", "bg_color": "0a0f0b"},
    "gruvbox": {"title_color": "fabd2f", "icon_color": "fe8019", "text_color": "8ec07c", "bg_color": "282828"},
    "tokyonight": {"title_color": "70a5fd", "icon_color": "bf91f3", "text_color": "38bdae", "bg_color": "1a1b27"},
    "onedark": {"title_color": "e4bf7a", "icon_color": "8eb573", "text_color": "df6d74", "bg_color": "282c34"},
    "cobalt": {"title_color": "e683d9", "icon_color": "0480ef", "text_color": "75eeb2", "bg_color": "193549"},
    "synthwave": {"title_color": "e2e9ec", "icon_color": "ef8539", "text_color": "e5289e", "bg_color": "2b213a"},
    "highcontrast": {"title_color": "e7f216", "icon_color": "00ffff", "text_color": "fff", "bg_color": "000"},
    "dracula": {"title_color": "ff6e96", "icon_color": "79dafa", "text_color": "f8f8f2", "bg_color": "282a36"},
}


def is_valid_hex_color(color: Optional[str]) -> bool:
    return bool(color) and HEX_COLOR_PATTERN.match(color) is not None


def parse_gradient(value: Optional[str]) -> Optional[tuple]:
    """'35,e96443,904e95' -> ('35', 'e96443', '904e95'); None unless an angle plus two valid stops."""
    if not value or "," not in value:
        return None
    parts = tuple(p.strip() for p in value.split(","))
    if len(parts) > 2 and all(is_valid_hex_color(p) for p in parts[1:]):
        return parts
    return None


def _pick(candidates, allow_gradient: bool = False) -> Optional[Background]:
    for color in candidates:
        if allow_gradient:
            gradient = parse_gradient(color)
            if gradient:
                return gradient
        if is_valid_hex_color(color):
            return f"#{color}"
    return None


def get_card_colors(
    title_color: Optional[str] = None,
    icon_color: Optional[str] = None,
    text_color: Optional[str] = None,
    bg_color: Optional[str] = None,
    border_color: Optional[str] = None,
    theme: Optional[str] = None,
) -> ThemeColors:
    """
    Resolve the five card colours. Order of precedence per colour: a valid explicit
    override, then the selected theme, then the `default` theme. Unknown themes
    resolve to `default`.
    """
    fallback = THEMES[DEFAULT_THEME]
    selected = THEMES.get(theme or DEFAULT_THEME, fallback)

    def resolve(key: str, override: Optional[str], allow_gradient: bool = False) -> Background:
        return _pick((override, selected.get(key), fallback[key]), allow_gradient)

    return ThemeColors(
        title_color=resolve("title_color", title_color),
        icon_color=resolve("icon_color", icon_color),
        text_color=resolve("text_color", text_color),
        bg_color=resolve("bg_color", bg_color, allow_gradient=True),
        border_color=resolve("border_color", border_color),
    )
