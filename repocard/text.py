"""
Text helpers for the card: width approximation, grapheme-aware wrapping and
the compact number/age formatters used by the stat row.
"""

from __future__ import annotations
import datetime
import re
import unicodedata
from typing import List, Optional

import emoji
from dateutil import parser as date_parser

# ------------------ Measurement ------------------
# Advance widths (em) of printable ASCII in a sans-serif UI font, indexed by code point - 32.
_ASCII_WIDTHS = [
    0.2796875, 0.2765625, 0.3546875, 0.5546875, 0.5546875, 0.8890625, 0.665625, 0.190625,
    0.3328125, 0.3328125, 0.3890625, 0.5828125, 0.2765625, 0.3328125, 0.2765625, 0.3015625,
    0.5546875, 0.5546875, 0.5546875, 0.5546875, 0.5546875, 0.5546875, 0.5546875, 0.5546875,
    0.5546875, 0.5546875, 0.2765625, 0.2765625, 0.584375, 0.5828125, 0.584375, 0.5546875,
    1.0140625, 0.665625, 0.665625, 0.721875, 0.721875, 0.665625, 0.609375, 0.7765625,
    0.721875, 0.2765625, 0.5, 0.665625, 0.5546875, 0.8328125, 0.721875, 0.7765625,
    0.665625, 0.7765625, 0.721875, 0.665625, 0.609375, 0.721875, 0.665625, 0.94375,
    0.665625, 0.665625, 0.609375, 0.2765625, 0.3546875, 0.2765625, 0.4765625, 0.5546875,
    0.3328125, 0.5546875, 0.5546875, 0.5, 0.5546875, 0.5546875, 0.2765625, 0.5546875,
    0.5546875, 0.221875, 0.240625, 0.5, 0.221875, 0.8328125, 0.5546875, 0.5546875,
    0.5546875, 0.5546875, 0.3328125, 0.5, 0.2765625, 0.5546875, 0.5, 0.721875,
    0.5, 0.5, 0.5, 0.3546875, 0.259375, 0.353125, 0.5890625,
]
AVERAGE_CHAR_WIDTH = 0.5279276315789471


def char_width(char: str) -> float:
    code = ord(char)
    if code < 32:
        return 0.0
    if code < 32 + len(_ASCII_WIDTHS):
        return _ASCII_WIDTHS[code - 32]
    return AVERAGE_CHAR_WIDTH


def measure_text(text: str, font_size: float = 10) -> float:
    """Approximate rendered width of `text` in px at `font_size`."""
    return sum(char_width(c) for c in text) * font_size


# ------------------ Graphemes ------------------
ZWJ = "\u200d"
_EXTENDING_CATEGORIES = ("Mn", "Me", "Mc")


def _is_regional(char: str) -> bool:
    return "\U0001f1e6" <= char <= "\U0001f1ff"


def _extends(cluster: str, char: str) -> bool:
    if cluster.endswith(ZWJ) or char == ZWJ:
        return True
    if unicodedata.category(char) in _EXTENDING_CATEGORIES:
        return True
    # skin tone modifiers and emoji tag sequences
    if "\U0001f3fb" <= char <= "\U0001f3ff" or "\U000e0020" <= char <= "\U000e007f":
        return True
    if _is_regional(char) and _is_regional(cluster[-1]):
        return sum(1 for c in cluster if _is_regional(c)) % 2 == 1
    return False


def graphemes(text: str) -> List[str]:
    """Split text into user-perceived characters (base + combining marks, ZWJ sequences, flags)."""
    clusters: List[str] = []
    for char in text:
        if clusters and _extends(clusters[-1], char):
            clusters[-1] += char
        else:
            clusters.append(char)
    return clusters


def grapheme_len(text: str) -> int:
    return len(graphemes(text))


def truncate_text(text: str, max_chars: int, ellipsis: str = "...") -> str:
    clusters = graphemes(text)
    if len(clusters) <= max_chars:
        return text
    return "".join(clusters[:max_chars]) + ellipsis


# ------------------ Emoji ------------------
def parse_emojis(text: str) -> str:
    """Expand GitHub-style shortcodes (":heart:"). Unknown shortcodes stay as typed."""
    return emoji.emojize(text, language="alias")


# ------------------ Wrapping ------------------
FULL_WIDTH_COMMA = "\uff0c"
ELLIPSIS = "..."


def _greedy_wrap(text: str, width: int) -> List[str]:
    lines: List[str] = []
    cur = ''
    for w in text.split():
        test = (cur + ' ' + w).strip()
        if grapheme_len(test) <= width:
            cur = test
        else:
            if cur:
                lines.append(cur)
            cur = w
    if cur:
        lines.append(cur)
    return lines


def _fit_ellipsis(line: str, width: int) -> str:
    clusters = graphemes(line)
    while clusters and len(clusters) + len(ELLIPSIS) > width:
        clusters.pop()
    return "".join(clusters).rstrip() + ELLIPSIS


def wrap_text_multiline(text: str, width: int = 59, max_lines: int = 3) -> List[str]:
    """
    Greedy word wrap into at most `max_lines` lines of `width` grapheme clusters.

    A word longer than `width` is kept whole on its own line. When the text needs
    more lines than allowed, the last kept line is shortened to end with "...".
    Descriptions using the full-width comma are broken at the commas instead.
    """
    if FULL_WIDTH_COMMA in text:
        wrapped = [part.strip() for part in text.split(FULL_WIDTH_COMMA)]
    else:
        wrapped = _greedy_wrap(text, width)
    wrapped = [line for line in wrapped if line]
    lines = wrapped[:max_lines]
    if len(wrapped) > max_lines:
        lines[-1] = _fit_ellipsis(lines[-1], width)
    return lines


# ------------------ Formatters ------------------
_NUMBER_UNITS = ((1_000, "k"), (1_000_000, "M"), (1_000_000_000, "B"))


def k_formatter(num: int) -> str:
    """999 -> '999', 1500 -> '1.5k', 2000000 -> '2M'."""
    sign = "-" if num < 0 else ""
    value = abs(int(num))
    if value < 1000:
        return f"{sign}{value}"
    for divisor, suffix in _NUMBER_UNITS:
        scaled = f"{value / divisor:.1f}"
        if float(scaled) < 1000:
            break
    if scaled.endswith(".0"):
        scaled = scaled[:-2]
    return f"{sign}{scaled}{suffix}"


def parse_timestamp(iso: Optional[str]) -> Optional[datetime.datetime]:
    if not iso:
        return None
    try:
        ts = date_parser.isoparse(iso)
    except (ValueError, OverflowError):
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.timezone.utc)
    return ts


# Fixed-length buckets: a year is 365 days and a month 30, whatever the calendar says.
AGE_UNITS = (
    (365 * 24 * 3600, "y"),
    (30 * 24 * 3600, "mo"),
    (24 * 3600, "d"),
    (3600, "h"),
    (60, "m"),
)


def format_age(iso: Optional[str], now: Optional[datetime.datetime] = None) -> str:
    """Compact age of a timestamp: the largest whole unit, e.g. '2y', '3mo', '5d'. '' if unknown."""
    then = parse_timestamp(iso)
    if then is None:
        return ""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    sec = max(0, int((now - then).total_seconds()))
    for size, unit in AGE_UNITS:
        if sec >= size:
            return f"{sec // size}{unit}"
    return f"{sec}s"


# ------------------ XML safety ------------------
_XML_INVALID = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def xml_safe(text: str) -> str:
    """Drop characters XML 1.0 cannot carry; lxml escapes the rest on serialization."""
    return _XML_INVALID.sub("", text)
