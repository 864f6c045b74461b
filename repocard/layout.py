from __future__ import annotations
from typing import List, NamedTuple, Optional, Sequence

from lxml import etree

from repocard.icons import ICONS
from repocard.svg import el, sub, fmt
from repocard.text import measure_text, xml_safe

ICON_SIZE = 16
LABEL_FONT_SIZE = 12
LANG_NAME_OFFSET = 15


class LayoutItem(NamedTuple):
    markup: Optional[etree._Element]
    width: float


def flex_layout(items: Sequence[LayoutItem], gap: float) -> List[etree._Element]:
    """
    Pack items left to right: item i lands at the sum of the preceding widths plus
    one gap per preceding item. Empty or zero-width items are dropped and reserve no gap.
    """
    placed: List[etree._Element] = []
    cursor_x = 0.0
    for markup, width in items:
        if markup is None or width <= 0:
            continue
        group = el("g", transform=f"translate({fmt(cursor_x)}, 0)")
        group.append(markup)
        placed.append(group)
        cursor_x += width + gap
    return placed


def icon(name: str, size: int = ICON_SIZE, **attrs) -> etree._Element:
    node = el("svg", class_="icon", viewBox="0 0 16 16", version="1.1", width=size, height=size, **attrs)
    sub(node, "path", fill_rule="evenodd", d=ICONS[name])
    return node


def icon_with_label(icon_name: str, label: str, testid: str, icon_size: int = ICON_SIZE) -> LayoutItem:
    """Icon followed by a label; width is the icon plus the measured label."""
    label_width = measure_text(label, LABEL_FONT_SIZE)
    group = el("g", data_testid=f"{testid}-item")
    inner = flex_layout(
        [
            LayoutItem(icon(icon_name, icon_size, y=-12), icon_size),
            LayoutItem(el("text", xml_safe(label), data_testid=testid, class_="gray"), label_width),
        ],
        gap=20 - icon_size,
    )
    group.extend(inner)
    return LayoutItem(group, icon_size + label_width)


def language_node(name: str, color: str) -> LayoutItem:
    group = el("g", data_testid="primary-lang")
    sub(group, "circle", data_testid="lang-color", cx=0, cy=-5, r=6, fill=color)
    sub(group, "text", xml_safe(name), data_testid="lang-name", class_="gray", x=LANG_NAME_OFFSET)
    return LayoutItem(group, LANG_NAME_OFFSET + measure_text(name, LABEL_FONT_SIZE))
