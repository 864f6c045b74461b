from __future__ import annotations
from typing import Iterable, Optional

from lxml import etree

from repocard.layout import ICON_SIZE, LayoutItem, flex_layout, icon
from repocard.models import ThemeColors
from repocard.svg import el, fmt, sub, to_string
from repocard.text import measure_text, xml_safe
from repocard.themes import get_card_colors

FONT_STACK = "'Segoe UI', Ubuntu, Sans-Serif"
TITLE_HEIGHT = 30
ERROR_CARD_WIDTH = 495
ERROR_CARD_HEIGHT = 120

FADE_IN_KEYFRAMES = """
    @keyframes scaleInAnimation {
      from { transform: translate(-5px, 5px) scale(0); }
      to { transform: translate(-5px, 5px) scale(1); }
    }
    @keyframes fadeInAnimation {
      from { opacity: 0; }
      to { opacity: 1; }
    }
"""
FREEZE_ANIMATIONS = "* { animation-duration: 0s !important; animation-delay: 0s !important; }"


class Card:
    """
    Fixed-width card frame: background, border, title row and a body group.
    The body is positioned below the title, or near the top when the title is hidden.
    """

    def __init__(
        self,
        width: float = 100,
        height: float = 100,
        colors: Optional[ThemeColors] = None,
        border_radius: float = 4.5,
        title: str = "",
        title_prefix_icon: Optional[str] = None,
    ):
        self.width = width
        self.height = height
        self.colors = colors or get_card_colors()
        self.border_radius = border_radius
        self.title = title
        self.title_prefix_icon = title_prefix_icon
        self.padding_x = 25
        self.padding_y = 35
        self.hide_border = False
        self.hide_title = False
        self.animations = True
        self.fade_in = False
        self.css = ""
        self.title_element: Optional[etree._Element] = None
        self.animation_layer: Optional[etree._Element] = None
        self.a11y_title = ""
        self.a11y_desc = ""

    def set_hide_border(self, value: bool):
        self.hide_border = value

    def set_hide_title(self, value: bool):
        self.hide_title = value
        if value:
            self.height -= TITLE_HEIGHT

    def disable_animations(self):
        self.animations = False

    def enable_fade_in(self):
        self.fade_in = True

    def set_css(self, value: str):
        self.css = value

    def set_title_element(self, element: etree._Element):
        """Replace the default title row (used by the wave title)."""
        self.title_element = element

    def set_animation_layer(self, layer: Optional[etree._Element]):
        """Decorative layer drawn over the background, behind the title and body."""
        self.animation_layer = layer

    def set_accessibility_label(self, title: str, desc: str):
        self.a11y_title = title
        self.a11y_desc = desc

    # ------------------ Rendering ------------------
    def title_icon(self) -> etree._Element:
        return icon(self.title_prefix_icon, ICON_SIZE, x=0, y=-13)

    def render_title(self) -> etree._Element:
        if self.title_element is not None:
            return self.title_element
        group = el("g", data_testid="card-title", transform=f"translate({self.padding_x}, {self.padding_y})")
        header = el("text", xml_safe(self.title), x=0, y=0, class_="header", data_testid="header")
        items = [LayoutItem(header, measure_text(self.title, 18))]
        if self.title_prefix_icon:
            items.insert(0, LayoutItem(self.title_icon(), ICON_SIZE))
        group.extend(flex_layout(items, gap=25 - ICON_SIZE))
        return group

    def _style(self) -> str:
        header_animation = " animation: fadeInAnimation 0.8s ease-in-out forwards;" if self.fade_in else ""
        rules = [
            f".header {{ font: 600 18px {FONT_STACK}; fill: {self.colors.title_color};{header_animation} }}",
            "@supports(-moz-appearance: auto) { .header { font-size: 15.5px; } }",
            self.css,
        ]
        if self.fade_in:
            rules.append(FADE_IN_KEYFRAMES)
        if not self.animations:
            rules.append(FREEZE_ANIMATIONS)
        return "\n".join(rules)

    def _background_fill(self, root: etree._Element) -> str:
        if not self.colors.is_gradient:
            return self.colors.bg_color
        angle, *stops = self.colors.bg_color
        defs = sub(root, "defs")
        gradient = sub(defs, "linearGradient", id="gradient", gradientTransform=f"rotate({angle})",
                       gradientUnits="userSpaceOnUse")
        for index, stop in enumerate(stops):
            sub(gradient, "stop", offset=f"{fmt(index * 100 / (len(stops) - 1))}%", stop_color=f"#{stop}")
        return "url(#gradient)"

    def render(self, body: Iterable[Optional[etree._Element]]) -> str:
        root = el(
            "svg",
            width=self.width,
            height=self.height,
            viewBox=f"0 0 {fmt(self.width)} {fmt(self.height)}",
            fill="none",
            role="img",
            aria_labelledby="descId",
        )
        sub(root, "title", xml_safe(self.a11y_title), id="titleId")
        sub(root, "desc", xml_safe(self.a11y_desc), id="descId")
        sub(root, "style", self._style())
        fill = self._background_fill(root)
        sub(
            root,
            "rect",
            data_testid="card-bg",
            x=0.5,
            y=0.5,
            rx=self.border_radius,
            height="99%",
            stroke=self.colors.border_color,
            width=self.width - 1,
            fill=fill,
            stroke_opacity=0 if self.hide_border else 1,
        )
        if self.animation_layer is not None:
            root.append(self.animation_layer)
        if not self.hide_title:
            root.append(self.render_title())
        main = sub(
            root,
            "g",
            data_testid="main-card-body",
            transform=f"translate(0, {self.padding_x if self.hide_title else self.padding_y + 20})",
        )
        for node in body:
            if node is not None:
                main.append(node)
        return to_string(root)


def render_error(
    message: str,
    secondary_message: str = "",
    title_color: Optional[str] = None,
    text_color: Optional[str] = None,
    bg_color: Optional[str] = None,
    border_color: Optional[str] = None,
    theme: Optional[str] = "default",
) -> str:
    """Fixed-size card shown instead of a repo card when anything upstream fails."""
    colors = get_card_colors(
        title_color=title_color,
        text_color=text_color,
        bg_color=bg_color,
        border_color=border_color,
        theme=theme,
    )
    bg = f"#{colors.bg_color[1]}" if colors.is_gradient else colors.bg_color
    root = el(
        "svg",
        width=ERROR_CARD_WIDTH,
        height=ERROR_CARD_HEIGHT,
        viewBox=f"0 0 {ERROR_CARD_WIDTH} {ERROR_CARD_HEIGHT}",
        fill=bg,
    )
    sub(root, "style", "\n".join([
        f".text {{ font: 600 16px {FONT_STACK}; fill: {colors.title_color} }}",
        f".small {{ font: 600 12px {FONT_STACK}; fill: {colors.text_color} }}",
        ".gray { fill: #858585 }",
    ]))
    sub(root, "rect", x=0.5, y=0.5, width=ERROR_CARD_WIDTH - 1, height="99%", rx=4.5, fill=bg,
        stroke=colors.border_color)
    sub(root, "text", "Something went wrong!", x=25, y=45, class_="text")
    text = sub(root, "text", data_testid="message", x=25, y=55, class_="text small")
    sub(text, "tspan", xml_safe(message), x=25, dy=18)
    sub(text, "tspan", xml_safe(secondary_message), x=25, dy=18, class_="gray")
    return to_string(root)
