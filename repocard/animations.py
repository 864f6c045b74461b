"""
Decorative animation layers for the repo card.

Every style is a generator that returns the CSS rules and the `animation-layer`
group it needs. `bubbles`, `radiant` and `circuit` are pure functions of the card
size and colours; `embers` and `sparks` scatter shapes using the random source
they are given (anything with a `random()` method), so a seeded source makes
them reproducible.
"""

from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Protocol

from lxml import etree

from repocard.models import ThemeColors, WaveTuning
from repocard.svg import el, fmt, sub

logger = logging.getLogger(__name__)

FALLBACK_ICON_COLOR = "#38bdf8"
FALLBACK_TITLE_COLOR = "#00d9ff"
FALLBACK_TEXT_COLOR = "#434d58"

BUBBLE_COUNT = 8
JELLYFISH_COUNT = 2
TENTACLE_COUNT = 6
STARFISH_COUNT = 2
EMBER_COUNT = 12
RAY_COUNT = 16
RAY_LENGTH = 80
CIRCUIT_DOT_COUNT = 6
SPARK_COUNT = 10


class AnimationStyle(str, Enum):
    NONE = "none"
    BUBBLES = "bubbles"
    EMBERS = "embers"
    RADIANT = "radiant"
    CIRCUIT = "circuit"
    SPARKS = "sparks"

    @classmethod
    def parse(cls, name: Optional[str]) -> "AnimationStyle":
        """Unknown names map to NONE."""
        try:
            return cls((name or "none").strip().lower())
        except ValueError:
            logger.debug(f"Unknown animation style {name!r}; rendering without animation")
            return cls.NONE


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class Animation:
    css: str = ""
    layer: Optional[etree._Element] = None

    @property
    def enabled(self) -> bool:
        return self.layer is not None


NO_ANIMATION = Animation()


@dataclass(frozen=True)
class _Canvas:
    width: float
    height: float
    icon: str
    title: str
    text: str
    tuning: WaveTuning
    rng: RandomSource


def _with_alpha(color: str, alpha: str) -> str:
    if len(color) == 4:  # #rgb
        color = "#" + "".join(c * 2 for c in color[1:])
    if len(color) == 7:
        return color + alpha
    return color


def _layer() -> etree._Element:
    return el("g", class_="animation-layer")


# ------------------ bubbles ------------------
def _star_path(size: float) -> str:
    points = []
    for p in range(5):
        angle = math.radians(p * 72 - 90)
        inner_angle = math.radians(p * 72 + 36 - 90)
        outer_x, outer_y = math.cos(angle) * size, math.sin(angle) * size
        inner_x, inner_y = math.cos(inner_angle) * size * 0.4, math.sin(inner_angle) * size * 0.4
        points.append(
            f"{'M' if p == 0 else 'L'} {fmt(outer_x)},{fmt(outer_y)} L {fmt(inner_x)},{fmt(inner_y)}"
        )
    return " ".join(points) + " Z"


def _bubbles(c: _Canvas) -> Animation:
    layer = _layer()

    defs = sub(layer, "defs")
    glow = sub(defs, "filter", id="jellyfish-glow", x="-50%", y="-50%", width="200%", height="200%")
    sub(glow, "feGaussianBlur", stdDeviation=3, result="coloredBlur")
    merge = sub(glow, "feMerge")
    sub(merge, "feMergeNode", **{"in": "coloredBlur"})
    sub(merge, "feMergeNode", **{"in": "SourceGraphic"})

    for i in range(JELLYFISH_COUNT):
        start_y = c.height * 0.3 + i * c.height * 0.25
        delay = i * 12 + 2
        bell = 12 + i * 3
        g = sub(layer, "g", class_=f"jellyfish jellyfish-{i}", style=f"animation-delay: {delay}s;")
        sub(g, "ellipse", cx=0, cy=start_y, rx=bell, ry=bell * 0.8, fill=c.title,
            opacity=0.4, filter="url(#jellyfish-glow)")
        sub(g, "ellipse", cx=0, cy=start_y, rx=bell * 0.7, ry=bell * 0.6, fill=c.title, opacity=0.6)
        for t in range(TENTACLE_COUNT):
            tx = -bell * 0.6 + t * bell * 0.24
            d = (
                f"M {fmt(tx)},{fmt(start_y + bell * 0.6)} "
                f"Q {fmt(tx + 2)},{fmt(start_y + bell + 5)} "
                f"{fmt(tx)},{fmt(start_y + bell * 1.5 + t * 2)}"
            )
            sub(g, "path", class_=f"tentacle tentacle-{t}", d=d, stroke=c.icon, stroke_width=1.5,
                fill="none", opacity=0.5, style=f"animation-delay: {fmt(delay + t * 0.1)}s;")
        sub(g, "animateMotion", dur="20s", repeatCount="indefinite", begin=f"{delay}s",
            path=(f"M -50,0 Q {fmt(c.width * 0.3)},{-15 + i * 8} "
                  f"{fmt(c.width * 0.7)},{8 - i * 6} T {fmt(c.width + 50)},0"))

    for i in range(STARFISH_COUNT):
        start_y = c.height * 0.5 + i * c.height * 0.2
        delay = i * 15 + 7
        g = sub(layer, "g", class_=f"starfish starfish-{i}", style=f"animation-delay: {delay}s;")
        sub(g, "path", d=_star_path(8 + i * 2), fill=c.icon, opacity=0.4, stroke=c.title, stroke_width=0.5)
        sub(g, "animateMotion", dur="25s", repeatCount="indefinite", begin=f"{delay}s",
            path=(f"M {fmt(c.width + 50)},{fmt(start_y)} Q {fmt(c.width * 0.6)},{fmt(start_y - 10)} "
                  f"{fmt(c.width * 0.3)},{fmt(start_y + 8)} T -50,{fmt(start_y)}"))
        sub(g, "animateTransform", attributeName="transform", type="rotate", from_="0 0 0",
            to="360 0 0", dur="15s", repeatCount="indefinite", begin=f"{delay}s")

    for i in range(BUBBLE_COUNT):
        sub(layer, "circle", class_=f"bubble bubble-{i}", cx=c.width * (i + 1) / 9, cy=c.height,
            r=3 + (i % 3) * 2, fill=c.icon, opacity=0.3,
            style=f"animation-delay: {fmt(i * 0.4)}s; animation-duration: {3 + i % 3}s;")

    speed = c.tuning.speed
    css = f"""
    @keyframes bubbleFloat {{
      0% {{ transform: translateY(0) scale(1); opacity: 0.3; }}
      50% {{ opacity: 0.5; }}
      100% {{ transform: translateY(-{fmt(c.height + 20)}px) scale(0.5); opacity: 0; }}
    }}
    @keyframes jellyfishPulse {{
      0%, 100% {{ opacity: 0; }}
      10%, 90% {{ opacity: 1; }}
      50% {{ opacity: 0.8; }}
    }}
    @keyframes tentacleWave {{
      0%, 100% {{ transform: translateX(0); }}
      50% {{ transform: translateX(2px); }}
    }}
    @keyframes starfishDrift {{
      0%, 100% {{ opacity: 0; }}
      10%, 90% {{ opacity: 1; }}
    }}
    @keyframes letterWave {{
      0%, 100% {{ transform: translateY(0px); }}
      50% {{ transform: translateY(-{fmt(c.tuning.amplitude)}px); }}
    }}
    @keyframes colorMorph {{
      0% {{ fill: {c.title}; }}
      25% {{ fill: {c.icon}; }}
      50% {{ fill: {c.text}; }}
      75% {{ fill: {c.icon}; }}
      100% {{ fill: {c.title}; }}
    }}
    .bubble {{ animation: bubbleFloat 3s infinite ease-in-out; }}
    .jellyfish {{
      animation: jellyfishPulse 20s infinite ease-in-out;
      filter: drop-shadow(0 0 4px {_with_alpha(c.title, "40")});
    }}
    .tentacle {{ animation: tentacleWave 2s infinite ease-in-out; }}
    .starfish {{ animation: starfishDrift 25s infinite ease-in-out; }}
    .wave-char {{ animation: letterWave {fmt(speed)}s ease-in-out infinite; }}
    .wave-char-morph {{
      animation: letterWave {fmt(speed)}s ease-in-out infinite, colorMorph {fmt(speed * 3)}s ease-in-out infinite;
    }}
    """
    return Animation(css, layer)


# ------------------ embers ------------------
def _embers(c: _Canvas) -> Animation:
    layer = _layer()
    for i in range(EMBER_COUNT):
        x = 10 + c.rng.random() * (c.width - 20)
        y = c.height * 0.2 + c.rng.random() * (c.height * 0.6)
        size = 1.5 + c.rng.random() * 2
        sub(layer, "circle", class_=f"ember ember-{i}", cx=x, cy=y, r=size, fill=c.title,
            style=f"animation-delay: {fmt(i * 0.3)}s;")
    css = """
    @keyframes emberGlow {
      0%, 100% { opacity: 0.2; filter: blur(0px); }
      25% { opacity: 0.8; filter: blur(1px); }
      50% { opacity: 0.4; filter: blur(0.5px); }
      75% { opacity: 0.9; filter: blur(1.5px); }
    }
    @keyframes emberFloat {
      0%, 100% { transform: translate(0, 0); }
      33% { transform: translate(3px, -5px); }
      66% { transform: translate(-3px, 5px); }
    }
    .ember { animation: emberGlow 2s infinite ease-in-out, emberFloat 4s infinite ease-in-out; }
    """
    return Animation(css, layer)


# ------------------ radiant ------------------
def _radiant(c: _Canvas) -> Animation:
    layer = _layer()
    cx, cy = c.width / 2, c.height / 2
    for i in range(RAY_COUNT):
        angle = math.radians(i * 360 / RAY_COUNT)
        sub(layer, "line", class_=f"ray ray-{i}", x1=cx, y1=cy,
            x2=cx + math.cos(angle) * RAY_LENGTH, y2=cy + math.sin(angle) * RAY_LENGTH,
            stroke=c.icon, stroke_width=1.5, opacity=0.2, style=f"animation-delay: {fmt(i * 0.05)}s;")
    sub(layer, "circle", class_="radiant-core", cx=cx, cy=cy, r=8, fill=c.title, opacity=0.3)
    origin = f"{fmt(cx)}px {fmt(cy)}px"
    css = f"""
    @keyframes rayPulse {{
      0%, 100% {{ opacity: 0.1; stroke-width: 1; }}
      50% {{ opacity: 0.4; stroke-width: 2; }}
    }}
    @keyframes corePulse {{
      0%, 100% {{ opacity: 0.2; transform: scale(1); }}
      50% {{ opacity: 0.5; transform: scale(1.2); }}
    }}
    .ray {{ animation: rayPulse 2s infinite ease-in-out; transform-origin: {origin}; }}
    .radiant-core {{ animation: corePulse 2s infinite ease-in-out; transform-origin: {origin}; }}
    """
    return Animation(css, layer)


# ------------------ circuit ------------------
def _circuit(c: _Canvas) -> Animation:
    layer = _layer()
    w, h = c.width, c.height
    edges = (
        ("top", 5, 5, w - 10, 1),
        ("right", w - 6, 5, 1, h - 10),
        ("bottom", 5, h - 6, w - 10, 1),
        ("left", 5, 5, 1, h - 10),
    )
    for side, x, y, ew, eh in edges:
        sub(layer, "rect", class_=f"circuit-glow-{side}", x=x, y=y, width=ew, height=eh,
            fill=c.icon, opacity=0.2)
    perimeter = f"M 5,5 L {fmt(w - 5)},5 L {fmt(w - 5)},{fmt(h - 5)} L 5,{fmt(h - 5)} Z"
    for i in range(CIRCUIT_DOT_COUNT):
        delay = fmt(i * 0.8)
        dot = sub(layer, "circle", class_=f"circuit-dot circuit-dot-{i}", r=3, fill=c.title,
                  opacity=0.6, style=f"animation-delay: {delay}s;")
        sub(dot, "animateMotion", dur="4s", repeatCount="indefinite", path=perimeter, begin=f"{delay}s")
    css = f"""
    @keyframes circuitGlow {{
      0%, 100% {{ opacity: 0.1; }}
      50% {{ opacity: 0.4; }}
    }}
    .circuit-dot {{ filter: drop-shadow(0 0 2px {c.title}); }}
    [class^="circuit-glow-"] {{ animation: circuitGlow 2s infinite ease-in-out; }}
    """
    return Animation(css, layer)


# ------------------ sparks ------------------
def _sparks(c: _Canvas) -> Animation:
    layer = _layer()
    for i in range(SPARK_COUNT):
        x = 20 + c.rng.random() * (c.width - 40)
        y = 20 + c.rng.random() * (c.height - 40)
        rotation = c.rng.random() * 360
        g = sub(layer, "g", class_=f"spark spark-{i}",
                transform=f"translate({fmt(x)}, {fmt(y)}) rotate({fmt(rotation)})",
                style=f"animation-delay: {fmt(i * 0.5)}s;")
        sub(g, "line", x1=-6, y1=0, x2=6, y2=0, stroke=c.title, stroke_width=2, opacity=0.8)
        sub(g, "line", x1=0, y1=-6, x2=0, y2=6, stroke=c.title, stroke_width=2, opacity=0.8)
        sub(g, "line", x1=-4, y1=-4, x2=4, y2=4, stroke=c.icon, stroke_width=1.5, opacity=0.6)
        sub(g, "line", x1=-4, y1=4, x2=4, y2=-4, stroke=c.icon, stroke_width=1.5, opacity=0.6)
    css = """
    @keyframes sparkFlash {
      0%, 90%, 100% { opacity: 0; transform: scale(0); }
      5% { opacity: 1; transform: scale(1.2); }
      10% { opacity: 0.8; transform: scale(0.9); }
      15% { opacity: 0; transform: scale(0.6); }
    }
    .spark { animation: sparkFlash 5s infinite ease-in-out; transform-origin: center; }
    """
    return Animation(css, layer)


_GENERATORS: Dict[AnimationStyle, Callable[[_Canvas], Animation]] = {
    AnimationStyle.BUBBLES: _bubbles,
    AnimationStyle.EMBERS: _embers,
    AnimationStyle.RADIANT: _radiant,
    AnimationStyle.CIRCUIT: _circuit,
    AnimationStyle.SPARKS: _sparks,
}


def get_animation(
    style: Optional[str],
    colors: Optional[ThemeColors],
    width: float,
    height: float,
    tuning: Optional[WaveTuning] = None,
    rng: Optional[RandomSource] = None,
) -> Animation:
    """
    Build the CSS and `animation-layer` group for `style`.
    `none` and unknown names return an empty Animation.
    """
    kind = AnimationStyle.parse(style)
    generator = _GENERATORS.get(kind)
    if generator is None:
        return NO_ANIMATION
    canvas = _Canvas(
        width=width,
        height=height,
        icon=(colors.icon_color if colors else None) or FALLBACK_ICON_COLOR,
        title=(colors.title_color if colors else None) or FALLBACK_TITLE_COLOR,
        text=(colors.text_color if colors else None) or FALLBACK_TEXT_COLOR,
        tuning=tuning or WaveTuning(),
        rng=rng if rng is not None else random.Random(),
    )
    return generator(canvas)
