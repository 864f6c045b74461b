"""
Repo card composer.

Layout (400 units wide):
  title row        header (optionally owner/name), truncated to 35 chars
  badge            Template / Archived pill, top right
  description      up to 3 wrapped lines
  stat row         language, stars, forks [, issues, PRs, age]
  animation layer  optional decorative shapes
"""

from __future__ import annotations
import datetime
import logging
from typing import Any, Dict, Optional, Union

from lxml import etree

from repocard.animations import AnimationStyle, RandomSource, get_animation
from repocard.card import FONT_STACK, TITLE_HEIGHT, Card
from repocard.i18n import I18n
from repocard.layout import ICON_SIZE, flex_layout, icon, icon_with_label, language_node
from repocard.models import RenderOptions, RepositoryRecord, ThemeColors, WaveTuning
from repocard.svg import el, fmt, sub
from repocard.text import (
    format_age,
    graphemes,
    k_formatter,
    parse_emojis,
    truncate_text,
    wrap_text_multiline,
    xml_safe,
)
from repocard.themes import get_card_colors

logger = logging.getLogger(__name__)

CARD_WIDTH = 400
HEADER_MAX_CHARS = 35
DESCRIPTION_LINE_WIDTH = 59
DESCRIPTION_FALLBACK = "No description provided"
LINE_HEIGHT = 10
STAT_GAP = 16
COMPACT_PADDING = 12
COMPACT_ROW_HEIGHT = ICON_SIZE + 8
LANGUAGE_FALLBACK_COLOR = "#333"
NBSP = "\u00a0"


def format_header(repo: RepositoryRecord, show_owner: bool) -> str:
    header = repo.name_with_owner if show_owner and repo.name_with_owner else repo.name
    return truncate_text(header, HEADER_MAX_CHARS)


def age_timestamp(repo: RepositoryRecord, metric: str) -> Optional[str]:
    if metric == "created":
        return repo.created_at
    if metric == "first":
        return repo.first_commit_date or repo.created_at or repo.pushed_at
    return repo.pushed_at


def wave_title(header: str, x: float, y: float, tuning: WaveTuning) -> etree._Element:
    """Title row whose characters bob one after another."""
    group = el("g", data_testid="card-title", transform=f"translate({fmt(x)}, {fmt(y)})")
    group.append(icon("repo", ICON_SIZE, x=0, y=-13))
    text = sub(group, "text", x=25, y=0, class_="wave-title", data_testid="header")
    char_class = "wave-char wave-char-morph" if tuning.color_morph else "wave-char"
    for i, char in enumerate(graphemes(xml_safe(header))):
        sub(text, "tspan", NBSP if char == " " else char, class_=char_class,
            style=f"animation-delay: {fmt(i * tuning.delay)}s")
    return group


def badge(label: str, text_color: str) -> etree._Element:
    group = el("g", data_testid="badge", class_="badge", transform="translate(320, -18)")
    sub(group, "rect", stroke=text_color, stroke_width=1, width=70, height=20, x=-12, y=-14, ry=10, rx=10)
    sub(group, "text", xml_safe(label), x=23, y=-5, alignment_baseline="central",
        dominant_baseline="central", text_anchor="middle", fill=text_color)
    return group


def description_block(lines) -> etree._Element:
    text = el("text", class_="description", x=25, y=-5)
    for line in lines:
        sub(text, "tspan", xml_safe(line), dy="1.2em", x=25)
    return text


def stat_row(repo: RepositoryRecord, options: RenderOptions, now: Optional[datetime.datetime]) -> list:
    items = []
    if repo.primary_language:
        language = repo.primary_language
        items.append(language_node(language.name or "Unspecified", language.color or LANGUAGE_FALLBACK_COLOR))
    items.append(icon_with_label("star", k_formatter(repo.star_count), "stargazers"))
    items.append(icon_with_label("fork", k_formatter(repo.fork_count), "forkcount"))

    issues = repo.open_issues_count or 0
    if options.show_issues and issues > 0:
        items.append(icon_with_label("issues", k_formatter(issues), "issues"))
    prs = repo.open_prs_count or 0
    if options.show_prs and prs > 0:
        items.append(icon_with_label("prs", k_formatter(prs), "prs"))
    if options.show_age:
        age = format_age(age_timestamp(repo, options.age_metric), now)
        if age:
            items.append(icon_with_label("commits", age, "age"))
    return flex_layout(items, STAT_GAP)


def card_css(colors: ThemeColors, wave: bool) -> str:
    rules = [
        f".description {{ font: 400 13px {FONT_STACK}; fill: {colors.text_color} }}",
        f".gray {{ font: 400 12px {FONT_STACK}; fill: {colors.text_color} }}",
        f".icon {{ fill: {colors.icon_color} }}",
        f".badge {{ font: 600 11px {FONT_STACK}; }}",
        ".badge rect { opacity: 0.2 }",
    ]
    if wave:
        rules.append(f".wave-title {{ font: 600 18px {FONT_STACK}; fill: {colors.title_color}; }}")
        rules.append("@supports(-moz-appearance: auto) { .wave-title { font-size: 15.5px; } }")
    return "\n".join(rules)


def render_repo_card(
    repo: Union[RepositoryRecord, Dict[str, Any]],
    options: Union[RenderOptions, Dict[str, Any], None] = None,
    *,
    now: Optional[datetime.datetime] = None,
    rng: Optional[RandomSource] = None,
) -> str:
    """
    Render the repo card SVG.

    `now` pins the reference time of the age badge and `rng` feeds the randomized
    animation styles; both default to the real clock and a fresh random source.
    """
    if not isinstance(repo, RepositoryRecord):
        repo = RepositoryRecord.model_validate(repo)
    if not isinstance(options, RenderOptions):
        options = RenderOptions.model_validate(options or {})

    hide_title = options.should_hide_title
    hide_text = options.should_hide_text
    compact = options.compact_layout
    header = format_header(repo, options.show_owner)

    colors = get_card_colors(
        title_color=options.title_color,
        icon_color=options.icon_color,
        text_color=options.text_color,
        bg_color=options.bg_color,
        border_color=options.border_color,
        theme=options.theme,
    )

    lines = []
    line_count = 0
    if not hide_text:
        lines = wrap_text_multiline(
            parse_emojis(repo.description or DESCRIPTION_FALLBACK),
            DESCRIPTION_LINE_WIDTH,
            options.description_max_lines,
        )
        line_count = options.description_lines_count or len(lines)
    has_description = not hide_text and line_count > 0

    height = (120 if has_description and line_count > 1 else 110) + (line_count * LINE_HEIGHT if has_description else 0)
    if compact:
        height = COMPACT_PADDING * 2 + COMPACT_ROW_HEIGHT
    row_y = height - 75 if has_description else (2.5 if compact else 0)

    card = Card(
        width=CARD_WIDTH,
        # set_hide_title takes the title row back off
        height=height + TITLE_HEIGHT if compact else height,
        colors=colors,
        border_radius=options.border_radius,
        title=header,
        title_prefix_icon="repo",
    )
    card.set_hide_border(options.hide_border)
    card.set_hide_title(hide_title)
    card.set_accessibility_label(header, repo.description or "")

    animation = get_animation(
        options.animation_style if options.has_animation else AnimationStyle.NONE.value,
        colors,
        CARD_WIDTH,
        card.height,
        options.wave,
        rng,
    )
    if options.disable_animations:
        card.disable_animations()
    if animation.enabled:
        card.enable_fade_in()
        card.set_animation_layer(animation.layer)

    wave = animation.enabled and AnimationStyle.parse(options.animation_style) is AnimationStyle.BUBBLES
    if wave and not hide_title:
        card.set_title_element(wave_title(header, card.padding_x, card.padding_y, options.wave))
    card.set_css(card_css(colors, wave) + "\n" + animation.css)

    i18n = I18n(options.locale)
    status_badge = None
    if repo.is_template:
        status_badge = badge(i18n.t("repocard.template"), colors.text_color)
    elif repo.is_archived:
        status_badge = badge(i18n.t("repocard.archived"), colors.text_color)

    row = el("g", transform=f"translate({20 if compact else 30}, {fmt(row_y)})")
    row.extend(stat_row(repo, options, now))

    logger.debug(
        f"Rendering {repo.name_with_owner or repo.name}: height={card.height} lines={line_count} "
        f"animation={options.animation_style if animation.enabled else 'none'}"
    )
    return card.render([
        status_badge,
        description_block(lines) if has_description else None,
        row,
    ])
