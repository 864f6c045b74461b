"""SVG cards for GitHub repositories."""

from repocard.animations import AnimationStyle, get_animation
from repocard.card import Card, render_error
from repocard.exceptions import (
    FetchError,
    MissingParamError,
    RepoCardError,
    RepositoryNotFoundError,
    RetryExhaustedError,
)
from repocard.fetcher import fetch_repo
from repocard.models import Language, RenderOptions, RepositoryRecord, ThemeColors, WaveTuning
from repocard.repo_card import render_repo_card
from repocard.text import format_age, k_formatter, measure_text, wrap_text_multiline

__version__ = "1.0.0"

__all__ = [
    "AnimationStyle",
    "Card",
    "FetchError",
    "Language",
    "MissingParamError",
    "RenderOptions",
    "RepoCardError",
    "RepositoryNotFoundError",
    "RepositoryRecord",
    "RetryExhaustedError",
    "ThemeColors",
    "WaveTuning",
    "fetch_repo",
    "format_age",
    "get_animation",
    "k_formatter",
    "measure_text",
    "render_error",
    "render_repo_card",
    "wrap_text_multiline",
]
