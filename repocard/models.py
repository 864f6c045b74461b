from __future__ import annotations
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DESCRIPTION_MAX_LINES = 3
AGE_METRICS = ("created", "pushed", "first")


class Language(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    color: Optional[str] = None


class RepositoryRecord(BaseModel):
    """
    Immutable snapshot of the repository fields a card needs.
    Counts missing from the payload default to zero instead of failing.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Repository name")
    name_with_owner: str = Field("", description="owner/name")
    description: Optional[str] = None
    primary_language: Optional[Language] = None
    is_archived: bool = False
    is_template: bool = False
    star_count: int = Field(0, ge=0)
    fork_count: int = Field(0, ge=0)
    open_issues_count: Optional[int] = Field(None, ge=0)
    open_prs_count: Optional[int] = Field(None, ge=0)
    created_at: Optional[str] = None
    pushed_at: Optional[str] = None
    first_commit_date: Optional[str] = None

    @field_validator("star_count", "fork_count", mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @classmethod
    def from_graphql(cls, node: Dict[str, Any]) -> "RepositoryRecord":
        """Translate a raw GraphQL `repository` node."""
        language = node.get("primaryLanguage")
        issues = node.get("issues")
        prs = node.get("pullRequests")
        return cls(
            name=node.get("name") or "",
            name_with_owner=node.get("nameWithOwner") or "",
            description=node.get("description"),
            primary_language=Language(name=language.get("name"), color=language.get("color")) if language else None,
            is_archived=bool(node.get("isArchived")),
            is_template=bool(node.get("isTemplate")),
            star_count=(node.get("stargazers") or {}).get("totalCount", 0),
            fork_count=node.get("forkCount", 0),
            open_issues_count=issues["totalCount"] if issues else None,
            open_prs_count=prs["totalCount"] if prs else None,
            created_at=node.get("createdAt"),
            pushed_at=node.get("pushedAt"),
            first_commit_date=node.get("firstCommitDate") or node.get("createdAt"),
        )


class WaveTuning(BaseModel):
    """Knobs of the bubbles wave title."""
    model_config = ConfigDict(frozen=True)

    speed: float = 2
    amplitude: float = 3
    delay: float = 0.05
    color_morph: bool = False


class RenderOptions(BaseModel):
    """
    Every option the repo card understands, each independently defaulted.
    Values that fail to parse fall back to the field default instead of raising.
    """
    model_config = ConfigDict(frozen=True)

    hide_border: bool = False
    hide_title: bool = False
    hide_text: bool = False
    stats_only: bool = False
    title_color: Optional[str] = None
    icon_color: Optional[str] = None
    text_color: Optional[str] = None
    bg_color: Optional[str] = None
    border_color: Optional[str] = None
    theme: str = "default_repocard"
    show_owner: bool = False
    border_radius: float = 4.5
    locale: Optional[str] = None
    description_lines_count: Optional[int] = None
    show_issues: bool = False
    show_prs: bool = False
    show_age: bool = False
    age_metric: str = "first"
    animation_style: str = "none"
    disable_animations: bool = False
    wave_speed: float = 2
    wave_amplitude: float = 3
    wave_delay: float = 0.05
    color_morph: bool = False

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_error(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)

    @field_validator("description_lines_count")
    @classmethod
    def _clamp_lines(cls, value: Optional[int]) -> Optional[int]:
        if value is None or value == 0:
            return None
        return max(1, min(value, DESCRIPTION_MAX_LINES))

    @field_validator("age_metric")
    @classmethod
    def _known_metric(cls, value: str) -> str:
        if not value:
            return "first"
        return value if value in AGE_METRICS else "pushed"

    @field_validator("animation_style", "theme")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.strip().lower()

    # ------------------ Derived flags ------------------
    @property
    def should_hide_title(self) -> bool:
        return self.stats_only or self.hide_title

    @property
    def should_hide_text(self) -> bool:
        return self.stats_only or self.hide_text

    @property
    def compact_layout(self) -> bool:
        return self.should_hide_title and self.should_hide_text

    @property
    def has_animation(self) -> bool:
        return not self.disable_animations and self.animation_style != "none"

    @property
    def description_max_lines(self) -> int:
        return self.description_lines_count or DESCRIPTION_MAX_LINES

    @property
    def wave(self) -> WaveTuning:
        return WaveTuning(
            speed=self.wave_speed,
            amplitude=self.wave_amplitude,
            delay=self.wave_delay,
            color_morph=self.color_morph,
        )


Background = Union[str, Tuple[str, ...]]


class ThemeColors(BaseModel):
    """Resolved card colours. `bg_color` is a tuple (angle, stop, stop, ...) for gradients."""
    model_config = ConfigDict(frozen=True)

    title_color: str
    icon_color: str
    text_color: str
    bg_color: Background
    border_color: str

    @property
    def is_gradient(self) -> bool:
        return isinstance(self.bg_color, tuple)
