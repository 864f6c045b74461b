"""
HTTP surface: GET /api/pin?username=...&repo=...[&option=value...]

`handle_pin` is the whole request pipeline as a pure function of the query
string. `PinHandler` only adapts it to http.server.
"""

from __future__ import annotations
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, NamedTuple, Optional, Union
from urllib.parse import parse_qs, urlparse

from repocard import config
from repocard.card import render_error
from repocard.exceptions import RepoCardError
from repocard.fetcher import fetch_repo
from repocard.i18n import is_locale_available
from repocard.models import RenderOptions
from repocard.repo_card import render_repo_card

logger = logging.getLogger(__name__)

PIN_PATH = "/api/pin"
SVG_CONTENT_TYPE = "image/svg+xml"
DEPLOY_HINT = "Please deploy your own instance"

BOOLEAN_PARAMS = (
    "hide_border", "hide_title", "hide_text", "show_owner",
    "show_issues", "show_prs", "show_age", "disable_animations", "color_morph",
)
PASSTHROUGH_PARAMS = (
    "title_color", "icon_color", "text_color", "bg_color", "border_color", "theme",
    "border_radius", "description_lines_count", "age_metric", "animation_style",
    "wave_speed", "wave_amplitude", "wave_delay",
)

Query = Dict[str, Union[str, List[str]]]


class PinResponse(NamedTuple):
    status: int
    headers: Dict[str, str]
    body: str


def parse_boolean(value: Any) -> Optional[bool]:
    """Only the literal strings 'true' / 'false' (any case) count; anything else is unset."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False
    return None


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _first(query: Query, key: str) -> Optional[str]:
    value = query.get(key)
    if isinstance(value, list):
        return value[0] if value else None
    return value


def cache_seconds(requested: Optional[str]) -> int:
    try:
        seconds = int(requested) if requested else config.TWELVE_HOURS
    except ValueError:
        seconds = config.TWELVE_HOURS
    seconds = clamp(seconds, config.FIVE_MINUTES, config.TWELVE_HOURS)
    override = (config.CACHE_SECONDS or "").strip()
    if override.isdigit():
        seconds = int(override) or seconds
    return seconds


def error_cache_header() -> str:
    return (
        f"max-age={config.ERROR_CACHE_SECONDS // 2}, s-maxage={config.ERROR_CACHE_SECONDS}, "
        f"stale-while-revalidate={config.ONE_DAY}"
    )


def build_options(query: Query) -> RenderOptions:
    """Query string -> RenderOptions. Unset values are left to the model defaults."""
    raw: Dict[str, Any] = {}
    for key in BOOLEAN_PARAMS:
        parsed = parse_boolean(_first(query, key))
        if parsed is not None:
            raw[key] = parsed
    for key in PASSTHROUGH_PARAMS:
        value = _first(query, key)
        if value is not None and value != "":
            raw[key] = value

    if parse_boolean(_first(query, "stats_only")) is True:
        raw.update(stats_only=True, hide_title=True, hide_text=True)
    locale = _first(query, "locale")
    if locale:
        raw["locale"] = locale.lower()
    return RenderOptions.model_validate(raw)


def handle_pin(query: Query) -> PinResponse:
    username = _first(query, "username")
    colors = {key: _first(query, key) for key in ("title_color", "text_color", "bg_color", "border_color")}
    theme = _first(query, "theme") or "default"
    headers = {"Content-Type": SVG_CONTENT_TYPE}

    def error(message: str, secondary: str = "") -> PinResponse:
        return PinResponse(200, headers, render_error(message, secondary, theme=theme, **colors))

    if config.WHITELIST is not None and username not in config.WHITELIST:
        return error("This username is not whitelisted", DEPLOY_HINT)
    if config.WHITELIST is None and username in config.BLACKLIST:
        return error("This username is blacklisted", DEPLOY_HINT)

    locale = _first(query, "locale")
    if locale and not is_locale_available(locale):
        return error("Something went wrong", "Language not found")

    try:
        repo = fetch_repo(username, _first(query, "repo"))
        body = render_repo_card(repo, build_options(query))
    except RepoCardError as e:
        logger.warning(f"pin {username}/{_first(query, 'repo')}: {e.message}")
        headers["Cache-Control"] = error_cache_header()
        return error(e.message, e.secondary_message)
    except Exception as e:
        logger.exception(f"pin {username}/{_first(query, 'repo')}: unexpected error")
        headers["Cache-Control"] = error_cache_header()
        return error(str(e) or type(e).__name__)

    seconds = cache_seconds(_first(query, "cache_seconds"))
    headers["Cache-Control"] = f"max-age={seconds}, s-maxage={seconds}"
    return PinResponse(200, headers, body)


class PinHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        url = urlparse(self.path)
        if url.path.rstrip("/") != PIN_PATH:
            self.send_error(404, "Not Found")
            return
        response = handle_pin(parse_qs(url.query))
        payload = response.body.encode("utf-8")
        self.send_response(response.status)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)


def serve(host: str = "127.0.0.1", port: int = 8000):
    httpd = ThreadingHTTPServer((host, port), PinHandler)
    logger.info(f"Serving {PIN_PATH} on http://{host}:{port}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        httpd.server_close()
