"""
Pin endpoint test: the fetcher is mocked so access lists, cache headers and
error cards can be checked offline.
"""
import threading
from http.server import ThreadingHTTPServer
from unittest.mock import patch

import pytest
import requests

from repocard import config
from repocard.__main__ import main
from repocard.exceptions import RepositoryNotFoundError
from repocard.models import RepositoryRecord
from repocard.server import PinHandler, build_options, handle_pin, parse_boolean

RECORD = RepositoryRecord(
    name="convoychat",
    name_with_owner="anuraghazra/convoychat",
    description="Help us take over the world!",
    star_count=38000,
    fork_count=100,
)

ERROR_CACHE = "max-age=300, s-maxage=600, stale-while-revalidate=86400"


@pytest.fixture(autouse=True)
def open_access(monkeypatch):
    monkeypatch.setattr(config, "WHITELIST", None)
    monkeypatch.setattr(config, "CACHE_SECONDS", None)


def pin(**params):
    return handle_pin({key: [value] for key, value in params.items()})


@patch("repocard.server.fetch_repo", return_value=RECORD)
def test_success(mock_fetch):
    response = pin(username="anuraghazra", repo="convoychat")
    assert response.status == 200
    assert response.headers["Content-Type"] == "image/svg+xml"
    assert response.headers["Cache-Control"] == "max-age=43200, s-maxage=43200"
    assert 'data-testid="card-title"' in response.body
    mock_fetch.assert_called_once_with("anuraghazra", "convoychat")


@patch("repocard.server.fetch_repo", return_value=RECORD)
def test_cache_seconds_clamped(mock_fetch):
    assert pin(username="a", repo="b", cache_seconds="100").headers["Cache-Control"] == "max-age=300, s-maxage=300"
    assert pin(username="a", repo="b", cache_seconds="999999").headers["Cache-Control"] == (
        "max-age=43200, s-maxage=43200"
    )
    assert pin(username="a", repo="b", cache_seconds="junk").headers["Cache-Control"] == (
        "max-age=43200, s-maxage=43200"
    )


@patch("repocard.server.fetch_repo", return_value=RECORD)
def test_cache_seconds_env_override(mock_fetch, monkeypatch):
    monkeypatch.setattr(config, "CACHE_SECONDS", "1000")
    assert pin(username="a", repo="b", cache_seconds="500").headers["Cache-Control"] == "max-age=1000, s-maxage=1000"


@patch("repocard.server.fetch_repo")
def test_whitelist(mock_fetch, monkeypatch):
    monkeypatch.setattr(config, "WHITELIST", ["anuraghazra"])
    response = pin(username="someone", repo="x")
    assert "This username is not whitelisted" in response.body
    assert response.headers["Content-Type"] == "image/svg+xml"
    mock_fetch.assert_not_called()


@patch("repocard.server.fetch_repo", return_value=RECORD)
def test_whitelist_bypasses_blacklist(mock_fetch, monkeypatch):
    monkeypatch.setattr(config, "WHITELIST", ["renovate-bot"])
    assert "blacklisted" not in pin(username="renovate-bot", repo="x").body


@patch("repocard.server.fetch_repo")
def test_blacklist(mock_fetch):
    response = pin(username="renovate-bot", repo="x")
    assert "This username is blacklisted" in response.body
    mock_fetch.assert_not_called()


@patch("repocard.server.fetch_repo")
def test_unknown_locale(mock_fetch):
    response = pin(username="anuraghazra", repo="convoychat", locale="xx")
    assert "Something went wrong" in response.body
    assert "Language not found" in response.body
    mock_fetch.assert_not_called()


@patch("repocard.server.fetch_repo", side_effect=RepositoryNotFoundError())
def test_fetch_error_card(mock_fetch):
    response = pin(username="anuraghazra", repo="nope")
    assert "Repository Not found" in response.body
    assert "Something went wrong!" in response.body
    assert response.headers["Cache-Control"] == ERROR_CACHE


@patch("requests.post")
def test_non_json_response_card(mock_post):
    mock_post.return_value.status_code = 200
    mock_post.return_value.json.side_effect = ValueError("Expecting value")
    response = pin(username="anuraghazra", repo="convoychat")
    assert "Invalid response from GitHub API" in response.body
    assert response.headers["Cache-Control"] == ERROR_CACHE


@patch("repocard.server.fetch_repo", side_effect=RuntimeError("boom"))
def test_unexpected_error_card(mock_fetch):
    response = pin(username="anuraghazra", repo="convoychat")
    assert response.status == 200
    assert "boom" in response.body
    assert response.headers["Content-Type"] == "image/svg+xml"
    assert response.headers["Cache-Control"] == ERROR_CACHE


def test_missing_params_card():
    response = handle_pin({"username": "anuraghazra"})
    assert 'Missing params "repo"' in response.body
    assert response.headers["Cache-Control"] == ERROR_CACHE


def test_parse_boolean():
    assert parse_boolean("true") is True
    assert parse_boolean("FALSE") is False
    assert parse_boolean("1") is None
    assert parse_boolean(None) is None
    assert parse_boolean(True) is True


def test_build_options():
    options = build_options({
        "stats_only": ["true"],
        "hide_border": ["yes"],
        "show_issues": ["true"],
        "theme": ["Dark"],
        "locale": ["DE"],
        "description_lines_count": ["2"],
    })
    assert options.hide_title and options.hide_text and options.stats_only
    assert options.hide_border is False
    assert options.show_issues is True
    assert options.theme == "dark"
    assert options.locale == "de"
    assert options.description_lines_count == 2


@patch("repocard.server.fetch_repo", return_value=RECORD)
def test_pin_handler(mock_fetch):
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), PinHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    base = f"http://127.0.0.1:{httpd.server_address[1]}"
    try:
        r = requests.get(f"{base}/api/pin?username=anuraghazra&repo=convoychat&theme=dark", timeout=10)
        assert r.status_code == 200
        assert r.headers["Content-Type"] == "image/svg+xml"
        assert r.text.startswith("<svg")

        assert requests.get(f"{base}/api/other", timeout=10).status_code == 404
    finally:
        httpd.shutdown()
        httpd.server_close()


@patch("repocard.__main__.fetch_repo", return_value=RECORD)
def test_cli_render(mock_fetch, tmp_path):
    out = tmp_path / "card.svg"
    code = main(["render", "anuraghazra/convoychat", "-o", str(out), "--option", "theme=dark",
                 "--option", "hide_border=true"])
    assert code == 0
    svg = out.read_text(encoding="utf-8")
    assert svg.startswith("<svg")
    assert 'stroke-opacity="0"' in svg
    mock_fetch.assert_called_once_with("anuraghazra", "convoychat", token=None)


def test_cli_rejects_bad_repo():
    assert main(["render", "no-slash"]) == 2
