"""
Fetcher test: mocks the GitHub GraphQL endpoint so retries and error mapping
can be checked without network calls.
"""
import json
from unittest.mock import patch

import pytest
import requests

from repocard import config
from repocard.exceptions import (
    FetchError,
    MissingParamError,
    RepositoryNotFoundError,
    RetryExhaustedError,
)
from repocard.fetcher import fetch_repo

REPO_NODE = {
    "name": "convoychat",
    "nameWithOwner": "anuraghazra/convoychat",
    "isPrivate": False,
    "isArchived": True,
    "isTemplate": False,
    "createdAt": "2019-01-01T00:00:00Z",
    "pushedAt": "2024-01-01T00:00:00Z",
    "stargazers": {"totalCount": 38000},
    "issues": {"totalCount": 4},
    "pullRequests": {"totalCount": 1},
    "description": "Help us take over the world!",
    "primaryLanguage": {"color": "#2b7489", "id": "MDg6TGFuZ3VhZ2UyODc=", "name": "TypeScript"},
    "forkCount": 100,
}


class FakeResp:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    def json(self):
        return self.payload


def ok(node=REPO_NODE):
    return FakeResp({"data": {"repository": node}})


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(config, "MAX_RETRIES", 3)
    monkeypatch.setattr("repocard.fetcher.time.sleep", lambda seconds: None)


@patch("requests.post", return_value=ok())
def test_fetch_repo(mock_post):
    repo = fetch_repo("anuraghazra", "convoychat", token="t0ken")
    assert repo.name == "convoychat"
    assert repo.star_count == 38000
    assert repo.fork_count == 100
    assert repo.open_issues_count == 4
    assert repo.open_prs_count == 1
    assert repo.is_archived
    assert repo.primary_language.name == "TypeScript"

    kwargs = mock_post.call_args.kwargs
    assert kwargs["json"]["variables"] == {"owner": "anuraghazra", "repo": "convoychat"}
    assert kwargs["headers"]["Authorization"] == "bearer t0ken"


@patch("requests.post")
def test_missing_params(mock_post):
    with pytest.raises(MissingParamError) as exc:
        fetch_repo("anuraghazra", None)
    assert exc.value.message == 'Missing params "repo" make sure you pass the parameters in URL'
    assert exc.value.missed_params == ["repo"]

    with pytest.raises(MissingParamError) as exc:
        fetch_repo("", "")
    assert exc.value.missed_params == ["username", "repo"]
    mock_post.assert_not_called()


@patch("requests.post", return_value=ok({**REPO_NODE, "isPrivate": True}))
def test_private_repo_is_not_found(mock_post):
    with pytest.raises(RepositoryNotFoundError) as exc:
        fetch_repo("anuraghazra", "convoychat")
    assert exc.value.message == "Repository Not found"


@patch("requests.post", return_value=ok(None))
def test_missing_repo_is_not_found(mock_post):
    with pytest.raises(RepositoryNotFoundError):
        fetch_repo("anuraghazra", "nope")


@patch("requests.post", return_value=FakeResp({"data": None}))
def test_empty_payload(mock_post):
    with pytest.raises(FetchError):
        fetch_repo("anuraghazra", "convoychat")


@patch("requests.post", return_value=FakeResp({"errors": [{"message": "Something broke"}]}))
def test_graphql_error(mock_post):
    with pytest.raises(FetchError) as exc:
        fetch_repo("anuraghazra", "convoychat")
    assert exc.value.message == "Something broke"
    assert mock_post.call_count == 1


@patch("requests.post", side_effect=[FakeResp({}, 502), FakeResp({}, 503), ok()])
def test_retries_transient_status(mock_post):
    repo = fetch_repo("anuraghazra", "convoychat")
    assert repo.name == "convoychat"
    assert mock_post.call_count == 3


@patch("requests.post", side_effect=[
    FakeResp({"errors": [{"message": "API rate limit exceeded"}]}),
    ok(),
])
def test_retries_rate_limit(mock_post):
    assert fetch_repo("anuraghazra", "convoychat").name == "convoychat"
    assert mock_post.call_count == 2


@patch("requests.post", side_effect=requests.ConnectionError("boom"))
def test_retry_exhausted(mock_post):
    with pytest.raises(RetryExhaustedError) as exc:
        fetch_repo("anuraghazra", "convoychat")
    assert exc.value.attempts == 3
    assert mock_post.call_count == 3


@patch("requests.post", return_value=FakeResp({}, 502))
def test_retry_exhausted_on_status(mock_post):
    with pytest.raises(RetryExhaustedError):
        fetch_repo("anuraghazra", "convoychat")
    assert mock_post.call_count == 3


@patch("requests.post", return_value=FakeResp({"message": "Bad credentials"}, 401))
def test_unauthorized(mock_post):
    with pytest.raises(FetchError) as exc:
        fetch_repo("anuraghazra", "convoychat")
    assert "401" in exc.value.message
    assert mock_post.call_count == 1


class HtmlResp(FakeResp):
    def __init__(self):
        super().__init__(None)
        self.text = "<html>Bad gateway</html>"

    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


@patch("requests.post", return_value=HtmlResp())
def test_non_json_body(mock_post):
    with pytest.raises(FetchError) as exc:
        fetch_repo("anuraghazra", "convoychat")
    assert exc.value.message == "Invalid response from GitHub API"
    assert mock_post.call_count == 1


@patch("requests.post", side_effect=requests.TooManyRedirects("redirect loop"))
def test_other_request_errors_are_fetch_errors(mock_post):
    with pytest.raises(FetchError) as exc:
        fetch_repo("anuraghazra", "convoychat")
    assert "redirect loop" in exc.value.message
    assert mock_post.call_count == 1
